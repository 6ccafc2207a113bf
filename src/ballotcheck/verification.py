"""
Verification controller.

Two protocols, selected by VerificationMode:

  INTEGRITY  POST {p}    -> /ballot-papers/control-integrity
             decrypt local (c, k, i) -> classify -> render
  PRESENCE   POST {p, f} -> /ballot-papers/control-presence
             response.b must equal local b (exact string equality)

Each run() owns a fresh VerificationSession walking
IDLE -> REQUESTING -> SUCCEEDED | FAILED. Every VerificationError raised on
the way ends the attempt as FAILED; a display model is only produced once
every step succeeded.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple
from uuid import uuid4

import logging

from ballotcheck.aead_codec import decrypt_ballot_paper
from ballotcheck.ballot_classifier import classify_ballot
from ballotcheck.ballot_renderer import DisplayModel, render_ballot
from ballotcheck.config import Settings, load_settings
from ballotcheck.control_elements import ControlElements, check_domain
from ballotcheck.errors import (
    ConfigurationError,
    PresenceMismatchError,
    ServerDataError,
    VerificationError,
)
from ballotcheck.server_response import ControlResponse
from ballotcheck.transport import RequestsTransport


class VerificationMode(Enum):
    INTEGRITY = ("integrity", "/ballot-papers/control-integrity", ("c", "k", "i"))
    PRESENCE = ("presence", "/ballot-papers/control-presence", ("b",))

    def __init__(self, discriminator: str, path: str, required: Tuple[str, ...]) -> None:
        self.discriminator = discriminator
        self.path = path
        self.required = required

    @classmethod
    def from_discriminator(cls, value: Any) -> "VerificationMode":
        for mode in cls:
            if mode.discriminator == value:
                return mode
        raise ConfigurationError(value)

    def request_payload(self, elements: ControlElements) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"p": elements.polling_station_token}
        if self is VerificationMode.PRESENCE and elements.extra is not None:
            payload["f"] = elements.extra
        return payload


class VerificationState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


_TRANSITIONS = {
    VerificationState.IDLE: {VerificationState.REQUESTING, VerificationState.FAILED},
    VerificationState.REQUESTING: {VerificationState.SUCCEEDED, VerificationState.FAILED},
    VerificationState.SUCCEEDED: set(),
    VerificationState.FAILED: set(),
}


@dataclass
class VerificationSession:
    mode: VerificationMode
    elements: ControlElements
    session_id: str = field(default_factory=lambda: str(uuid4()))
    state: VerificationState = VerificationState.IDLE
    transitions: List[VerificationState] = field(default_factory=lambda: [VerificationState.IDLE])

    def advance(self, new_state: VerificationState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"illegal transition {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.transitions.append(new_state)


@dataclass(frozen=True)
class VerificationOutcome:
    session_id: str
    mode: VerificationMode
    state: VerificationState
    header: Optional[List[str]] = None
    display: Optional[DisplayModel] = None
    encrypted_ballot: Optional[str] = None
    error: Optional[VerificationError] = None

    @property
    def succeeded(self) -> bool:
        return self.state is VerificationState.SUCCEEDED


class Transport(Protocol):
    def post_json(self, url: str, payload: Dict[str, Any]) -> Dict[str, Any]: ...


class VerificationController:
    def __init__(
        self,
        *,
        transport: Optional[Transport] = None,
        settings: Optional[Settings] = None,
        present: Optional[Callable[[VerificationOutcome], None]] = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.transport = transport or RequestsTransport(timeout_s=self.settings.timeout_s)
        self.present = present

    def target_url(self, mode: VerificationMode, elements: ControlElements) -> str:
        host = check_domain(elements.domain, self.settings.domain_suffix)
        return f"{self.settings.scheme}://{host}{mode.path}"

    def run(self, mode: VerificationMode, elements: ControlElements) -> VerificationOutcome:
        session = VerificationSession(mode=mode, elements=elements)
        try:
            outcome = self._run(session)
        except VerificationError as e:
            logging.getLogger(__name__).warning(
                "%s control failed (session %s): %s", mode.discriminator, session.session_id, e.__class__.__name__
            )
            session.advance(VerificationState.FAILED)
            outcome = VerificationOutcome(
                session_id=session.session_id, mode=mode, state=session.state, error=e
            )
        if self.present is not None:
            self.present(outcome)
        return outcome

    def _run(self, session: VerificationSession) -> VerificationOutcome:
        mode, elements = session.mode, session.elements
        url = self.target_url(mode, elements)
        elements.require(mode.required)

        session.advance(VerificationState.REQUESTING)
        body = self.transport.post_json(url, mode.request_payload(elements))
        response = ControlResponse.from_json(body)

        if mode is VerificationMode.INTEGRITY:
            display = self._check_integrity(elements, response)
            session.advance(VerificationState.SUCCEEDED)
            return VerificationOutcome(
                session_id=session.session_id,
                mode=mode,
                state=session.state,
                header=response.header_lines(),
                display=display,
            )

        self._check_presence(elements, response)
        session.advance(VerificationState.SUCCEEDED)
        return VerificationOutcome(
            session_id=session.session_id,
            mode=mode,
            state=session.state,
            header=response.header_lines(),
            encrypted_ballot=response.encrypted_ballot,
        )

    def _check_integrity(self, elements: ControlElements, response: ControlResponse) -> DisplayModel:
        if not response.vote_label:
            raise ServerDataError()
        raw = decrypt_ballot_paper(
            elements.cipher_text_with_tag,
            elements.key,
            elements.iv,
            strict=self.settings.strict_plaintext,
        )
        classified = classify_ballot(raw, response.reference)
        return render_ballot(classified, response.reference)

    def _check_presence(self, elements: ControlElements, response: ControlResponse) -> None:
        b = response.encrypted_ballot
        if not isinstance(b, str) or b != elements.ballot_hash:
            raise PresenceMismatchError()


def verify_integrity(elements: ControlElements, **kwargs: Any) -> VerificationOutcome:
    return VerificationController(**kwargs).run(VerificationMode.INTEGRITY, elements)


def verify_presence(elements: ControlElements, **kwargs: Any) -> VerificationOutcome:
    return VerificationController(**kwargs).run(VerificationMode.PRESENCE, elements)
