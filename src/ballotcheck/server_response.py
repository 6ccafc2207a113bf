from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ballotcheck.errors import MalformedResponseError
from ballotcheck.schemas import CONTROL_RESPONSE_SCHEMA, describe, first_error


@dataclass(frozen=True)
class ReferenceMetadata:
    """
    Items a ballot may reference. Exactly one of candidates/questions is
    expected per election; candidates wins when both are set.
    """
    candidates: Optional[Dict[str, Dict[str, Any]]] = None
    questions: Optional[Dict[str, Dict[str, Any]]] = None
    approval_label: Optional[str] = None
    refusal_label: Optional[str] = None

    @classmethod
    def from_response(cls, doc: Dict[str, Any]) -> "ReferenceMetadata":
        return cls(
            candidates=doc.get("candidates"),
            questions=doc.get("questions"),
            approval_label=doc.get("questionsApprovalLabel"),
            refusal_label=doc.get("questionsRefusalLabel"),
        )

    @property
    def is_candidate_mode(self) -> bool:
        return self.candidates is not None

    def active_items(self) -> Dict[str, Dict[str, Any]]:
        if self.candidates is not None:
            return self.candidates
        if self.questions is not None:
            return self.questions
        raise MalformedResponseError(detail="response carries neither candidates nor questions")


@dataclass(frozen=True)
class ControlResponse:
    vote_label: Optional[str]
    vote_sub_label: Optional[str]
    election_label: Optional[str]
    ballot_title: Optional[str]
    reference: ReferenceMetadata
    encrypted_ballot: Optional[str] = None

    @classmethod
    def from_json(cls, doc: Any) -> "ControlResponse":
        err = first_error(doc, CONTROL_RESPONSE_SCHEMA)
        if err is not None:
            raise MalformedResponseError(detail=describe(err))
        return cls(
            vote_label=doc.get("voteLabel"),
            vote_sub_label=doc.get("voteSubLabel"),
            election_label=doc.get("electionLabel"),
            ballot_title=doc.get("ballotTitle"),
            reference=ReferenceMetadata.from_response(doc),
            encrypted_ballot=doc.get("b"),
        )

    def header_lines(self) -> List[str]:
        first = " ".join(x for x in (self.vote_label, self.vote_sub_label) if x)
        second = self.election_label or ""
        if self.ballot_title:
            second = f"{second} - {self.ballot_title}"
        return [first, second]
