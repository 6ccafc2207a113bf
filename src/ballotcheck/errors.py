"""
Error taxonomy for ballot verification.

Every failure carries structured attributes (never pre-formatted user text),
so the presentation layer decides how to phrase it. All errors subclass
VerificationError, itself a ValueError, and the controller catches that base
class at its boundary.
"""
from __future__ import annotations

from typing import Optional


class VerificationError(ValueError):
    pass


class ConfigurationError(VerificationError):
    def __init__(self, discriminator: object = None, detail: str = "") -> None:
        self.discriminator = discriminator
        self.detail = detail
        super().__init__(detail or f"unknown verification mode: {discriminator!r}")


class MalformedControlElementsError(VerificationError):
    def __init__(self, field: Optional[str] = None, detail: str = "") -> None:
        self.field = field
        self.detail = detail
        msg = detail or "control elements are malformed"
        if field:
            msg = f"{msg} (field '{field}')"
        super().__init__(msg)


class DomainValidationError(VerificationError):
    def __init__(self, domain: object, suffix: str) -> None:
        self.domain = domain
        self.suffix = suffix
        super().__init__(f"domain {domain!r} is not under {suffix}")


class DecryptionError(VerificationError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"decryption failed: {reason}")


class PlaintextDecodeError(DecryptionError):
    pass


class BallotValidationError(VerificationError):
    def __init__(self, reason: str, item_id: Optional[str] = None) -> None:
        self.reason = reason
        self.item_id = item_id
        msg = "empty ballot" if reason == "empty" else "invalid ballot"
        if item_id is not None:
            msg = f"{msg}: unknown item '{item_id}'"
        super().__init__(msg)


class MalformedResponseError(VerificationError):
    def __init__(self, status: Optional[int] = None, detail: str = "") -> None:
        self.status = status
        self.detail = detail
        msg = "malformed server response"
        if status is not None:
            msg = f"{msg}, status {status}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class ServerDataError(VerificationError):
    def __init__(self) -> None:
        super().__init__("server returned no ballot data")


class TransportError(VerificationError):
    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(f"server unreachable: {detail}" if detail else "server unreachable")


class ServerError(VerificationError):
    def __init__(self, message: str, status: int) -> None:
        self.message = message
        self.status = status
        super().__init__(message)


class PresenceMismatchError(VerificationError):
    def __init__(self) -> None:
        super().__init__("encrypted ballot does not match the expected fingerprint")
