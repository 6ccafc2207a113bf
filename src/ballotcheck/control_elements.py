"""
Control elements: the bundle a voter pastes to start a check.

Wire keys (JSON object):
  d  election site domain (must be under voteweb.fr)
  p  polling station / ballot token, sent to the server as-is
  c  hex ciphertext with the 16-byte GCM tag appended   (integrity)
  k  hex AES key                                        (integrity)
  i  hex 96-bit IV                                      (integrity)
  b  expected encrypted ballot value                    (presence)
  f  opaque extra request parameter                     (presence)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

import json
import re

from ballotcheck.config import DOMAIN_SUFFIX
from ballotcheck.errors import DomainValidationError, MalformedControlElementsError
from ballotcheck.schemas import CONTROL_ELEMENTS_SCHEMA, describe, error_field, first_error


_HOSTNAME_RE = re.compile(r"^[a-z0-9-]+(\.[a-z0-9-]+)*$")

_FIELDS = {
    "d": "domain",
    "p": "polling_station_token",
    "c": "cipher_text_with_tag",
    "k": "key",
    "i": "iv",
    "b": "ballot_hash",
    "f": "extra",
}


@dataclass(frozen=True)
class ControlElements:
    domain: str
    polling_station_token: str
    cipher_text_with_tag: Optional[str] = None
    key: Optional[str] = None
    iv: Optional[str] = None
    ballot_hash: Optional[str] = None
    extra: Optional[str] = None

    @classmethod
    def from_dict(cls, doc: Dict[str, Any]) -> "ControlElements":
        # the domain gate wins over any other problem in the bundle
        if isinstance(doc.get("d"), str):
            check_domain(doc["d"])
        err = first_error(doc, CONTROL_ELEMENTS_SCHEMA)
        if err is not None:
            raise MalformedControlElementsError(field=error_field(err), detail=describe(err))
        return cls(**{attr: doc.get(wire) for wire, attr in _FIELDS.items()})

    def require(self, wire_keys: Iterable[str]) -> None:
        for wk in wire_keys:
            value = getattr(self, _FIELDS[wk])
            if value is None or value == "":
                raise MalformedControlElementsError(field=wk, detail="required control element missing")

    def __repr__(self) -> str:
        # keys and tokens stay out of logs and tracebacks
        return f"ControlElements(domain={self.domain!r})"


def parse_control_elements(text: str) -> ControlElements:
    try:
        doc = json.loads(text.strip())
    except (json.JSONDecodeError, AttributeError) as e:
        raise MalformedControlElementsError(detail=f"not valid JSON: {e}") from e
    if not isinstance(doc, dict):
        raise MalformedControlElementsError(detail="expected a JSON object")
    return ControlElements.from_dict(doc)


def check_domain(domain: Any, suffix: str = DOMAIN_SUFFIX) -> str:
    """
    Gate run before any request leaves the machine.
    Accepts the suffix itself or any subdomain of it, as a bare hostname
    (no scheme, port, path or credentials).
    """
    if not isinstance(domain, str):
        raise DomainValidationError(domain, suffix)
    d = domain.strip().lower().rstrip(".")
    if not _HOSTNAME_RE.fullmatch(d):
        raise DomainValidationError(domain, suffix)
    if d != suffix and not d.endswith("." + suffix):
        raise DomainValidationError(domain, suffix)
    return d
