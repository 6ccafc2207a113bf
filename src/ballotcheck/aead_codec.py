"""
Ballot paper AEAD codec (AES-GCM, 128-bit tag).

Wire format of the control element `c`:
  hex(ciphertext) || hex(tag)      tag = last 32 hex chars (16 bytes)

Plaintext format:
  <json object>[#<filler>]         only the text before the first '#' is parsed

The tag is always verified before anything is parsed; on any failure no
plaintext leaves this module.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

import json
import logging
import re

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ballotcheck.errors import DecryptionError, PlaintextDecodeError


TAG_HEX_LEN = 32
TAG_LEN = TAG_HEX_LEN // 2
FILLER_SEPARATOR = "#"

_KEY_LENS = {16, 24, 32}
_HEX_RE = re.compile(r"[0-9a-fA-F]*")


def _from_hex(value: Any, name: str) -> bytes:
    if not isinstance(value, str) or not _HEX_RE.fullmatch(value):
        raise DecryptionError(f"{name} must be a hex string")
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise DecryptionError(f"{name} is not valid hex") from e


def _aesgcm(key_hex: str) -> AESGCM:
    key = _from_hex(key_hex, "key")
    if len(key) not in _KEY_LENS:
        raise DecryptionError(f"key must be 128, 192 or 256 bits, got {len(key) * 8}")
    return AESGCM(key)


def _nonce(iv_hex: str) -> bytes:
    iv = _from_hex(iv_hex, "iv")
    if not iv:
        raise DecryptionError("iv is empty")
    return iv


def parse_plaintext(text: str) -> Dict[str, Any]:
    """Raises ValueError when the meaningful part is not a JSON object."""
    doc = json.loads(text.split(FILLER_SEPARATOR, 1)[0])
    if not isinstance(doc, dict):
        raise ValueError(f"expected a JSON object, got {type(doc).__name__}")
    return doc


def decrypt_ballot_paper(cipher_text_with_tag: str, key: str, iv: str, *, strict: bool = False) -> Dict[str, Any]:
    if not isinstance(cipher_text_with_tag, str) or len(cipher_text_with_tag) < TAG_HEX_LEN:
        raise DecryptionError("ciphertext shorter than the authentication tag")

    cipher_text = _from_hex(cipher_text_with_tag[:-TAG_HEX_LEN], "ciphertext")
    tag = _from_hex(cipher_text_with_tag[-TAG_HEX_LEN:], "tag")
    aesgcm = _aesgcm(key)
    nonce = _nonce(iv)

    try:
        raw = aesgcm.decrypt(nonce, cipher_text + tag, None)
    except InvalidTag as e:
        raise DecryptionError("authentication tag mismatch") from e
    except ValueError as e:
        raise DecryptionError(str(e)) from e

    try:
        return parse_plaintext(raw.decode("utf-8"))
    except ValueError as e:
        # UnicodeDecodeError and JSONDecodeError are both ValueError
        if strict:
            raise PlaintextDecodeError(f"plaintext is not a JSON object: {e.__class__.__name__}") from e
        logging.getLogger(__name__).warning("decrypted plaintext is not a JSON object; treating ballot as empty")
        return {}


def encrypt_ballot_paper(record: Dict[str, Any], key: str, iv: str, *, padding: Optional[str] = None) -> str:
    """
    Inverse of decrypt_ballot_paper, for fixtures and round-trip checks.
    Key order of `record` is kept in the plaintext.
    """
    text = json.dumps(record, ensure_ascii=False, separators=(",", ":"))
    if padding is not None:
        text = text + FILLER_SEPARATOR + padding
    sealed = _aesgcm(key).encrypt(_nonce(iv), text.encode("utf-8"), None)
    return sealed[:-TAG_LEN].hex() + sealed[-TAG_LEN:].hex()
