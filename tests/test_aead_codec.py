import pytest
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ballotcheck.aead_codec import decrypt_ballot_paper, encrypt_ballot_paper
from ballotcheck.errors import DecryptionError, PlaintextDecodeError

from fakes import IV_HEX, KEY_HEX


def _seal_text(text: str, key_hex: str = KEY_HEX, iv_hex: str = IV_HEX) -> str:
    return AESGCM(bytes.fromhex(key_hex)).encrypt(bytes.fromhex(iv_hex), text.encode("utf-8"), None).hex()


def _flip(hex_str: str, pos: int) -> str:
    c = format(int(hex_str[pos], 16) ^ 1, "x")
    return hex_str[:pos] + c + hex_str[pos + 1:]


def test_roundtrip_keeps_key_order():
    record = {"5": 1, "3": 0, "userCategoryId": 2}
    c = encrypt_ballot_paper(record, KEY_HEX, IV_HEX)
    out = decrypt_ballot_paper(c, KEY_HEX, IV_HEX)
    assert out == record
    assert list(out) == ["5", "3", "userCategoryId"]


def test_roundtrip_256_bit_key():
    key = "ab" * 32
    c = encrypt_ballot_paper({"0": "blank"}, key, IV_HEX)
    assert decrypt_ballot_paper(c, key, IV_HEX) == {"0": "blank"}


def test_filler_after_separator_is_ignored():
    c = _seal_text('{"7":"yes"}#0000000000000000{"7":"no"}')
    assert decrypt_ballot_paper(c, KEY_HEX, IV_HEX) == {"7": "yes"}


@pytest.mark.parametrize("where", ["ciphertext", "tag"])
def test_single_bit_flip_fails(where):
    c = encrypt_ballot_paper({"3": 1}, KEY_HEX, IV_HEX, padding="pad")
    pos = 0 if where == "ciphertext" else len(c) - 1
    with pytest.raises(DecryptionError):
        decrypt_ballot_paper(_flip(c, pos), KEY_HEX, IV_HEX)


def test_wrong_key_fails():
    c = encrypt_ballot_paper({"3": 1}, KEY_HEX, IV_HEX)
    with pytest.raises(DecryptionError) as ei:
        decrypt_ballot_paper(c, "ff" * 16, IV_HEX)
    assert ei.value.reason == "authentication tag mismatch"


def test_truncated_input_fails():
    with pytest.raises(DecryptionError):
        decrypt_ballot_paper("ab" * 15, KEY_HEX, IV_HEX)


@pytest.mark.parametrize(
    "c,k,i",
    [
        ("zz" * 20, KEY_HEX, IV_HEX),
        ("ab" * 20, "not-hex", IV_HEX),
        ("ab" * 20, KEY_HEX, "abc"),
        ("ab" * 20, "00" * 10, IV_HEX),
        ("ab" * 20, KEY_HEX, ""),
    ],
)
def test_malformed_inputs_fail(c, k, i):
    with pytest.raises(DecryptionError):
        decrypt_ballot_paper(c, k, i)


def test_unparseable_plaintext_is_empty_record_by_default():
    c = _seal_text("not json at all#filler")
    assert decrypt_ballot_paper(c, KEY_HEX, IV_HEX) == {}


def test_non_object_plaintext_is_empty_record_by_default():
    c = _seal_text("[1, 2, 3]")
    assert decrypt_ballot_paper(c, KEY_HEX, IV_HEX) == {}


def test_unparseable_plaintext_raises_in_strict_mode():
    c = _seal_text("not json")
    with pytest.raises(PlaintextDecodeError):
        decrypt_ballot_paper(c, KEY_HEX, IV_HEX, strict=True)


@pytest.mark.parametrize("sep", [" ", "\n", "\t"])
def test_key_with_whitespace_is_rejected(sep):
    c = encrypt_ballot_paper({"3": 1}, KEY_HEX, IV_HEX)
    spaced = sep.join(KEY_HEX[n:n + 2] for n in range(0, len(KEY_HEX), 2))
    with pytest.raises(DecryptionError):
        decrypt_ballot_paper(c, spaced, IV_HEX)
    with pytest.raises(DecryptionError):
        decrypt_ballot_paper(c, KEY_HEX, " " + IV_HEX)
