"""URL-safe base64 without padding (RFC 7515 section 2)."""

import base64
import binascii
import re

_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


class Base64urlError(ValueError):
    """Input is not valid unpadded base64url."""


def encode(data: bytes) -> str:
    """Encode bytes as base64url without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def decode(text: str) -> bytes:
    """Decode unpadded base64url into bytes."""
    if not _ALPHABET.fullmatch(text):
        raise Base64urlError("Invalid base64url character")
    if len(text) % 4 == 1:
        raise Base64urlError("Invalid base64url length")
    padded = text + "=" * (-len(text) % 4)
    try:
        data = base64.urlsafe_b64decode(padded)
    except binascii.Error as exc:
        raise Base64urlError(str(exc)) from exc
    # unused low bits of the final character must be zero
    if encode(data) != text:
        raise Base64urlError("Non-canonical base64url")
    return data


def encode_text(text: str) -> str:
    """UTF-8 encode text, then base64url encode it."""
    return encode(text.encode("utf-8"))


def decode_text(text: str) -> str:
    """Base64url decode, then UTF-8 decode."""
    try:
        return decode(text).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise Base64urlError("Decoded bytes are not valid UTF-8") from exc


def int_to_b64(value: int) -> str:
    """Encode an unsigned integer as big-endian base64url."""
    byte_length = (value.bit_length() + 7) // 8 or 1
    return encode(value.to_bytes(byte_length, byteorder="big"))


def b64_to_int(text: str) -> int:
    """Decode a big-endian base64url integer."""
    return int.from_bytes(decode(text), byteorder="big")
