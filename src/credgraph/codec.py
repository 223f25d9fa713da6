"""
credgraph Codec Module

Byte-string and IEEE-754 binary32 codecs consumed by the built-in links.

Supported string encodings:
- utf8: UTF-8 text. Decoding replaces malformed byte sequences with U+FFFD
- ascii: 7-bit ASCII, strict in both directions
- base16: RFC 4648 base16, upper-case alphabet
- base32: RFC 4648 base32, upper-case alphabet, unpadded
- base58: Bitcoin base58 alphabet (via the ``base58`` package)
- base64: RFC 4648 base64, unpadded
- base64url: RFC 4648 URL-safe base64, unpadded

The RFC 4648 encodings are strict: a string is accepted only if it is the
exact encoding of the bytes it decodes to. Lower-case hex, ``=`` padding,
non-zero trailing bits and foreign characters are all rejected. This makes
``encode(decode(s)) == s`` hold for every accepted ``s``.

Usage:
    from credgraph.codec import decode, encode, read_float32

    data = decode("48656C6C6F", "base16")   # b"Hello"
    text = encode(data, "base58")           # "9Ajdvzr"
"""

import base64
import binascii
import struct
from typing import Callable, Dict, Tuple, Union

import base58

from .exceptions import FormatError, RangeError

__all__ = [
    'ENCODINGS',
    'BytesLike',
    'encode',
    'decode',
    'is_encoded',
    'read_float32',
    'write_float32',
    'FLOAT32_BYTES',
]

BytesLike = Union[bytes, bytearray, memoryview]

FLOAT32_BYTES = 4

ENCODINGS: Tuple[str, ...] = (
    "utf8",
    "ascii",
    "base16",
    "base32",
    "base58",
    "base64",
    "base64url",
)


# ============================================================================
# RAW CODECS (bytes -> str, str -> bytes)
# ============================================================================

def _pad(text: str, block: int) -> str:
    return text + "=" * (-len(text) % block)


def _encode_utf8(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _decode_utf8(text: str) -> bytes:
    return text.encode("utf-8")


def _encode_ascii(data: bytes) -> str:
    return data.decode("ascii")


def _decode_ascii(text: str) -> bytes:
    return text.encode("ascii")


def _encode_base16(data: bytes) -> str:
    return base64.b16encode(data).decode("ascii")


def _decode_base16(text: str) -> bytes:
    return base64.b16decode(text)


def _encode_base32(data: bytes) -> str:
    return base64.b32encode(data).decode("ascii").rstrip("=")


def _decode_base32(text: str) -> bytes:
    return base64.b32decode(_pad(text, 8))


def _encode_base58(data: bytes) -> str:
    return base58.b58encode(data).decode("ascii")


def _decode_base58(text: str) -> bytes:
    return base58.b58decode(text)


def _encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii").rstrip("=")


def _decode_base64(text: str) -> bytes:
    return base64.b64decode(_pad(text, 4), validate=True)


def _encode_base64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _decode_base64url(text: str) -> bytes:
    return base64.b64decode(_pad(text, 4), altchars=b"-_", validate=True)


_CODECS: Dict[str, Tuple[Callable[[bytes], str], Callable[[str], bytes]]] = {
    "utf8": (_encode_utf8, _decode_utf8),
    "ascii": (_encode_ascii, _decode_ascii),
    "base16": (_encode_base16, _decode_base16),
    "base32": (_encode_base32, _decode_base32),
    "base58": (_encode_base58, _decode_base58),
    "base64": (_encode_base64, _decode_base64),
    "base64url": (_encode_base64url, _decode_base64url),
}

# Encodings whose decoded bytes must re-encode to the identical string
_STRICT = frozenset({"base16", "base32", "base58", "base64", "base64url"})


def _codec(encoding: str) -> Tuple[Callable[[bytes], str], Callable[[str], bytes]]:
    try:
        return _CODECS[encoding]
    except KeyError:
        raise FormatError(
            f"Unsupported encoding '{encoding}'",
            details={"encoding": encoding, "supported": list(ENCODINGS)},
        ) from None


# ============================================================================
# PUBLIC CONTRACT
# ============================================================================

def encode(data: BytesLike, encoding: str) -> str:
    """
    Encode bytes to a string under the given encoding.

    Raises:
        FormatError: If the bytes cannot be represented (ascii above 0x7F)
            or the encoding is unsupported
    """
    encoder, _ = _codec(encoding)
    try:
        return encoder(bytes(data))
    except UnicodeError as e:
        raise FormatError(
            f"Bytes are not representable as {encoding}: {e}",
            details={"encoding": encoding},
        ) from e


def decode(text: str, encoding: str) -> bytes:
    """
    Decode a string to bytes under the given encoding.

    Raises:
        FormatError: If the string is not a valid, canonical encoding
    """
    encoder, decoder = _codec(encoding)
    if not isinstance(text, str):
        raise FormatError(
            f"{encoding} decode expects str, got {type(text).__name__}",
            details={"encoding": encoding},
        )
    if encoding in _STRICT and "=" in text:
        raise FormatError(
            f"Padding is not allowed in {encoding} strings",
            details={"encoding": encoding},
        )
    try:
        data = decoder(text)
    except (binascii.Error, ValueError) as e:
        raise FormatError(
            f"Invalid {encoding} string: {e}",
            details={"encoding": encoding},
        ) from e
    if encoding in _STRICT and encoder(data) != text:
        raise FormatError(
            f"Non-canonical {encoding} string",
            details={"encoding": encoding},
        )
    return data


def is_encoded(text: str, encoding: str) -> bool:
    """True if ``text`` is a str that decodes losslessly under ``encoding``."""
    if not isinstance(text, str):
        return False
    try:
        decode(text, encoding)
    except FormatError:
        return False
    return True


# ============================================================================
# IEEE-754 BINARY32
# ============================================================================

def read_float32(data: BytesLike, offset: int = 0, little_endian: bool = True) -> float:
    """
    Read an IEEE-754 binary32 value from ``data`` at ``offset``.

    Raises:
        RangeError: If fewer than 4 bytes are available at ``offset``
    """
    available = len(data) - offset
    if offset < 0 or available < FLOAT32_BYTES:
        raise RangeError(
            f"float32 read needs {FLOAT32_BYTES} bytes at offset {offset}, "
            f"{max(available, 0)} available",
            details={"offset": offset, "length": len(data)},
        )
    fmt = "<f" if little_endian else ">f"
    return struct.unpack_from(fmt, bytes(data), offset)[0]


def write_float32(value: Union[int, float], little_endian: bool = True) -> bytes:
    """
    Write ``value`` as 4 IEEE-754 binary32 bytes.

    Infinities and NaN are written as-is.

    Raises:
        RangeError: If a finite value lies beyond the binary32 range
    """
    fmt = "<f" if little_endian else ">f"
    try:
        return struct.pack(fmt, float(value))
    except (OverflowError, struct.error) as e:
        raise RangeError(
            f"Value {value!r} is out of float32 range",
            details={"value": repr(value)},
        ) from e
