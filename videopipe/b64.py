"""Base64 encoding and a lenient decoder that stops at the first invalid quartet."""

from __future__ import annotations

import base64

_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_INVALID = 255
_PAD = 200


def _build_table() -> list[int]:
    table = [_INVALID] * 128
    for index, ch in enumerate(_ALPHABET):
        table[ord(ch)] = index
    table[ord("=")] = _PAD
    return table


_TABLE = _build_table()


def base64_encode(data: bytes) -> str:
    """Encode bytes as standard padded base64 text."""
    return base64.b64encode(bytes(data)).decode("ascii")


def base64_decode(text: str | bytes) -> bytes:
    """Decode base64 text.

    Decoding stops at the first quartet holding an invalid character or
    misplaced padding. The result always has ``len // 4 * 3 - padding`` bytes;
    bytes that were not decoded are zero.
    """
    raw = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    if not raw:
        return b""

    count_eq = len(raw) - len(raw.rstrip(b"="))
    size = len(raw) // 4 * 3 - count_eq
    if size < 0:
        raise ValueError("invalid base64 input: too much padding")

    out = bytearray()
    for start in range(0, len(raw) - 3, 4):
        a, b, c, d = (_TABLE[byte & 127] for byte in raw[start:start + 4])
        if _INVALID in (a, b, c, d):
            break
        if a == _PAD or b == _PAD:
            break
        out.append(((a << 2) | (b >> 4)) & 0xFF)
        if c == _PAD:
            break
        out.append(((b << 4) | (c >> 2)) & 0xFF)
        if d == _PAD:
            break
        out.append(((c << 6) | d) & 0xFF)

    result = bytes(out[:size])
    return result + bytes(size - len(result))