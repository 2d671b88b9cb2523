"""Small string helpers: prefix checks, splitting, replacing and wildcard matching."""

from __future__ import annotations

from collections.abc import Iterable


def begin_with(text: str, prefix: str) -> bool:
    """Return True if ``text`` starts with ``prefix``."""
    if len(text) < len(prefix):
        return False
    return text.startswith(prefix)


def end_with(text: str, suffix: str) -> bool:
    """Return True if ``text`` ends with ``suffix``."""
    if len(text) < len(suffix):
        return False
    return text.endswith(suffix)


def split_string(text: str, separator: str) -> list[str]:
    """Split ``text`` on ``separator``, dropping empty pieces.

    An empty text gives an empty list; an empty separator gives ``[text]``.
    """
    if not text:
        return []
    if not separator:
        return [text]
    return [piece for piece in text.split(separator) if piece]


def replace_string(text: str, token: str, value: str, nreplace: int = -1) -> tuple[str, int]:
    """Replace up to ``nreplace`` occurrences of ``token`` with ``value``.

    ``nreplace == -1`` means "as many as the text is long". Returns the new
    string together with the number of replacements made.
    """
    if nreplace == -1:
        nreplace = len(text)
    if nreplace == 0:
        return text, 0

    pieces: list[str] = []
    remaining = nreplace
    pos = prev = 0
    while True:
        found = text.find(token, pos)
        if found == -1 or remaining == 0:
            pieces.append(text[prev:])
            break
        remaining -= 1
        pieces.append(text[prev:found])
        pieces.append(value)
        pos = found + len(token)
        prev = pos
    return "".join(pieces), nreplace - remaining


def align_blank(text: str, align_size: int, blank: str = " ") -> str:
    """Pad ``text`` on the right with ``blank`` up to ``align_size`` characters."""
    if len(text) >= align_size:
        return text
    return text + blank * (align_size - len(text))


def _upper(ch: str) -> str:
    # Only letters strictly between 'a' and 'z' are folded.
    if "a" < ch < "z" and len(ch) == 1:
        return chr(ord(ch) - ord("a") + ord("A"))
    return ch


def alphabet_equal(a: str, b: str, ignore_case: bool = True) -> bool:
    """Compare two characters, optionally folding lower-case letters."""
    if ignore_case:
        a, b = _upper(a), _upper(b)
    return a == b


def _match_body(text: str, matcher: str, ignore_case: bool) -> bool:
    if not matcher or not text:
        return False

    mi = 0
    for ti, ch in enumerate(text):
        mc = matcher[mi] if mi < len(matcher) else ""
        if mc == "?":
            mi += 1
        elif mc == "*":
            if mi + 1 < len(matcher):
                if _match_body(text[ti:], matcher[mi + 1:], ignore_case):
                    return True
            else:
                return True
        elif not mc or not alphabet_equal(mc, ch, ignore_case):
            return False
        else:
            mi += 1

    return all(mc == "*" for mc in matcher[mi:])


def pattern_match(text: str, matcher: str, ignore_case: bool = True) -> bool:
    """Match ``text`` against ``;``-separated wildcard patterns using ``*`` and ``?``."""
    if not matcher or not text:
        return False
    return any(_match_body(text, pattern, ignore_case) for pattern in matcher.split(";"))


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


def upbound(n: int, align: int = 32) -> int:
    """Round ``n`` up to a multiple of ``align``."""
    return _trunc_div(n + align - 1, align) * align


def join_dims(dims: Iterable[int]) -> str:
    """Format dimensions as ``"a x b x c"``."""
    return " x ".join(str(int(d)) for d in dims)