"""Parsing of SVD scalar values.

SVD numbers come as decimal (``16``), hexadecimal (``0x10`` / ``0X10``) or
binary with a leading ``#`` (``#10000``).
"""

from __future__ import annotations

import string
from typing import Optional

from svdhtml.core.exceptions import MalformedNumber

_PREFIXES = (
    ("0x", string.hexdigits, 16),
    ("0X", string.hexdigits, 16),
    ("#", "01", 2),
    ("0b", "01", 2),
    ("0B", "01", 2),
)


def parse_int(token: Optional[str], element: Optional[str] = None) -> int:
    """Parse a numeric token from the document.

    Args:
        token: Raw text of the element.
        element: Element tag, used only for the error message.

    Raises:
        MalformedNumber: when the token is empty or not a number in any of
            the accepted forms.
    """
    s = (token or "").strip()

    digits, alphabet, base = s, string.digits, 10
    for prefix, prefix_alphabet, prefix_base in _PREFIXES:
        if s.startswith(prefix):
            digits = s[len(prefix):]
            alphabet, base = prefix_alphabet, prefix_base
            break

    # int() alone would also take signs, underscores and inner whitespace
    if not digits or any(ch not in alphabet for ch in digits):
        raise MalformedNumber(token or "", element)
    return int(digits, base)


def parse_optional_int(
    token: Optional[str], element: Optional[str] = None
) -> Optional[int]:
    """Like parse_int, but an absent element yields None."""
    if token is None:
        return None
    return parse_int(token, element)


def parse_bool(token: Optional[str], default: bool = False) -> bool:
    """Parse an SVD boolean (``true``/``false``/``1``/``0``)."""
    if token is None:
        return default
    return token.strip().lower() in ("true", "1")
