from __future__ import annotations

import re
from typing import Optional, Tuple

_LOOKALIKES = {
    "\u00b2": "^2",
    "\u2212": "-",
    "\u2013": "-",
    "\u2014": "-",
    "\u00d7": "*",
    "\u00b7": "*",
    "\u2217": "*",
    "\u00f7": "/",
}

_OPERATOR_SPACING = re.compile(r"\s*([+\-=*/^()])\s*")
_WHITESPACE = re.compile(r"\s+")
_IMPLICIT_PRODUCT = re.compile(r"(\d)([a-z(])")


def clean_equation(text: str) -> str:
    cleaned = text.strip().lower()
    for source, target in _LOOKALIKES.items():
        cleaned = cleaned.replace(source, target)
    cleaned = cleaned.replace("**", "^")
    cleaned = _OPERATOR_SPACING.sub(r"\1", cleaned)
    return _WHITESPACE.sub("", cleaned)


def explicit_multiplication(text: str) -> str:
    """Insert the `*` of implicit products such as `2x` or `3(x-1)`."""
    normalized = clean_equation(text)
    return _IMPLICIT_PRODUCT.sub(r"\1*\2", normalized)


def split_equation(text: str) -> Optional[Tuple[str, str]]:
    """Return `(left, right)`; a missing `=` means the right side is zero.

    More than one `=` is a structural error and yields None.
    """
    parts = text.split("=")
    if len(parts) == 1:
        return parts[0], "0"
    if len(parts) != 2:
        return None
    left, right = parts
    return left, right or "0"


def move_right_side(text: str) -> Optional[str]:
    sides = split_equation(text)
    if sides is None:
        return None
    left, right = sides
    if "=" not in text:
        return left
    moved = f"{left}-({right})"
    return moved.replace("--", "+").replace("+-", "-").replace("-+", "-")
