"""Slug normalization shared by statuses, transport types and term names."""

from __future__ import annotations

import re
import unicodedata

_DASHES = re.compile(r"-{2,}")


def _fold(char: str) -> str:
    # accented Latin letters lose their marks; other scripts pass through
    base = "".join(c for c in unicodedata.normalize("NFKD", char) if not unicodedata.combining(c))
    return base if base and base.isascii() else char


def _is_slug_char(char: str) -> bool:
    return char.isalnum() or char in "_-" or unicodedata.category(char).startswith("M")


def slugify(value: object) -> str:
    """Return a lowercase, dash-separated slug for ``value``.

    Accented Latin letters are folded to ASCII, while letters and digits of
    other scripts are kept as they are. Every run of remaining characters
    collapses into a single dash. Blank input yields ``""``.
    """

    if value is None:
        return ""
    text = unicodedata.normalize("NFC", str(value)).strip().lower()
    text = "".join(_fold(char) for char in text).lower()
    text = "".join(char if _is_slug_char(char) else "-" for char in text)
    text = _DASHES.sub("-", text)
    return text.strip("-")
