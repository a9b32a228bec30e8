"""
import_engine.values - Cell-level helpers shared by every import path.

Everything here is pure: no session, no I/O.
"""

from __future__ import annotations

import math
import re
from typing import Iterable, Mapping

from django.utils.text import slugify as _django_slugify

# Tokens that spreadsheet exports write for "no value"
_NULL_TOKENS = frozenset({"null", "undefined", "nan"})

_LIST_SEPARATORS = ("|", ";", ",")


def normalize_value(value) -> str:
    """Trim a raw cell; map None / blank / null-ish tokens to ''."""
    if value is None:
        return ""
    s = str(value).strip()
    if not s:
        return ""
    if s.lower() in _NULL_TOKENS:
        return ""
    return s


def pick_value(row: Mapping[str, str], keys: Iterable[str]) -> str:
    """Return the first non-blank value among the given column aliases."""
    for key in keys:
        v = row.get(key)
        if v is not None and str(v).strip() != "":
            return str(v).strip()
    return ""


def parse_money(value: str) -> int:
    """'Rp 125.000' → 125000.  Anything without digits → 0."""
    digits = re.sub(r"[^0-9]", "", str(value or ""))
    return int(digits) if digits else 0


def parse_int(value: str) -> int:
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return 0


def is_number(value: str) -> bool:
    try:
        f = float(str(value).strip())
    except (TypeError, ValueError):
        return False
    return math.isfinite(f)


def split_list(value: str) -> list[str]:
    """
    Split a multi-value cell.  The separator is the first of | ; , that
    appears in the text, so 'a|b, c' splits on '|' only.
    """
    s = str(value or "").strip()
    if not s:
        return []
    sep = next((c for c in _LIST_SEPARATORS if c in s), ",")
    return [part.strip() for part in s.split(sep) if part.strip()]


def map_status(value: str) -> str:
    """Free-text product status → one of normal | war | draft."""
    s = str(value or "").strip().lower()
    if not s:
        return "normal"
    if "draft" in s:
        return "draft"
    if "war" in s:
        return "war"
    return "normal"


def slugify(text: str, fallback: str = "") -> str:
    """Lower-case ASCII slug; `fallback` when nothing slug-worthy is left."""
    slug = _django_slugify(str(text or "").strip())
    # django keeps underscores, URL slugs here are hyphen-only
    slug = re.sub(r"[-_]+", "-", slug).strip("-")
    return slug or fallback
