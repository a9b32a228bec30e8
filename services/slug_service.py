"""
services.slug_service - Unique slug allocation.

Isolated so the CSV import lookups and any CMS "create" flow share the
same numbering rule: base, base-2, base-3, …

Must run on the same session (transaction) as the insert that uses the
slug.  Two concurrent transactions can still pick the same slug; the
unique index turns that into an IntegrityError for the loser.
"""

from __future__ import annotations

from sqlalchemy import column, select, table
from sqlalchemy.orm import Session

SLUGGED_TABLES = frozenset({
    "products", "brands", "category_types",
    "tags", "concerns", "concern_options",
})


class UnknownSlugTableError(ValueError):
    """Raised for a table without a unique slug column."""


def slug_exists(session: Session, table_name: str, slug: str) -> bool:
    tbl = table(table_name, column("slug"))
    stmt = select(tbl.c.slug).where(tbl.c.slug == slug).limit(1)
    return session.execute(stmt).first() is not None


def ensure_unique_slug(session: Session, table_name: str, base_slug: str) -> str:
    """
    Return `base_slug` if free in `table_name`, else the first free
    `base_slug-N` for N = 2, 3, …
    """
    if table_name not in SLUGGED_TABLES:
        raise UnknownSlugTableError(f"{table_name!r} has no slug column")

    base = base_slug or "item"
    slug = base
    n = 1
    while slug_exists(session, table_name, slug):
        n += 1
        slug = f"{base}-{n}"
    return slug
