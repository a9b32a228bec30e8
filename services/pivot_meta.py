"""
services.pivot_meta - Runtime shape of the product_tags / product_concerns
pivot tables.

Deployments disagree on the foreign-key column names (tag_id vs tags_id,
concern_option_id vs concern_options_id …) and on which bookkeeping
columns exist.  resolve_pivot_meta() inspects the live schema once per
import run; syncers only read the resulting PivotMeta.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.orm import Session

PRODUCT_TAGS = "product_tags"
PRODUCT_CONCERNS = "product_concerns"

TAG_COLUMN_CANDIDATES = ("tag_id", "tags_id")
CONCERN_OPTION_COLUMN_CANDIDATES = (
    "concern_option_id",
    "concern_options_id",
    "concern_option_ids",
    "concern_options_ids",
)


@dataclass(frozen=True)
class PivotMeta:
    # product_tags
    has_product_tags_table: bool = False
    product_tags_tag_col: Optional[str] = None
    tags_has_start_date: bool = False
    tags_has_end_date: bool = False
    tags_has_created_at: bool = False
    tags_has_updated_at: bool = False
    tags_has_deleted_at: bool = False

    # product_concerns
    has_product_concerns_table: bool = False
    product_concerns_option_col: Optional[str] = None
    concerns_has_created_at: bool = False
    concerns_has_updated_at: bool = False
    concerns_has_deleted_at: bool = False

    @property
    def can_sync_tags(self) -> bool:
        return self.has_product_tags_table and bool(self.product_tags_tag_col)

    @property
    def can_sync_concerns(self) -> bool:
        return self.has_product_concerns_table and bool(self.product_concerns_option_col)


def _first_present(columns: set[str], candidates) -> Optional[str]:
    return next((c for c in candidates if c in columns), None)


def resolve_pivot_meta(session: Session) -> PivotMeta:
    """Probe the pivot tables through the session's own connection."""
    insp = inspect(session.connection())
    tables = set(insp.get_table_names())

    tag_cols: set[str] = set()
    if PRODUCT_TAGS in tables:
        tag_cols = {c["name"] for c in insp.get_columns(PRODUCT_TAGS)}

    concern_cols: set[str] = set()
    if PRODUCT_CONCERNS in tables:
        concern_cols = {c["name"] for c in insp.get_columns(PRODUCT_CONCERNS)}

    return PivotMeta(
        has_product_tags_table=PRODUCT_TAGS in tables,
        product_tags_tag_col=_first_present(tag_cols, TAG_COLUMN_CANDIDATES),
        tags_has_start_date="start_date" in tag_cols,
        tags_has_end_date="end_date" in tag_cols,
        tags_has_created_at="created_at" in tag_cols,
        tags_has_updated_at="updated_at" in tag_cols,
        tags_has_deleted_at="deleted_at" in tag_cols,
        has_product_concerns_table=PRODUCT_CONCERNS in tables,
        product_concerns_option_col=_first_present(concern_cols, CONCERN_OPTION_COLUMN_CANDIDATES),
        concerns_has_created_at="created_at" in concern_cols,
        concerns_has_updated_at="updated_at" in concern_cols,
        concerns_has_deleted_at="deleted_at" in concern_cols,
    )
