"""
import_engine.sync.tag_syncer - Replace a product's tag set.

The CSV is the source of truth: all product_tags rows for the product
are deleted, then the resolved tags are inserted again.  Optional
pivot columns are filled only when PivotMeta says they exist.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Date, DateTime, column, delete, insert, table
from sqlalchemy.orm import Session

from import_engine.lookups.tag import TagLookup
from services.pivot_meta import PRODUCT_TAGS, PivotMeta


class ProductTagSyncer:

    def __init__(self, tags: TagLookup):
        self.tags = tags

    def sync(
        self,
        session: Session,
        product_id: int,
        tag_text: str,
        pivot: PivotMeta,
        now: datetime,
    ) -> int:
        """Return the number of pivot rows inserted (0 if the pivot is unusable)."""
        if not pivot.can_sync_tags:
            return 0

        tag_col = pivot.product_tags_tag_col
        optional = (
            ("start_date", pivot.tags_has_start_date, Date, None),
            ("end_date", pivot.tags_has_end_date, Date, None),
            ("deleted_at", pivot.tags_has_deleted_at, DateTime, None),
            ("created_at", pivot.tags_has_created_at, DateTime, now),
            ("updated_at", pivot.tags_has_updated_at, DateTime, now),
        )
        present = [(name, type_, value) for name, has, type_, value in optional if has]
        extra = {name: value for name, _, value in present}

        pt = table(
            PRODUCT_TAGS,
            column("product_id"),
            column(tag_col),
            *(column(name, type_) for name, type_, _ in present),
        )
        session.execute(delete(pt).where(pt.c.product_id == product_id))

        tag_ids = list(dict.fromkeys(self.tags.get_ids(session, tag_text)))
        if not tag_ids:
            return 0

        session.execute(
            insert(pt),
            [{"product_id": product_id, tag_col: tag_id, **extra} for tag_id in tag_ids],
        )
        return len(tag_ids)
