"""
import_engine.sync.concern_syncer - Replace a product's concern options.

Same delete-then-insert rule as tags.  The insert payload is kept to
product_id + option id; bookkeeping columns are left to their defaults.
"""

from __future__ import annotations

from sqlalchemy import column, delete, insert, table
from sqlalchemy.orm import Session

from import_engine.lookups.concern import ConcernLookup
from import_engine.values import split_list
from services.pivot_meta import PRODUCT_CONCERNS, PivotMeta


class ProductConcernSyncer:

    def __init__(self, concerns: ConcernLookup):
        self.concerns = concerns

    def sync(
        self,
        session: Session,
        product_id: int,
        concern_text: str,
        sub_concern_text: str,
        pivot: PivotMeta,
    ) -> int:
        if not pivot.can_sync_concerns:
            return 0

        option_col = pivot.product_concerns_option_col
        pc = table(PRODUCT_CONCERNS, column("product_id"), column(option_col))
        session.execute(delete(pc).where(pc.c.product_id == product_id))

        option_ids: list[int] = []
        for name in dict.fromkeys(split_list(concern_text)):
            option_ids.extend(self.concerns.get_option_ids(session, name, sub_concern_text))

        # The same option can come from two concerns' fallback lists
        option_ids = list(dict.fromkeys(option_ids))
        if not option_ids:
            return 0

        session.execute(
            insert(pc),
            [{"product_id": product_id, option_col: opt_id} for opt_id in option_ids],
        )
        return len(option_ids)
