"""
import_engine.sync.online_ensurer - Publish a product exactly once.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import Session

from db.models import ProductOnline


class ProductOnlineEnsurer:

    def ensure(self, session: Session, product_id: int) -> bool:
        """True when a ProductOnline row was inserted, False if one existed."""
        exists = (
            session.query(ProductOnline.id)
            .filter(ProductOnline.product_id == product_id)
            .first()
        )
        if exists:
            return False

        session.add(ProductOnline(
            product_id=product_id,
            is_active=True,
            published_at=datetime.now(timezone.utc),
        ))
        session.flush()
        return True
