"""
import_engine.sync.media_syncer - Append-only product images.

URLs already stored for the product are never touched, duplicated or
removed; only the missing ones are inserted.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from sqlalchemy.orm import Session

from db.models import ProductMedia

IMAGE = 1


class ProductMediaSyncer:

    def sync(
        self,
        session: Session,
        product_id: int,
        urls: Iterable[str],
        alt_text: Optional[str] = None,
    ) -> int:
        """Insert the URLs the product does not have yet; return how many."""
        alt_by_url: dict[str, Optional[str]] = {}
        for url in urls or ():
            u = str(url or "").strip()
            if u and u not in alt_by_url:
                alt_by_url[u] = alt_text
        return self.sync_with_alt(session, product_id, alt_by_url)

    @staticmethod
    def sync_with_alt(
        session: Session,
        product_id: int,
        alt_by_url: Mapping[str, Optional[str]],
    ) -> int:
        """Same as sync(), with a per-URL alt text."""
        if not alt_by_url:
            return 0

        existing = {
            url for (url,) in session.query(ProductMedia.url).filter(
                ProductMedia.product_id == product_id,
                ProductMedia.url.in_(list(alt_by_url)),
            )
        }
        missing = [u for u in alt_by_url if u not in existing]
        if not missing:
            return 0

        session.add_all(
            ProductMedia(product_id=product_id, url=u, alt_text=alt_by_url[u] or None, type=IMAGE)
            for u in missing
        )
        session.flush()
        return len(missing)
