"""
import_engine.lookups.brand - Brand name → id, creating on first sight.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from db.models import Brand
from import_engine.values import slugify
from services.slug_service import ensure_unique_slug

logger = logging.getLogger(__name__)


class BrandLookup:

    def __init__(self):
        self._cache: dict[str, int] = {}     # lower-cased name → id

    def get_id(self, session: Session, name: str) -> Optional[int]:
        """None for a blank name; otherwise an existing or new brand id."""
        n = str(name or "").strip()
        if not n:
            return None

        key = n.lower()
        if key in self._cache:
            return self._cache[key]

        brand = session.query(Brand).filter(Brand.name == n).first()
        if brand is None:
            slug = ensure_unique_slug(session, "brands", slugify(n, "brand"))
            brand = Brand(name=n, slug=slug, is_active=True)
            session.add(brand)
            session.flush()
            logger.debug("Created brand %r (%s)", n, slug)

        self._cache[key] = brand.id
        return brand.id

    def reset_cache(self) -> None:
        self._cache.clear()
