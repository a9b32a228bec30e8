"""
import_engine.lookups.tag - Tag list cell → tag ids.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from db.models import Tag
from import_engine.values import slugify, split_list
from services.slug_service import ensure_unique_slug

logger = logging.getLogger(__name__)


class TagLookup:

    def __init__(self):
        self._cache: dict[str, int] = {}

    def get_ids(self, session: Session, tag_text: str) -> list[int]:
        """Ids in cell order.  Duplicates are kept; callers dedupe."""
        ids: list[int] = []
        for name in split_list(tag_text):
            key = name.lower()
            if key not in self._cache:
                self._cache[key] = self._get_or_create(session, name)
            ids.append(self._cache[key])
        return ids

    @staticmethod
    def _get_or_create(session: Session, name: str) -> int:
        tag = session.query(Tag).filter(Tag.name == name).first()
        if tag is None:
            slug = ensure_unique_slug(session, "tags", slugify(name, "tag"))
            tag = Tag(name=name, slug=slug)
            session.add(tag)
            session.flush()
            logger.debug("Created tag %r (%s)", name, slug)
        return tag.id

    def reset_cache(self) -> None:
        self._cache.clear()
