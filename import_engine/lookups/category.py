"""
import_engine.lookups.category - Three-level category path → leaf id.

The CSV addresses categories by name path (parent > sub 1 > sub 2),
never by id.  Each missing node is created under its parent; a blank
top level falls back to "Uncategorized".
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from db.models import CategoryType
from import_engine.values import slugify
from services.slug_service import ensure_unique_slug

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"


class CategoryLookup:

    def __init__(self):
        self._cache: dict[str, int] = {}     # "parent > sub1 > sub2" → leaf id

    def get_id(self, session: Session, parent: str, sub1: str = "", sub2: str = "") -> int:
        p = str(parent or "").strip()
        s1 = str(sub1 or "").strip()
        s2 = str(sub2 or "").strip()

        key = f"{p} > {s1} > {s2}".lower()
        if key in self._cache:
            return self._cache[key]

        node = self._upsert_node(session, p or UNCATEGORIZED, None, 1)
        if s1:
            node = self._upsert_node(session, s1, node.id, 2)
        if s2:
            node = self._upsert_node(session, s2, node.id, 3)

        self._cache[key] = node.id
        return node.id

    @staticmethod
    def _upsert_node(session: Session, name: str, parent_id: Optional[int], level: int) -> CategoryType:
        query = session.query(CategoryType).filter(CategoryType.name == name)
        if parent_id is None:
            query = query.filter(CategoryType.parent_id.is_(None))
        else:
            query = query.filter(CategoryType.parent_id == parent_id)

        node = query.first()
        if node is not None:
            return node

        slug = ensure_unique_slug(session, "category_types", slugify(name, "category"))
        node = CategoryType(name=name, slug=slug, parent_id=parent_id, level=level)
        session.add(node)
        session.flush()
        logger.debug("Created category %r level %d under %s", name, level, parent_id)
        return node

    def reset_cache(self) -> None:
        self._cache.clear()
