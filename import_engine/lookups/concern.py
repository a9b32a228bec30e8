"""
import_engine.lookups.concern - Concern name + option list → option ids.

A product is linked to concern *options*, not concerns.  When the CSV
names a concern without options, the concern's own name is used as its
single option.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from db.models import Concern, ConcernOption
from import_engine.values import slugify, split_list
from services.slug_service import ensure_unique_slug

logger = logging.getLogger(__name__)


class ConcernLookup:

    def __init__(self):
        self._concern_cache: dict[str, int] = {}     # name → concern id
        self._option_cache: dict[str, int] = {}      # "concern_id:name" → option id

    def get_option_ids(self, session: Session, concern_name: str, option_text: str = "") -> list[int]:
        name = str(concern_name or "").strip()
        if not name:
            return []

        concern_id = self._concern_id(session, name)

        options = split_list(option_text) or [name]
        ids: list[int] = []
        for opt in options:
            key = f"{concern_id}:{opt.lower()}"
            if key not in self._option_cache:
                self._option_cache[key] = self._option_id(session, concern_id, opt)
            ids.append(self._option_cache[key])
        return ids

    def _concern_id(self, session: Session, name: str) -> int:
        key = name.lower()
        if key in self._concern_cache:
            return self._concern_cache[key]

        concern = session.query(Concern).filter(Concern.name == name).first()
        if concern is None:
            slug = ensure_unique_slug(session, "concerns", slugify(name, "concern"))
            concern = Concern(name=name, slug=slug)
            session.add(concern)
            session.flush()
            logger.debug("Created concern %r (%s)", name, slug)

        self._concern_cache[key] = concern.id
        return concern.id

    @staticmethod
    def _option_id(session: Session, concern_id: int, name: str) -> int:
        option = (
            session.query(ConcernOption)
            .filter(ConcernOption.concern_id == concern_id, ConcernOption.name == name)
            .first()
        )
        if option is None:
            slug = ensure_unique_slug(session, "concern_options", slugify(name, "concern-option"))
            option = ConcernOption(concern_id=concern_id, name=name, slug=slug)
            session.add(option)
            session.flush()
            logger.debug("Created concern option %r for concern %d", name, concern_id)
        return option.id

    def reset_cache(self) -> None:
        self._concern_cache.clear()
        self._option_cache.clear()
