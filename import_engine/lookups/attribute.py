"""
import_engine.lookups.attribute - Variant attribute definitions.

Only the synthetic "Varian" attribute is needed by the master import.
Creation tolerates a concurrent insert of the same name: the loser of
the unique-index race re-reads the winner's row.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from db.models import Attribute

logger = logging.getLogger(__name__)

VARIANT_ATTRIBUTE = "Varian"


class AttributeLookup:

    def __init__(self):
        self._cache: dict[str, int] = {}

    def get_id(self, session: Session, name: str) -> int:
        if name in self._cache:
            return self._cache[name]

        attr = session.query(Attribute).filter(Attribute.name == name).first()
        if attr is None:
            try:
                with session.begin_nested():
                    attr = Attribute(name=name)
                    session.add(attr)
            except IntegrityError:
                logger.info("Attribute %r created concurrently, re-reading", name)
                # NoResultFound here is fatal for the run
                attr = session.query(Attribute).filter(Attribute.name == name).one()

        self._cache[name] = attr.id
        return attr.id

    def ensure_variant_attribute_id(self, session: Session) -> int:
        return self.get_id(session, VARIANT_ATTRIBUTE)

    def reset_cache(self) -> None:
        self._cache.clear()
