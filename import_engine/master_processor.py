"""
import_engine.master_processor - Write one import run's product graphs.

A MasterProcessor lives for exactly one run.  It builds fresh lookups
(and therefore fresh caches), probes the pivot tables once, and then
applies each MasterGroup in order:

  category + brand → product → media → tags → concerns
  → ProductOnline → variants → "Varian" attribute values

Nothing here catches database errors.  The first failure propagates and
the caller rolls back the whole run.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy.orm import Session

from import_engine.lookups import (
    AttributeLookup, BrandLookup, CategoryLookup, ConcernLookup, TagLookup,
)
from import_engine.report import ImportStats
from import_engine.rows import MasterGroup
from import_engine.sync import (
    ProductConcernSyncer, ProductMediaSyncer, ProductOnlineEnsurer,
    ProductTagSyncer, ProductUpserter, VariantAttributeSyncer, VariantUpserter,
)
from services.pivot_meta import resolve_pivot_meta

logger = logging.getLogger(__name__)


class MasterProcessor:

    def __init__(self, session: Session):
        self.session = session
        self.stats = ImportStats()

        self.brands = BrandLookup()
        self.categories = CategoryLookup()
        self.tags = TagLookup()
        self.concerns = ConcernLookup()
        self.attributes = AttributeLookup()

        self.media = ProductMediaSyncer()
        self.product_upserter = ProductUpserter()
        self.variant_upserter = VariantUpserter(self.media)
        self.tag_syncer = ProductTagSyncer(self.tags)
        self.concern_syncer = ProductConcernSyncer(self.concerns)
        self.online = ProductOnlineEnsurer()
        self.variant_attrs = VariantAttributeSyncer()

        self.now = datetime.now(timezone.utc)
        self.pivot = resolve_pivot_meta(session)
        self._variant_attr_id = None

        if not self.pivot.can_sync_tags:
            logger.warning("product_tags pivot not usable, tags will be skipped")
        if not self.pivot.can_sync_concerns:
            logger.warning("product_concerns pivot not usable, concerns will be skipped")

    @property
    def variant_attribute_id(self) -> int:
        # created lazily, once per run
        if self._variant_attr_id is None:
            self._variant_attr_id = self.attributes.ensure_variant_attribute_id(self.session)
        return self._variant_attr_id

    def process_all(self, groups: Iterable[MasterGroup]) -> ImportStats:
        for group in groups:
            self.process_group(group)
        return self.stats

    def process_group(self, group: MasterGroup) -> None:
        s = self.session
        stats = self.stats

        category_id = self.categories.get_id(
            s, group.parent_category, group.sub_category_1, group.sub_category_2,
        )
        brand_id = self.brands.get_id(s, group.brand_name)

        product, created = self.product_upserter.upsert(
            s, group, category_type_id=category_id, brand_id=brand_id,
        )
        if created:
            stats.product_created += 1
        else:
            stats.product_updated += 1

        stats.media_created += self.media.sync(s, product.id, group.photos, alt_text=product.name)

        stats.tag_attached += self.tag_syncer.sync(s, product.id, group.tags, self.pivot, self.now)
        stats.concern_attached += self.concern_syncer.sync(
            s, product.id, group.concern, group.sub_concern, self.pivot,
        )

        if self.online.ensure(s, product.id):
            stats.online_created += 1

        items, variants_created, variant_media = self.variant_upserter.upsert(
            s, product.id, product.name, group.variants, group.base_price,
        )
        stats.variant_created += variants_created
        stats.media_created += variant_media

        for variant, variant_name in items:
            if self.variant_attrs.upsert_value(s, self.variant_attribute_id, variant.id, variant_name):
                stats.variant_attr_attached += 1

        logger.debug(
            "Product %s %r: %d variants",
            "created" if created else "updated", product.name, len(items),
        )
