"""
import_engine.sync.variant_upserter - Create-or-update a group's variants.

A variant is identified by barcode first, then by SKU.  Both lookups are
batched per group so a 50-variant product costs two SELECTs, not 100.
A matched variant that belongs to another product is moved to this one:
the barcode is the physical item, the CSV decides where it lives.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from db.models import ProductVariant
from import_engine.rows import MasterVariantRow
from import_engine.sync.media_syncer import ProductMediaSyncer

logger = logging.getLogger(__name__)


class VariantUpserter:

    def __init__(self, media: ProductMediaSyncer):
        self.media = media

    @staticmethod
    def _load_existing(session: Session, variants: list[MasterVariantRow]):
        barcodes = list({v.sku2 for v in variants if v.sku2})

        by_barcode: dict[str, ProductVariant] = {}
        if barcodes:
            for pv in session.query(ProductVariant).filter(ProductVariant.barcode.in_(barcodes)):
                by_barcode.setdefault(pv.barcode, pv)

        by_sku: dict[str, ProductVariant] = {}
        missing_skus = [
            v.sku1 for v in variants
            if v.sku1 and v.sku2 not in by_barcode
        ]
        if missing_skus:
            for pv in session.query(ProductVariant).filter(ProductVariant.sku.in_(missing_skus)):
                by_sku.setdefault(pv.sku, pv)

        return by_barcode, by_sku

    @staticmethod
    def _price(row: MasterVariantRow, group_base_price: int) -> int:
        return row.price or row.base_price or group_base_price or 0

    def upsert(
        self,
        session: Session,
        product_id: int,
        product_name: str,
        variants: Iterable[MasterVariantRow],
        group_base_price: int = 0,
    ) -> tuple[list[tuple[ProductVariant, str]], int, int]:
        """
        Return (items, created, media_created) where items pairs every
        written variant with its display name for the attribute step.
        """
        variants = list(variants)
        if not variants:
            return [], 0, 0

        by_barcode, by_sku = self._load_existing(session, variants)

        items: list[tuple[ProductVariant, str]] = []
        created = 0
        photo_alts: dict[str, Optional[str]] = {}

        for row in variants:
            pv = by_barcode.get(row.sku2) if row.sku2 else None
            if pv is None and row.sku1:
                pv = by_sku.get(row.sku1)

            price = self._price(row, group_base_price)

            if pv is None:
                pv = ProductVariant(
                    product_id=product_id,
                    sku=row.sku1 or row.sku2 or None,
                    barcode=row.sku2 or None,
                    price=price,
                    stock=row.stock,
                    bpom=row.bpom,
                    ingredients=row.ingredients,
                )
                session.add(pv)
                created += 1
            else:
                if pv.product_id != product_id:
                    logger.info(
                        "Variant %s moved from product %s to %s",
                        pv.barcode or pv.sku, pv.product_id, product_id,
                    )
                pv.product_id = product_id
                pv.sku = row.sku1 or pv.sku
                pv.barcode = row.sku2 or pv.barcode
                pv.price = price
                pv.stock = row.stock
                if row.bpom:
                    pv.bpom = row.bpom
                if row.ingredients:
                    pv.ingredients = row.ingredients
                pv.deleted_at = None

            # barcodes are unique per group; SKU matches stay limited to stored rows
            if pv.barcode:
                by_barcode[pv.barcode] = pv

            items.append((pv, row.variant_name))
            if row.photo and row.photo not in photo_alts:
                photo_alts[row.photo] = f"{product_name} - {row.variant_name}"

        session.flush()
        media_created = self.media.sync_with_alt(session, product_id, photo_alts)
        return items, created, media_created
