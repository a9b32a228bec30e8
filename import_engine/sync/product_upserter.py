"""
import_engine.sync.product_upserter - Create-or-update one product.

Identity: exact master_sku first, then exact name.  An update overwrites
the fields the CSV carries and leaves the rest of the row alone, so a
re-import with blank optional columns does not wipe stored values.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from db.models import Product
from import_engine.rows import MasterGroup
from import_engine.values import map_status, slugify
from services.slug_service import ensure_unique_slug


class ProductUpserter:

    @staticmethod
    def find_existing(session: Session, group: MasterGroup) -> Optional[Product]:
        product = None
        if group.master_sku:
            product = session.query(Product).filter(Product.master_sku == group.master_sku).first()
        if product is None:
            product = session.query(Product).filter(Product.name == group.product_name).first()
        return product

    def upsert(
        self,
        session: Session,
        group: MasterGroup,
        *,
        category_type_id: int,
        brand_id: Optional[int] = None,
    ) -> tuple[Product, bool]:
        """Return (product, created)."""
        product = self.find_existing(session, group)

        if product is not None:
            product.name = group.product_name
            product.category_type_id = category_type_id
            if group.master_sku and not product.master_sku:
                product.master_sku = group.master_sku
            if group.base_price:
                product.base_price = group.base_price
            if brand_id:
                product.brand_id = brand_id
            if group.status:
                product.status = map_status(group.status)
            if group.how_to_use:
                product.how_to_use = group.how_to_use
            session.flush()
            return product, False

        slug = ensure_unique_slug(session, "products", slugify(group.product_name, "product"))
        product = Product(
            name=group.product_name,
            slug=slug,
            master_sku=group.master_sku or None,
            description=None,
            how_to_use=group.how_to_use or None,
            base_price=group.base_price or 0,
            weight=0,
            is_flash_sale=False,
            status=map_status(group.status),
            category_type_id=category_type_id,
            brand_id=brand_id,
        )
        session.add(product)
        session.flush()
        return product, True
