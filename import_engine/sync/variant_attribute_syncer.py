"""
import_engine.sync.variant_attribute_syncer - The "Varian" value of a variant.

attribute_values is unique per (attribute, variant): an existing row is
overwritten and un-deleted, never duplicated.  The value is then linked
through product_variant_attributes.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from db.models import AttributeValue, ProductVariantAttribute


class VariantAttributeSyncer:

    def upsert_value(self, session: Session, attribute_id: int, variant_id: int, value: str) -> bool:
        """True when a new AttributeValue row was inserted."""
        av = (
            session.query(AttributeValue)
            .filter(
                AttributeValue.attribute_id == attribute_id,
                AttributeValue.product_variant_id == variant_id,
            )
            .first()
        )

        created = av is None
        if created:
            av = AttributeValue(attribute_id=attribute_id, product_variant_id=variant_id, value=value)
            session.add(av)
        else:
            av.value = value
            av.deleted_at = None
        session.flush()

        self._link(session, variant_id, av.id)
        return created

    @staticmethod
    def _link(session: Session, variant_id: int, attribute_value_id: int) -> None:
        linked = (
            session.query(ProductVariantAttribute.id)
            .filter(
                ProductVariantAttribute.product_variant_id == variant_id,
                ProductVariantAttribute.attribute_value_id == attribute_value_id,
            )
            .first()
        )
        if not linked:
            session.add(ProductVariantAttribute(
                product_variant_id=variant_id, attribute_value_id=attribute_value_id,
            ))
            session.flush()
