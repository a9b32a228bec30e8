"""
db.models - SQLAlchemy ORM declarations for the catalog.

Tables
------
category_types   - 3-level category tree (parent → sub → sub-sub).
brands, tags,
concerns,
concern_options  - name + globally unique slug, created lazily by imports.
attributes       - variant attribute definitions ("Varian", …).
attribute_values - one value per (attribute, product variant).
products         - catalog entries; identity is master_sku, then name.
product_variants - barcode / SKU pair, price, stock.
product_medias   - image URLs, append-only from imports.
product_onlines  - at most one row per product: "published".
product_variant_attributes - join variant ↔ attribute value.

product_tags / product_concerns are plain Core tables: their optional
columns differ between deployments, so writers go through
services.pivot_meta instead of an ORM mapping.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean, Column, Date, DateTime, Enum, ForeignKey, Index, Integer,
    Numeric, SmallInteger, String, Table, Text, UniqueConstraint, func,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _now() -> datetime:
    return datetime.now(timezone.utc)


PRODUCT_STATUSES = ("normal", "war", "draft")


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at = Column(DateTime, default=_now)
    updated_at = Column(DateTime, default=_now, onupdate=_now)


# ── Taxonomy ───────────────────────────────────────────────────────────

class CategoryType(TimestampMixin, Base):
    __tablename__ = "category_types"

    id        = Column(Integer, primary_key=True, autoincrement=True)
    name      = Column(String(255), nullable=False)
    slug      = Column(String(255), nullable=False, unique=True)
    parent_id = Column(Integer, ForeignKey("category_types.id", ondelete="CASCADE"),
                       nullable=True, index=True)
    level     = Column(SmallInteger, nullable=False, default=1)
    deleted_at = Column(DateTime, nullable=True)

    parent   = relationship("CategoryType", remote_side=[id], back_populates="children")
    children = relationship("CategoryType", back_populates="parent")

    __table_args__ = (
        Index("ix_category_name_parent", "name", "parent_id"),
    )


class Brand(TimestampMixin, Base):
    __tablename__ = "brands"

    id        = Column(Integer, primary_key=True, autoincrement=True)
    name      = Column(String(255), nullable=False, index=True)
    slug      = Column(String(255), nullable=False, unique=True)
    is_active = Column(Boolean, nullable=False, default=True)
    deleted_at = Column(DateTime, nullable=True)


class Tag(TimestampMixin, Base):
    __tablename__ = "tags"

    id   = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), nullable=False, unique=True)
    deleted_at = Column(DateTime, nullable=True)


class Concern(TimestampMixin, Base):
    __tablename__ = "concerns"

    id   = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), nullable=False, unique=True)
    deleted_at = Column(DateTime, nullable=True)

    options = relationship("ConcernOption", back_populates="concern")


class ConcernOption(TimestampMixin, Base):
    __tablename__ = "concern_options"

    id         = Column(Integer, primary_key=True, autoincrement=True)
    concern_id = Column(Integer, ForeignKey("concerns.id", ondelete="CASCADE"),
                        nullable=False, index=True)
    name       = Column(String(255), nullable=False)
    slug       = Column(String(255), nullable=False, unique=True)
    deleted_at = Column(DateTime, nullable=True)

    concern = relationship("Concern", back_populates="options")


class Attribute(TimestampMixin, Base):
    __tablename__ = "attributes"

    id   = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    deleted_at = Column(DateTime, nullable=True)


class AttributeValue(TimestampMixin, Base):
    __tablename__ = "attribute_values"

    id                 = Column(Integer, primary_key=True, autoincrement=True)
    value              = Column(String(255), nullable=False)
    attribute_id       = Column(Integer, ForeignKey("attributes.id", ondelete="CASCADE"),
                                nullable=False)
    product_variant_id = Column(Integer, ForeignKey("product_variants.id", ondelete="SET NULL"),
                                nullable=True, index=True)
    deleted_at         = Column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint("attribute_id", "product_variant_id", name="uq_attr_value_variant"),
    )


# ── Products ───────────────────────────────────────────────────────────

class Product(TimestampMixin, Base):
    __tablename__ = "products"

    id            = Column(Integer, primary_key=True, autoincrement=True)
    name          = Column(String(255), nullable=False, index=True)
    slug          = Column(String(255), nullable=False, unique=True)
    master_sku    = Column(String(100), nullable=True, index=True)
    description   = Column(Text, nullable=True)
    how_to_use    = Column(Text, nullable=True)

    base_price    = Column(Numeric(12, 2), nullable=True)
    weight        = Column(Integer, nullable=False, default=0)
    is_flash_sale = Column(Boolean, nullable=False, default=False)
    status        = Column(Enum(*PRODUCT_STATUSES, name="product_status", native_enum=False),
                           nullable=False, default="draft")

    category_type_id = Column(Integer, ForeignKey("category_types.id", ondelete="CASCADE"),
                              nullable=True, index=True)
    brand_id         = Column(Integer, ForeignKey("brands.id", ondelete="SET NULL"),
                              nullable=True, index=True)
    persona_id       = Column(Integer, nullable=True)

    # ── SEO / ordering ─────────────────────────────────────────────────
    meta_title       = Column(Text, nullable=True)
    meta_description = Column(Text, nullable=True)
    meta_keywords    = Column(Text, nullable=True)
    popularity       = Column(Integer, nullable=True)
    position         = Column(Integer, nullable=True)

    deleted_at = Column(DateTime, nullable=True)

    category = relationship("CategoryType")
    brand    = relationship("Brand")
    variants = relationship("ProductVariant", back_populates="product")
    medias   = relationship("ProductMedia", back_populates="product",
                            order_by="ProductMedia.id")
    online   = relationship("ProductOnline", back_populates="product", uselist=False)


class ProductVariant(TimestampMixin, Base):
    __tablename__ = "product_variants"

    id          = Column(Integer, primary_key=True, autoincrement=True)
    product_id  = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"),
                         nullable=False, index=True)
    sku         = Column(String(100), nullable=True, index=True)
    barcode     = Column(String(100), nullable=True, index=True)
    price       = Column(Numeric(12, 2), nullable=False, default=0)
    stock       = Column(Integer, nullable=False, default=0)
    bpom        = Column(String(100), nullable=True)
    ingredients = Column(Text, nullable=True)
    deleted_at  = Column(DateTime, nullable=True)

    product = relationship("Product", back_populates="variants")


class ProductMedia(TimestampMixin, Base):
    __tablename__ = "product_medias"

    id         = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"),
                        nullable=False, index=True)
    url        = Column(Text, nullable=False)
    alt_text   = Column(Text, nullable=True)
    type       = Column(SmallInteger, nullable=False, default=1)   # 1 = image
    deleted_at = Column(DateTime, nullable=True)

    product = relationship("Product", back_populates="medias")


class ProductOnline(TimestampMixin, Base):
    __tablename__ = "product_onlines"

    id           = Column(Integer, primary_key=True, autoincrement=True)
    product_id   = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"),
                          nullable=False, unique=True)
    is_active    = Column(Boolean, nullable=False, default=True)
    published_at = Column(DateTime, default=_now)

    product = relationship("Product", back_populates="online")


class ProductVariantAttribute(TimestampMixin, Base):
    __tablename__ = "product_variant_attributes"

    id                 = Column(Integer, primary_key=True, autoincrement=True)
    product_variant_id = Column(Integer, ForeignKey("product_variants.id", ondelete="CASCADE"),
                                nullable=False)
    attribute_value_id = Column(Integer, ForeignKey("attribute_values.id", ondelete="CASCADE"),
                                nullable=False)

    __table_args__ = (
        UniqueConstraint("product_variant_id", "attribute_value_id", name="pva_variant_attr_unique"),
    )


# ── Pivot tables ───────────────────────────────────────────────────────

product_tags = Table(
    "product_tags", Base.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False),
    Column("start_date", Date, nullable=True),
    Column("end_date", Date, nullable=True),
    Column("created_at", DateTime, server_default=func.now()),
    Column("updated_at", DateTime, server_default=func.now()),
    Column("deleted_at", DateTime, nullable=True),
    UniqueConstraint("product_id", "tag_id", name="uq_product_tag"),
)

product_concerns = Table(
    "product_concerns", Base.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
    Column("concern_option_id", Integer, ForeignKey("concern_options.id", ondelete="CASCADE"),
           nullable=False),
    Column("created_at", DateTime, server_default=func.now()),
    Column("updated_at", DateTime, server_default=func.now()),
    Column("deleted_at", DateTime, nullable=True),
    UniqueConstraint("product_id", "concern_option_id", name="uq_product_concern_option"),
)
