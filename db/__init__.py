"""
db - Database layer.

Public API:
    init_db()       → create engine + tables
    get_session()   → new Session
    Product, ProductVariant, Brand, … → ORM models
"""

from db.engine import init_db, get_engine, get_session          # noqa: F401
from db.models import (                                         # noqa: F401
    Base,
    Attribute,
    AttributeValue,
    Brand,
    CategoryType,
    Concern,
    ConcernOption,
    Product,
    ProductMedia,
    ProductOnline,
    ProductVariant,
    ProductVariantAttribute,
    Tag,
    product_concerns,
    product_tags,
)
