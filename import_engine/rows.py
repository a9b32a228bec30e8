"""
import_engine.rows - Typed rows produced at the validation boundary.

Raw CSV dicts never travel past TemplateImporter.validate() or
MasterImporter.group(); everything downstream works on these.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class TemplateRow:
    row_no: int
    name: str
    category_type_id: int
    slug: str = ""
    master_sku: Optional[str] = None
    description: Optional[str] = None
    brand_id: Optional[int] = None
    persona_id: Optional[int] = None
    base_price: float = 0
    weight: int = 0
    is_flash_sale: bool = False
    status: str = "normal"
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None
    popularity: Optional[int] = None
    position: Optional[int] = None


@dataclass
class MasterVariantRow:
    row_no: int
    variant_name: str = "Default"
    sku1: str = ""
    sku2: str = ""              # barcode
    stock: int = 0
    base_price: int = 0
    price: int = 0
    photo: str = ""
    bpom: Optional[str] = None
    ingredients: Optional[str] = None


@dataclass
class MasterGroup:
    product_name: str
    master_sku: str = ""
    brand_name: str = ""
    parent_category: str = ""
    sub_category_1: str = ""
    sub_category_2: str = ""
    status: str = ""
    tags: str = ""
    concern: str = ""
    sub_concern: str = ""
    how_to_use: Optional[str] = None
    base_price: int = 0
    photos: list[str] = field(default_factory=list)
    variants: list[MasterVariantRow] = field(default_factory=list)
