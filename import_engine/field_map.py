"""
import_engine.field_map - Column-name contracts for both CSV schemas.

Template schema: snake_case headers that map 1:1 onto Product columns.
Master schema:   Indonesian labels, resolved through master_columns.yaml.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import yaml

import config

logger = logging.getLogger(__name__)

TEMPLATE = "template"
MASTER = "master"

# Presence of all three (after header normalisation) ⇒ master schema
MASTER_DISCRIMINATOR_KEYS = frozenset({"nama produk", "nama varian", "sku master"})

# Logical master fields every column file must define
MASTER_FIELDS = (
    "product_name", "variant_name", "master_sku", "sku1", "sku2",
    "brand", "parent_category", "sub_category_1", "sub_category_2",
    "status", "tags", "concern", "sub_concern",
    "stock", "base_price", "price",
    "thumbnail", "photo_2", "photo_variant",
    "bpom", "ingredients", "how_to_use",
)


def detect_schema(keys: Iterable[str]) -> str:
    """Exact key presence only: MASTER or TEMPLATE."""
    present = {str(k).strip().lower() for k in keys}
    return MASTER if MASTER_DISCRIMINATOR_KEYS <= present else TEMPLATE


def load_master_columns(path: str | Path | None = None) -> dict[str, tuple[str, ...]]:
    """
    Read the alias file.  Missing logical fields are a configuration
    error and raise ValueError.
    """
    path = Path(path or config.MASTER_COLUMNS_PATH)
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}

    missing = [f for f in MASTER_FIELDS if not data.get(f)]
    if missing:
        raise ValueError(f"{path.name}: no aliases for {', '.join(missing)}")

    unknown = set(data) - set(MASTER_FIELDS)
    if unknown:
        logger.warning("%s: ignoring unknown fields %s", path.name, sorted(unknown))

    return {
        f: tuple(str(alias).strip().lower() for alias in data[f])
        for f in MASTER_FIELDS
    }
