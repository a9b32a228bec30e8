"""
import_engine.master_importer - Group master-schema rows into products.

One CSV row is one variant.  Rows sharing a product key (master SKU, else
product name) become one MasterGroup.  Shape problems are recorded as row
errors and never stop the rest of the file; grouping is pure and runs
before the transaction opens.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from import_engine.field_map import load_master_columns
from import_engine.report import ImportResult
from import_engine.rows import MasterGroup, MasterVariantRow
from import_engine.values import parse_int, parse_money, pick_value

logger = logging.getLogger(__name__)

DEFAULT_VARIANT_NAME = "Default"


class MasterImporter:

    def __init__(self, columns: Optional[Mapping[str, Sequence[str]]] = None):
        self.columns = columns or load_master_columns()

    def _get(self, row: Mapping[str, str], field: str) -> str:
        return pick_value(row, self.columns[field])

    def group(
        self,
        rows: Sequence[Mapping[str, str]],
        result: ImportResult,
        line_numbers: Optional[Sequence[int]] = None,
    ) -> dict[str, MasterGroup]:
        """
        Return groups keyed by product key, in first-seen order.
        Errors carry `line_numbers[i]` when given, else the line the row
        would sit on in a file without blank lines.
        """
        groups: dict[str, MasterGroup] = {}

        for idx, row in enumerate(rows):
            row_no = line_numbers[idx] if line_numbers else idx + 2     # line 1 is the header

            name = self._get(row, "product_name")
            if not name:
                result.add_error(row_no, "Nama Produk kosong")
                continue

            master_sku = self._get(row, "master_sku")
            key = master_sku or name

            grp = groups.get(key)
            if grp is None:
                grp = MasterGroup(
                    product_name=name,
                    master_sku=master_sku,
                    brand_name=self._get(row, "brand"),
                    parent_category=self._get(row, "parent_category"),
                    sub_category_1=self._get(row, "sub_category_1"),
                    sub_category_2=self._get(row, "sub_category_2"),
                    status=self._get(row, "status"),
                    tags=self._get(row, "tags"),
                    concern=self._get(row, "concern"),
                    sub_concern=self._get(row, "sub_concern"),
                    how_to_use=self._get(row, "how_to_use") or None,
                    base_price=self._base_price(row),
                )
                groups[key] = grp
            elif not grp.base_price:
                grp.base_price = self._base_price(row)

            for photo_field in ("thumbnail", "photo_2"):
                url = self._get(row, photo_field)
                if url and url not in grp.photos:
                    grp.photos.append(url)

            barcode = self._get(row, "sku2")
            if not barcode:
                result.add_error(row_no, "SKU Varian 2 (barcode) kosong", name=name)
                continue

            grp.variants.append(MasterVariantRow(
                row_no=row_no,
                variant_name=self._get(row, "variant_name") or DEFAULT_VARIANT_NAME,
                sku1=self._get(row, "sku1") or barcode,
                sku2=barcode,
                stock=parse_int(self._get(row, "stock")),
                base_price=parse_money(self._get(row, "base_price")),
                price=parse_money(self._get(row, "price")),
                photo=self._get(row, "photo_variant"),
                bpom=self._get(row, "bpom") or None,
                ingredients=self._get(row, "ingredients") or None,
            ))

        for grp in groups.values():
            grp.variants = self._dedupe_by_barcode(grp.variants)

        logger.debug("Grouped %d rows into %d products", len(rows), len(groups))
        return groups

    def _base_price(self, row: Mapping[str, str]) -> int:
        return parse_money(self._get(row, "base_price") or self._get(row, "price"))

    @staticmethod
    def _dedupe_by_barcode(variants: list[MasterVariantRow]) -> list[MasterVariantRow]:
        # last row wins, position of the first occurrence is kept
        by_barcode: dict[str, MasterVariantRow] = {}
        for v in variants:
            by_barcode[v.sku2] = v
        return list(by_barcode.values())
