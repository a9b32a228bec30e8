"""
import_engine.template_importer - One CSV row = one product.

validate() is a pure pass over the raw rows: every rejected row becomes
an ImportRowError and the rest of the file carries on.  process() only
ever creates; there is no identity matching on this path, so importing
the same file twice yields two sets of products.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from sqlalchemy.orm import Session

from db.models import Product
from import_engine.report import ImportResult
from import_engine.rows import TemplateRow
from import_engine.sync.online_ensurer import ProductOnlineEnsurer
from import_engine.values import is_number, slugify
from services.slug_service import ensure_unique_slug

logger = logging.getLogger(__name__)

STATUSES = ("normal", "war", "draft")

_NUMERIC_FIELDS = ("base_price", "weight", "popularity", "position")
_ID_FIELDS = ("brand_id", "persona_id")


class RowError(Exception):
    """Raised when a row cannot be imported."""
    pass


def _opt_int(value: str):
    return int(float(value)) if value else None


def _opt_str(value: str):
    return value or None


class TemplateImporter:

    def __init__(self):
        self.online = ProductOnlineEnsurer()

    @staticmethod
    def check_row(row: Mapping[str, str]) -> None:
        """Raise RowError with a user-facing message for the first bad field."""
        name = row.get("name") or ""
        if not name.strip():
            raise RowError('Field "name" wajib diisi')

        cat = row.get("category_type_id") or ""
        if not cat or not is_number(cat):
            raise RowError('Field "category_type_id" wajib diisi dan harus angka')

        for f in _NUMERIC_FIELDS:
            v = row.get(f) or ""
            if v and not is_number(v):
                raise RowError(f'Field "{f}" harus berupa angka')

        flash = row.get("is_flash_sale") or ""
        if flash and flash not in ("0", "1"):
            raise RowError('Field "is_flash_sale" hanya boleh bernilai 0 atau 1')

        status = row.get("status") or ""
        if status and status not in STATUSES:
            raise RowError('Field "status" harus salah satu: normal | war | draft')

        for f in _ID_FIELDS:
            v = row.get(f) or ""
            if v and not is_number(v):
                raise RowError(f'Field "{f}" harus berupa angka')

    def validate(
        self,
        rows: Sequence[Mapping[str, str]],
        result: ImportResult,
        line_numbers: Optional[Sequence[int]] = None,
    ) -> list[TemplateRow]:
        """Rows are numbered from 1 after the header, blank lines included."""
        valid: list[TemplateRow] = []
        for idx, row in enumerate(rows):
            row_no = line_numbers[idx] - 1 if line_numbers else idx + 1
            try:
                self.check_row(row)
            except RowError as exc:
                result.add_error(row_no, str(exc), name=row.get("name") or None)
                continue
            valid.append(self._to_row(row_no, row))
        return valid

    @staticmethod
    def _to_row(row_no: int, row: Mapping[str, str]) -> TemplateRow:
        return TemplateRow(
            row_no=row_no,
            name=row["name"].strip(),
            category_type_id=int(float(row["category_type_id"])),
            slug=row.get("slug") or "",
            master_sku=_opt_str(row.get("master_sku")),
            description=_opt_str(row.get("description")),
            brand_id=_opt_int(row.get("brand_id")),
            persona_id=_opt_int(row.get("persona_id")),
            base_price=float(row.get("base_price") or 0),
            weight=int(float(row.get("weight") or 0)),
            is_flash_sale=row.get("is_flash_sale") == "1",
            status=row.get("status") or "normal",
            meta_title=_opt_str(row.get("meta_title")),
            meta_description=_opt_str(row.get("meta_description")),
            meta_keywords=_opt_str(row.get("meta_keywords")),
            popularity=_opt_int(row.get("popularity")),
            position=_opt_int(row.get("position")),
        )

    def process(self, session: Session, rows: Sequence[TemplateRow]) -> int:
        """Create one product (and its ProductOnline) per row; return how many."""
        for r in rows:
            # a supplied slug is taken as-is; a clash is a hard failure
            slug = r.slug or ensure_unique_slug(session, "products", slugify(r.name, "product"))
            product = Product(
                name=r.name,
                slug=slug,
                master_sku=r.master_sku,
                description=r.description,
                base_price=r.base_price,
                weight=r.weight,
                is_flash_sale=r.is_flash_sale,
                status=r.status,
                category_type_id=r.category_type_id,
                brand_id=r.brand_id,
                persona_id=r.persona_id,
                meta_title=r.meta_title,
                meta_description=r.meta_description,
                meta_keywords=r.meta_keywords,
                popularity=r.popularity,
                position=r.position,
            )
            session.add(product)
            session.flush()
            self.online.ensure(session, product.id)

        logger.debug("Template path created %d products", len(rows))
        return len(rows)
