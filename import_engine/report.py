"""
import_engine.report - Structured result of a CSV import run.

The dict shapes produced by to_dict() are the wire contract of the
import endpoint (camelCase stat keys included).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

EMPTY_FILE_MESSAGE = "File CSV kosong"


@dataclass
class ImportRowError:
    """One rejected row.  `row` is a line number, or '-' for file-level issues."""
    row: Union[int, str]
    message: str
    name: Optional[str] = None

    def to_dict(self) -> dict:
        d = {"row": self.row, "message": self.message}
        if self.name is not None:
            d["name"] = self.name
        return d


@dataclass
class ImportStats:
    product_created: int = 0
    product_updated: int = 0
    variant_created: int = 0
    media_created: int = 0
    tag_attached: int = 0
    concern_attached: int = 0
    variant_attr_attached: int = 0
    online_created: int = 0

    def to_dict(self) -> dict:
        return {
            "productCreated": self.product_created,
            "productUpdated": self.product_updated,
            "variantCreated": self.variant_created,
            "mediaCreated": self.media_created,
            "tagAttached": self.tag_attached,
            "concernAttached": self.concern_attached,
            "variantAttrAttached": self.variant_attr_attached,
            "onlineCreated": self.online_created,
        }


@dataclass
class ImportResult:
    errors: list[ImportRowError] = field(default_factory=list)
    stats: Optional[ImportStats] = None       # master schema only

    @property
    def success(self) -> bool:
        return not self.errors

    def add_error(self, row: Union[int, str], message: str, name: Optional[str] = None):
        self.errors.append(ImportRowError(row=row, message=message, name=name))

    def to_dict(self) -> dict:
        d = {
            "success": self.success,
            "errors": [e.to_dict() for e in self.errors],
        }
        if self.stats is not None:
            d["stats"] = self.stats.to_dict()
        return d
