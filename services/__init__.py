"""
services - Shared helpers sitting between the import engine and the DB.
"""

from services.pivot_meta import PivotMeta, resolve_pivot_meta                 # noqa: F401
from services.slug_service import UnknownSlugTableError, ensure_unique_slug   # noqa: F401
