"""
Catalog back office - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR            = Path(__file__).resolve().parent
MASTER_COLUMNS_PATH = Path(os.environ.get(
    "CATALOG_MASTER_COLUMNS",
    BASE_DIR / "import_engine" / "master_columns.yaml",
))

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("CATALOG_DB", f"sqlite:///{BASE_DIR / 'catalog.sqlite'}")

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("CATALOG_HOST", "0.0.0.0")
PORT   = int(os.environ.get("CATALOG_PORT", "5000"))
DEBUG  = os.environ.get("CATALOG_DEBUG", "0") == "1"
SECRET = os.environ.get("CATALOG_SECRET", "catalog-dev-key-change-in-prod")

# ── Logging ────────────────────────────────────────────────────────────
LOG_LEVEL  = os.environ.get("CATALOG_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# ── CSV import ─────────────────────────────────────────────────────────
IMPORT_MAX_BYTES          = int(os.environ.get("CATALOG_IMPORT_MAX_BYTES", str(20 * 1024 * 1024)))
IMPORT_ALLOWED_EXTENSIONS = frozenset({".csv"})
IMPORT_ENCODING           = os.environ.get("CATALOG_IMPORT_ENCODING", "utf-8")

# ── Background jobs ────────────────────────────────────────────────────
# Tasks run synchronously when no broker is configured.
REDIS_URL = os.environ.get("REDIS_URL", "")
