"""
import_engine - Bulk catalog CSV import pipeline.

Public API:
    run_import(file_path) → ImportResult
"""

from import_engine.csv_parser import CsvReadError     # noqa: F401
from import_engine.importer import run_import         # noqa: F401
from import_engine.report import ImportResult         # noqa: F401
