"""
Celery tasks for the import engine.
"""

from __future__ import annotations

import logging
import os

from sqlalchemy.exc import SQLAlchemyError

from celery_app import app
from import_engine.csv_parser import CsvReadError
from import_engine.importer import run_import

logger = logging.getLogger(__name__)


@app.task(name="import_engine.import_products")
def import_products(file_path: str) -> dict:
    """
    Run a CSV import outside the request.  The task owns `file_path`
    and deletes it whatever the outcome.
    """
    try:
        result = run_import(file_path)
        return result.to_dict()

    except CsvReadError as e:
        logger.error(f"Unreadable CSV {file_path}: {e}")
        return {"success": False, "errors": [{"row": "-", "message": str(e)}]}

    except SQLAlchemyError as e:
        logger.error(f"Import of {file_path} rolled back: {e}")
        return {"success": False, "errors": [{"row": "-", "message": "Import gagal, tidak ada data yang disimpan"}]}

    finally:
        try:
            os.remove(file_path)
        except FileNotFoundError:
            pass
