"""
api.routes_import - /api/v1/products/import endpoint.

Accepts one CSV via multipart upload (field 'file').  The upload is
written to a temp file, handed to the import engine and removed again;
in background mode the Celery task takes over the temp file instead.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from flask import request, jsonify
from sqlalchemy.exc import SQLAlchemyError

import config
from api import api_bp
from import_engine import CsvReadError, run_import

logger = logging.getLogger(__name__)

BACKGROUND_MESSAGE = "Import sedang diproses di background."


def _failure(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def _save_upload(upload) -> str:
    with tempfile.NamedTemporaryFile(delete=False, prefix="catalog-import-", suffix=".csv") as temp_file:
        upload.save(temp_file)
        return temp_file.name


@api_bp.route("/products/import", methods=["POST"])
def api_import_products():
    """
    POST /api/v1/products/import?background=0|1

    Multipart: field name 'file'.
    Returns {success, errors[], stats?}; 202 when queued in background.
    """
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        return _failure("File CSV wajib diunggah", 400)

    ext = Path(upload.filename).suffix.lower()
    if ext not in config.IMPORT_ALLOWED_EXTENSIONS:
        return _failure("File harus berformat .csv", 400)

    path = _save_upload(upload)

    if request.args.get("background", "0") == "1":
        from import_engine.tasks import import_products
        import_products.delay(path)
        return jsonify({"success": True, "message": BACKGROUND_MESSAGE}), 202

    try:
        result = run_import(path)
    except CsvReadError as exc:
        return _failure(str(exc), 400)
    except SQLAlchemyError:
        logger.exception("Product import failed for %s", upload.filename)
        return _failure("Import gagal, tidak ada data yang disimpan", 500)
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass

    return jsonify(result.to_dict())
