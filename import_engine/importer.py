"""
import_engine.importer - Top-level orchestrator.

Coordinates csv_parser → schema detection → template or master path
→ DB commit, and produces a structured ImportResult.

Reading, validation and grouping happen before any session exists.
Only the processing step runs inside the (single) transaction.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from sqlalchemy.orm import Session

from db.engine import get_session
from import_engine.csv_parser import read_csv
from import_engine.field_map import MASTER, detect_schema
from import_engine.master_importer import MasterImporter
from import_engine.master_processor import MasterProcessor
from import_engine.report import EMPTY_FILE_MESSAGE, ImportResult
from import_engine.template_importer import TemplateImporter

logger = logging.getLogger(__name__)


def run_import(
    file_path: str | Path,
    *,
    session_factory: Optional[Callable[[], Session]] = None,
) -> ImportResult:
    """
    Import a CSV file into the catalog.

    Parameters
    ----------
    file_path : local path of the uploaded CSV; the caller owns the file
    session_factory : zero-arg callable returning a new Session
                      (defaults to db.engine.get_session)

    Returns
    -------
    ImportResult with soft row errors and, for master files, run stats.

    Raises
    ------
    CsvReadError when the file cannot be parsed, and any database error
    raised while processing.  In the latter case nothing is committed.
    """
    result = ImportResult()

    content = read_csv(file_path)
    if not content.rows:
        result.add_error("-", EMPTY_FILE_MESSAGE)
        return result

    schema = detect_schema(content.rows[0].keys())
    logger.info(
        "Importing %s: %d rows, separator %r, %s schema",
        Path(file_path).name, len(content.rows), content.separator, schema,
    )

    groups, valid_rows = {}, []
    template = TemplateImporter()
    if schema == MASTER:
        groups = MasterImporter().group(content.rows, result, content.line_numbers)
    else:
        valid_rows = template.validate(content.rows, result, content.line_numbers)

    if result.errors:
        logger.info("%d rows rejected before processing", len(result.errors))

    session = (session_factory or get_session)()
    try:
        if schema == MASTER:
            result.stats = MasterProcessor(session).process_all(groups.values())
        else:
            template.process(session, valid_rows)
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("Import of %s failed, transaction rolled back", Path(file_path).name)
        raise
    finally:
        session.close()

    if result.stats is not None:
        logger.info("Import finished: %s", result.stats.to_dict())
    else:
        logger.info("Import finished: %d errors", len(result.errors))
    return result

