"""
import_engine.csv_parser - Low-level CSV reading and cleaning.

Responsibilities:
  • delimiter sniffing (comma vs. semicolon, first line only)
  • BOM removal, header trimming + lower-casing
  • per-cell normalisation via values.normalize_value
  • streaming the file row by row; the whole file is never read at once
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path

import config
from import_engine.values import normalize_value

logger = logging.getLogger(__name__)

BOM = "\ufeff"


class CsvReadError(Exception):
    """The file could not be read or parsed as CSV.  Aborts the run."""


@dataclass
class CsvContent:
    rows: list[dict[str, str]] = field(default_factory=list)
    separator: str = ","
    # file line (header = 1) on which each kept row ends
    line_numbers: list[int] = field(default_factory=list)


def detect_separator(first_line: str) -> str:
    """';' only when it strictly outnumbers ',' on the header line."""
    line = first_line.strip()
    return ";" if line.count(";") > line.count(",") else ","


def normalize_header(header: str | None) -> str:
    return str(header or "").replace(BOM, "").strip().lower()


def _is_skipped_header(header: str) -> bool:
    # Spreadsheet exports leave blank / "Unnamed: 7" columns from trailing delimiters
    return not header or header.startswith("unnamed")


def read_csv(path: str | Path, encoding: str | None = None) -> CsvContent:
    """
    Stream a CSV file into normalised dict rows.

    Raises CsvReadError on undecodable or malformed input; nothing has
    touched the database at that point.
    """
    path = Path(path)
    encoding = encoding or config.IMPORT_ENCODING

    try:
        with open(path, encoding=encoding, newline="") as fh:
            separator = detect_separator(fh.readline())
            fh.seek(0)

            reader = csv.DictReader(fh, delimiter=separator, strict=True)
            if reader.fieldnames is None:
                return CsvContent(rows=[], separator=separator)

            headers = [normalize_header(h) for h in reader.fieldnames]
            reader.fieldnames = headers
            keep = [h for h in headers if not _is_skipped_header(h)]

            rows: list[dict[str, str]] = []
            line_numbers: list[int] = []
            for raw in reader:
                row = {h: normalize_value(raw.get(h)) for h in keep}
                if not any(row.values()):
                    continue
                rows.append(row)
                line_numbers.append(reader.line_num)
    except (csv.Error, UnicodeDecodeError) as exc:
        raise CsvReadError(f"Gagal membaca CSV: {exc}") from exc
    except OSError as exc:
        raise CsvReadError(f"File CSV tidak dapat dibuka: {exc}") from exc

    logger.debug("Read %d rows from %s (separator %r)", len(rows), path.name, separator)
    return CsvContent(rows=rows, separator=separator, line_numbers=line_numbers)
