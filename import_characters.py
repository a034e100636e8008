#!/usr/bin/env python3
"""
Import character records from a CSV or Excel export into the SQLite database.

The file must have a header row; for an ``.xlsx`` workbook the first
sheet is read.  Recognised columns are ``userId``,
``nickname``, ``level``, ``job``, ``jobCode``, ``meso``, ``playTime`` and
``exp``; any other column (including timestamps) is ignored, because
creation and update times are always assigned by the database.

Rows without ``userId`` or ``nickname`` are skipped with a warning, as
are rows that fail validation or duplicate an existing ``userId``.
Numbers may contain thousands separators ("1,000").  A missing or zero
level becomes 1.

Usage:
    python import_characters.py --db ./characters.db --file ./characters.csv
    python import_characters.py --db ./characters.db --file ./User.xlsx
"""

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple

from openpyxl import load_workbook
from pydantic import ValidationError

from ranking_admin_api.app.core.logging_config import setup_logging
from ranking_admin_api.app.core.parsing import parse_leading_int
from ranking_admin_api.app.repositories.character_repository import (
    CharacterStore,
    DuplicateRecordError,
    SQLiteCharacterStore,
    StorageError,
)
from ranking_admin_api.app.schemas.character import CharacterCreate

logger = logging.getLogger("import_characters")


def parse_number(value: Optional[str]) -> Optional[int]:
    """Parse the leading integer of ``value``; ``None`` if there is none.

    >>> parse_number("1,000")
    1000
    >>> parse_number("12.7")
    12
    >>> parse_number("n/a") is None
    True
    """
    if value is None:
        return None
    return parse_leading_int(value.replace(",", ""))


def row_to_character(row: Dict[str, Optional[str]]) -> Optional[CharacterCreate]:
    """Convert a spreadsheet row to a ``CharacterCreate``.

    Returns ``None`` when a required field is missing.  Raises
    ``ValidationError`` when a present value is out of range.
    """
    user_id = (row.get("userId") or "").strip()
    nickname = (row.get("nickname") or "").strip()
    if not user_id or not nickname:
        return None
    job = (row.get("job") or "").strip() or None
    return CharacterCreate(
        user_id=user_id,
        nickname=nickname,
        level=parse_number(row.get("level")) or 1,
        job=job,
        job_code=parse_number(row.get("jobCode")),
        meso=parse_number(row.get("meso")),
        play_time=parse_number(row.get("playTime")),
        exp=parse_number(row.get("exp")),
    )


XLSX_SUFFIXES = {".xlsx", ".xlsm"}


def _cell_to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def read_csv_rows(path: Path) -> Iterator[Dict[str, Optional[str]]]:
    with path.open(newline="", encoding="utf-8-sig") as fh:
        yield from csv.DictReader(fh)


def read_xlsx_rows(path: Path) -> Iterator[Dict[str, Optional[str]]]:
    """Yield the rows of the first sheet keyed by the header row."""
    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        rows = workbook.worksheets[0].iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            return
        names = [_cell_to_text(cell) for cell in header]
        for values in rows:
            yield {
                name: _cell_to_text(value)
                for name, value in zip(names, values)
                if name is not None
            }
    finally:
        workbook.close()


def read_rows(path: Path) -> Iterator[Dict[str, Optional[str]]]:
    if path.suffix.lower() in XLSX_SUFFIXES:
        return read_xlsx_rows(path)
    return read_csv_rows(path)


def import_file(store: CharacterStore, path: Path) -> Tuple[int, int]:
    """Insert every usable row of ``path``; return ``(imported, skipped)``.

    ``.xlsx`` files are read as Excel workbooks, anything else as CSV.
    ``StorageError`` other than a duplicate key aborts the import.
    """
    imported = skipped = 0
    for line_no, row in enumerate(read_rows(path), start=2):
        try:
            record = row_to_character(row)
        except ValidationError as exc:
            logger.warning("Line %s: invalid row skipped (%s)", line_no, exc.errors()[0]["msg"])
            skipped += 1
            continue
        if record is None:
            logger.warning("Line %s: row without userId or nickname skipped", line_no)
            skipped += 1
            continue
        try:
            store.insert(record)
        except DuplicateRecordError:
            logger.warning("Line %s: userId %s already exists, skipped", line_no, record.user_id)
            skipped += 1
            continue
        imported += 1
    return imported, skipped


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Import character records from CSV or Excel into SQLite.")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (created if missing)")
    ap.add_argument("--file", "--csv", dest="file", required=True, type=Path, help="CSV or .xlsx file to import")
    ap.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    args = ap.parse_args(argv)

    setup_logging(args.log_level)

    if not args.file.is_file():
        logger.error("Import file not found: %s", args.file.resolve())
        return 1

    try:
        store = SQLiteCharacterStore.open(str(Path(args.db).resolve()))
    except StorageError as exc:
        logger.error("Could not open database %s: %s", args.db, exc)
        return 2

    try:
        imported, skipped = import_file(store, args.file)
    except StorageError as exc:
        logger.error("Import aborted: %s", exc)
        return 2
    finally:
        store.close()

    logger.info("Imported %s characters, skipped %s rows", imported, skipped)
    return 0


if __name__ == "__main__":
    sys.exit(main())
