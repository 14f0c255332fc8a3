"""Reading uploaded files into the text the parser consumes."""

from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .errors import UnsupportedFileError
from .normalize import field_text

logger = logging.getLogger(__name__)

ACCEPTED_SUFFIXES = (".csv", ".xlsx")


def _cell_text(value: object) -> str:
    if value is None:
        return ""
    # Whole-number floats come back from Excel as `12.0`.
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return field_text(str(value))


def xlsx_to_text(content: bytes) -> str:
    """Flatten the active sheet of a workbook into comma-joined lines.

    Raises `UnsupportedFileError` when the bytes are not a readable workbook.
    """

    try:
        workbook = load_workbook(filename=io.BytesIO(content), read_only=True, data_only=True)
    except (zipfile.BadZipFile, InvalidFileException, KeyError) as e:
        raise UnsupportedFileError(f"File is not a valid Excel (.xlsx) workbook: {str(e)}") from e
    try:
        sheet = workbook.active
        lines = [",".join(_cell_text(value) for value in row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()
    return "\n".join(lines)


def read_upload(path: str | Path) -> str:
    """Return the text content of an uploaded CSV or XLSX file."""

    upload_path = Path(path)
    suffix = upload_path.suffix.lower()
    if suffix not in ACCEPTED_SUFFIXES:
        raise UnsupportedFileError(f"Unsupported file type {upload_path.name!r}: upload a CSV or Excel (.xlsx) file")

    logger.info(f"Reading upload {upload_path}")
    if suffix == ".xlsx":
        return xlsx_to_text(upload_path.read_bytes())
    return upload_path.read_text(encoding="utf-8-sig")
