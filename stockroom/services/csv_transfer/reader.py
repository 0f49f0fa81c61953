"""
CSV parsing and rendering helpers shared by the product and order transfers.
"""

import csv
import io
from collections.abc import Iterable, Sequence
from typing import Any

from stockroom.core.exceptions import CsvFormatError
from stockroom.core.logging import get_logger

logger = get_logger(__name__)

CSV_ENCODING = "utf-8-sig"


class RowError(ValueError):
    """A single CSV row is invalid; the message is reported to the uploader."""


def parse_csv(
    content: bytes,
    required_columns: Sequence[str],
    max_rows: int,
    max_bytes: int,
) -> list[tuple[int, dict[str, str]]]:
    """
    Parse an uploaded CSV file into ``(line_number, row)`` pairs.

    Header names are matched case-insensitively and row keys are lower
    cased. Cells missing from short rows come back as empty strings. Line
    numbers count the header as line 1.

    Raises:
        CsvFormatError: The file is too large, not UTF-8, malformed, lacks
            a required column or has more than ``max_rows`` data rows
    """
    if len(content) > max_bytes:
        raise CsvFormatError(
            f"File size exceeds maximum allowed size of {max_bytes // (1024 * 1024)}MB",
            code="FILE_TOO_LARGE",
            size_bytes=len(content),
        )

    try:
        text = content.decode(CSV_ENCODING)
    except UnicodeDecodeError as e:
        raise CsvFormatError(
            f"File encoding error: {e}", code="ENCODING_ERROR"
        ) from e

    reader = csv.DictReader(io.StringIO(text))

    try:
        fieldnames = reader.fieldnames
        if not fieldnames:
            raise CsvFormatError("CSV file has no headers", code="MISSING_HEADERS")

        headers = {name.strip().lower() for name in fieldnames if name}
        missing = [col for col in required_columns if col.lower() not in headers]
        if missing:
            raise CsvFormatError(
                f"Missing required columns: {', '.join(missing)}",
                code="MISSING_COLUMNS",
                missing_columns=missing,
            )

        rows: list[tuple[int, dict[str, str]]] = []
        for line_number, raw in enumerate(reader, start=2):
            if len(rows) >= max_rows:
                raise CsvFormatError(
                    f"File exceeds maximum allowed rows of {max_rows}",
                    code="TOO_MANY_ROWS",
                    max_rows=max_rows,
                )
            rows.append((line_number, _normalize_row(raw)))
    except csv.Error as e:
        raise CsvFormatError(f"CSV parsing error: {e}", code="CSV_PARSE_ERROR") from e

    logger.debug("CSV parsed", rows=len(rows), columns=sorted(headers))
    return rows


def _normalize_row(raw: dict[Any, Any]) -> dict[str, str]:
    row: dict[str, str] = {}
    for key, value in raw.items():
        # DictReader files surplus cells under the None key
        if key is None:
            continue
        row[key.strip().lower()] = value if isinstance(value, str) else ""
    return row


def render_csv(header: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    """Render a header plus rows as CSV text; None cells become empty strings."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(header)
    for row in rows:
        writer.writerow("" if cell is None else cell for cell in row)
    return buffer.getvalue()
