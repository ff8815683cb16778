# entyre_cms/services/excel.py
"""Spreadsheet analysis and filename classification for uploaded Excel files."""
import logging
import re
import zipfile
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

logger = logging.getLogger(__name__)

# Column headers are read from the third row, or the last row of shorter sheets.
HEADER_ROW_INDEX = 2

SCENARIO_PATTERN = re.compile(r"(?<![a-z])(?:scenario|sc)[\s_\-]*(\d+)|(?<![a-z0-9])s(\d+)(?![a-z0-9])", re.IGNORECASE)

SCENARIO_TYPES = ("baseline", "optimistic", "pessimistic")
SCOPE_TYPES = ("national", "regional", "pathway", "facility")
ALTERNATIVE = "alternative"


def empty_metadata(error: Optional[str] = None) -> Dict[str, Any]:
    metadata = {
        "sheetNames": [],
        "columnInfo": {},
        "rowCount": 0,
        "hasWeights": False,
        "lastProcessed": datetime.now(timezone.utc).isoformat(),
    }
    if error:
        metadata["error"] = error
    return metadata


def _non_empty_rows(sheet):
    for row in sheet.iter_rows(values_only=True):
        if any(cell is not None and cell != "" for cell in row):
            yield row


def analyze_workbook(source) -> Dict[str, Any]:
    """
    Summarize a workbook: sheet names, header columns per sheet, the largest
    row count and whether any sheet has a row whose first cell mentions a
    weight.

    ``source`` is a path or a binary file object. A workbook that cannot be
    read yields empty metadata carrying an ``error`` message instead of an
    exception, so the upload itself still succeeds.
    """
    try:
        workbook = load_workbook(source, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, OSError, KeyError, ValueError) as exc:
        logger.warning("Excel analysis failed: %s", exc)
        return empty_metadata(str(exc))

    metadata = empty_metadata()
    try:
        metadata["sheetNames"] = list(workbook.sheetnames)
        for sheet in workbook.worksheets:
            rows = list(_non_empty_rows(sheet))
            if not rows:
                continue

            header = rows[min(HEADER_ROW_INDEX, len(rows) - 1)]
            metadata["columnInfo"][sheet.title] = [
                str(cell) if not isinstance(cell, (int, float)) else cell
                for cell in header
                if cell is not None
            ]
            metadata["rowCount"] = max(metadata["rowCount"], len(rows))

            if any(row[0] is not None and "weight" in str(row[0]).lower() for row in rows):
                metadata["hasWeights"] = True
    finally:
        workbook.close()

    logger.info(
        "Excel analysis completed: sheets=%d rows=%d hasWeights=%s",
        len(metadata["sheetNames"]),
        metadata["rowCount"],
        metadata["hasWeights"],
    )
    return metadata


def scenario_id_from_name(filename: Optional[str]) -> Optional[str]:
    """``"Scenario3_national.xlsx"`` -> ``"S3"``; None when no number is present."""
    if not filename:
        return None
    stem = filename.rsplit(".", 1)[0]
    match = SCENARIO_PATTERN.search(stem)
    if not match:
        return None
    number = match.group(1) or match.group(2)
    return f"S{int(number)}"


def _keyword(filename: str, keywords) -> Optional[str]:
    """First keyword standing as its own token (``_``, ``-``, digits and spaces separate)."""
    lowered = filename.lower()
    for word in keywords:
        if re.search(rf"(?<![a-z]){re.escape(word)}(?![a-z])", lowered):
            return word
    return None


def classify_filename(filename: Optional[str]) -> Dict[str, Optional[str]]:
    """Derive ``scenarioId``, ``scenarioType`` and ``scopeType`` from a filename."""
    if not filename:
        return {"scenarioId": None, "scenarioType": None, "scopeType": None}

    scenario_id = scenario_id_from_name(filename)
    scenario_type = _keyword(filename, SCENARIO_TYPES)
    if scenario_type is None and scenario_id is not None:
        scenario_type = ALTERNATIVE

    return {
        "scenarioId": scenario_id,
        "scenarioType": scenario_type,
        "scopeType": _keyword(filename, SCOPE_TYPES),
    }
