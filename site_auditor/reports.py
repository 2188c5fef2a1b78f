"""
Report exporters for site_auditor.

Each exporter consumes the flat finding list; none of them feed back into a
scan.
"""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING, TextIO

from openpyxl import Workbook
from openpyxl.styles import Font
from reportlab.lib.pagesizes import letter
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

if TYPE_CHECKING:
    from typing import Any, Iterable

    from site_auditor.models import Finding

REPORT_TITLE = "Site Audit Report"

# (header, record key, column width)
XLSX_COLUMNS = [
    ("#", "index", 5),
    ("File Path", "file_path", 40),
    ("File Name", "file_name", 25),
    ("Line Number", "line_number", 12),
    ("Type", "type", 25),
    ("Message", "message", 60),
]


def findings_to_records(findings: Iterable[Finding]) -> list[dict[str, Any]]:
    """Flat, 1-indexed records in report order."""
    records = []
    for i, finding in enumerate(findings, 1):
        record = finding.to_dict()
        record["index"] = i
        records.append(record)
    return records


def write_json(findings: Iterable[Finding], stream: TextIO) -> None:
    """Write findings as a JSON document with a count and the records."""
    records = findings_to_records(findings)
    for record in records:
        record.pop("index")
    json.dump({"count": len(records), "findings": records}, stream, indent=2)
    stream.write("\n")


def write_text(findings: Iterable[Finding], stream: TextIO) -> None:
    """One line per finding plus a total."""
    count = 0
    for finding in findings:
        stream.write(f"{finding}\n")
        count += 1
    stream.write(f"{count} finding{'s' if count != 1 else ''}\n")


def write_xlsx(findings: Iterable[Finding], path: str) -> str:
    """
    Write findings to an .xlsx workbook.

    Args:
        findings: Findings to export.
        path: Destination file.

    Returns:
        The path written.
    """
    _ensure_parent(path)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = REPORT_TITLE

    sheet.append([header for header, _, _ in XLSX_COLUMNS])
    for cell in sheet[1]:
        cell.font = Font(bold=True)
    for i, (_, _, width) in enumerate(XLSX_COLUMNS):
        sheet.column_dimensions[chr(ord("A") + i)].width = width

    for record in findings_to_records(findings):
        sheet.append([record[key] for _, key, _ in XLSX_COLUMNS])

    workbook.save(path)
    return path


def write_pdf(findings: Iterable[Finding], path: str) -> str:
    """
    Write findings to a PDF, one block per finding.

    Args:
        findings: Findings to export.
        path: Destination file.

    Returns:
        The path written.
    """
    _ensure_parent(path)
    c = canvas.Canvas(path, pagesize=letter)
    width, height = letter
    margin = 50
    text_width = width - 2 * margin
    y = height - 60

    c.setFont("Helvetica-Bold", 16)
    c.drawString(margin, y, REPORT_TITLE)
    y -= 30

    for record in findings_to_records(findings):
        lines = [
            f"{record['index']}. File: {record['file_name']}",
            f"Path: {record['file_path']}",
            f"Line: {record['line_number']}",
            f"Type: {record['type']}",
            f"Message: {record['message']}",
        ]
        wrapped: list[str] = []
        for line in lines:
            wrapped.extend(simpleSplit(line, "Helvetica", 10, text_width) or [""])

        if y - 14 * len(wrapped) < margin:
            c.showPage()
            y = height - 60
        c.setFont("Helvetica", 10)
        for line in wrapped:
            c.drawString(margin, y, line)
            y -= 14
        y -= 10

    c.showPage()
    c.save()
    return path


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
