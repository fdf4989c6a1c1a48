"""Serialisation of attendance reports for download."""

from __future__ import annotations

import csv
import io

import pandas as pd

from .model import AttendanceReport

CSV_HEADERS = ["Roll Number", "Name", "Total Classes", "Present", "Percentage", "Status"]


def report_filename(report: AttendanceReport, *, prefix: str = "KPT_Report", ext: str = "csv") -> str:
    return f"{prefix}_{report.branch.name}_SEM{report.semester}.{ext}"


def _table(report: AttendanceReport) -> list[list]:
    return [
        [
            row.roll_number,
            row.name,
            row.total_classes,
            row.present,
            f"{row.percentage:.2f}%",
            row.status.value,
        ]
        for row in report.rows
    ]


def report_to_csv(report: AttendanceReport) -> bytes:
    """CSV bytes with a UTF-8 BOM so spreadsheet tools detect the encoding."""

    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    writer.writerows(_table(report))
    return out.getvalue().encode("utf-8-sig")


def report_to_xlsx(report: AttendanceReport) -> bytes:
    df = pd.DataFrame(_table(report), columns=CSV_HEADERS)
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=f"SEM{report.semester}")
    return out.getvalue()
