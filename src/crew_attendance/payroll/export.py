from __future__ import annotations

import csv
import io

import pandas as pd

from .service import REPORT_COLUMNS, ReportData


def export_csv(data: ReportData) -> bytes:
    """One row per record plus the totals row, UTF-8 with BOM for spreadsheets."""

    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=REPORT_COLUMNS)
    writer.writeheader()
    for row in data.rows:
        writer.writerow(row)
    writer.writerow(data.totals_row)
    return out.getvalue().encode("utf-8-sig")


def export_xlsx(data: ReportData) -> bytes:
    df = pd.DataFrame([*data.rows, data.totals_row], columns=REPORT_COLUMNS)

    # Build the workbook in memory, never on disk.
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Attendance")
    return output.getvalue()
