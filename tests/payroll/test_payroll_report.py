import csv
import io
from datetime import date

import pandas as pd

from crew_attendance.core.enums import AttendanceType, Presence, Scope
from crew_attendance.payroll.export import export_csv, export_xlsx


def _seed(repo, make_record):
    for rec in [
        make_record("r1", work_date=date(2024, 5, 1)),
        make_record("r2", work_date=date(2024, 5, 2), type=AttendanceType.PROJECT, project_id="p1", working_hours=6, overtime_hours=2),
        make_record("r3", work_date=date(2024, 5, 3), presence=Presence.PAID_LEAVE, working_hours=0),
    ]:
        repo.records[rec.record_id] = rec


def test_monthly_report_rows_and_totals(container, attendance_repo, make_record):
    _seed(attendance_repo, make_record)

    data = container.payroll_report_service.build_monthly_report(user_id="u1", month=5, year=2024)

    assert [r["Status"] for r in data.rows] == ["Present", "Present", "Day Off (Paid)"]
    assert data.rows[0]["Date"] == "01/05/2024"
    assert data.rows[0]["Project"] == "N/A"
    assert data.rows[1]["Project"] == "p1"
    assert data.totals_row["Date"] == "TOTALS"
    assert data.totals_row["Working Hours"] == 14
    assert data.totals.paid_leave_days == 1
    assert data.filename_stem == "Attendance_Anna_Berg_May_2024_all"


def test_csv_export_has_totals_row(container, attendance_repo, make_record):
    _seed(attendance_repo, make_record)
    data = container.payroll_report_service.build_monthly_report(user_id="u1", month=5, year=2024, scope=Scope.PROJECT)

    raw = export_csv(data)

    assert raw.startswith(b"\xef\xbb\xbf")
    rows = list(csv.DictReader(io.StringIO(raw.decode("utf-8-sig"))))
    assert len(rows) == 2
    assert rows[0]["Type"] == "Project"
    assert rows[-1]["Date"] == "TOTALS"
    assert rows[-1]["Overtime Hours"] == "2.0"


def test_xlsx_export_round_trips_through_pandas(container, attendance_repo, make_record):
    _seed(attendance_repo, make_record)
    data = container.payroll_report_service.build_monthly_report(user_id="u1", month=5, year=2024)

    df = pd.read_excel(io.BytesIO(export_xlsx(data)), sheet_name="Attendance")

    assert list(df.columns)[:3] == ["Date", "Status", "Type"]
    assert len(df) == 4
    assert df.iloc[-1]["Date"] == "TOTALS"
