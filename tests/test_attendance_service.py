from datetime import date, datetime, timezone
from unittest.mock import patch

from services import attendance_service

RECORDS = [
    {"date": "2026-10-17", "checkIn": "2026-10-17T08:00:00Z", "checkOut": "2026-10-17T16:30:00Z", "status": "present"},
    {"date": "2026-10-18", "checkIn": "2026-10-18T09:00:00Z", "checkOut": "2026-10-18T17:00:00Z", "status": "late"},
    {"checkIn": "2026-10-19T08:15:00Z"},
]


def test_frame_is_sorted_newest_first_with_hours():
    df = attendance_service.build_attendance_frame(RECORDS)

    assert list(df["date"]) == [date(2026, 10, 19), date(2026, 10, 18), date(2026, 10, 17)]
    assert df["hours"].iloc[1] == 8.0
    assert df["hours"].iloc[2] == 8.5
    assert df["hours"].isna().iloc[0]


def test_empty_records():
    df = attendance_service.build_attendance_frame(None)
    assert df.empty
    assert attendance_service.summarize_attendance(df) == {"days": 0, "total_hours": 0.0, "avg_hours": 0.0}
    assert attendance_service.attendance_actions(df, date(2026, 10, 19)) == {"can_check_in": True, "can_check_out": False}


def test_open_day_allows_only_check_out():
    df = attendance_service.build_attendance_frame(RECORDS)
    assert attendance_service.attendance_actions(df, date(2026, 10, 19)) == {"can_check_in": False, "can_check_out": True}


def test_closed_day_allows_nothing():
    df = attendance_service.build_attendance_frame(RECORDS)
    assert attendance_service.attendance_actions(df, date(2026, 10, 18)) == {"can_check_in": False, "can_check_out": False}


def test_summary_counts_closed_days_for_hours():
    df = attendance_service.build_attendance_frame(RECORDS)
    summary = attendance_service.summarize_attendance(df)

    assert summary["days"] == 3
    assert summary["total_hours"] == 16.5
    assert summary["avg_hours"] == 8.25


def test_offset_check_in_is_filed_under_its_utc_day():
    # 21:30 at UTC-5 is 02:30 UTC the next day
    df = attendance_service.build_attendance_frame([{"checkIn": "2026-10-19T21:30:00-05:00"}])

    assert list(df["date"]) == [date(2026, 10, 20)]
    assert attendance_service.attendance_actions(df, date(2026, 10, 20)) == {"can_check_in": False, "can_check_out": True}


@patch("services.attendance_service.utc_today", return_value=date(2026, 10, 20))
def test_actions_default_to_utc_today(_mock_today):
    df = attendance_service.build_attendance_frame([{"checkIn": "2026-10-19T21:30:00-05:00"}])

    assert attendance_service.attendance_actions(df) == {"can_check_in": False, "can_check_out": True}


def test_utc_today_is_timezone_aware():
    before = datetime.now(timezone.utc).date()
    today = attendance_service.utc_today()
    after = datetime.now(timezone.utc).date()

    assert before <= today <= after
