import pandas as pd
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, Mapping, Optional

ATTENDANCE_COLUMNS = ["date", "checkIn", "checkOut", "status", "hours"]


def build_attendance_frame(records: Optional[Iterable[Mapping[str, Any]]]) -> pd.DataFrame:
    """
    Normalizes backend attendance records into a DataFrame sorted newest first.
    `hours` is NaN while a day is still open (no check-out yet).
    """
    records = [r for r in (records or []) if isinstance(r, Mapping)]
    if not records:
        return pd.DataFrame(columns=ATTENDANCE_COLUMNS)

    df = pd.DataFrame(records)
    for col in ("date", "checkIn", "checkOut", "status"):
        if col not in df.columns:
            df[col] = None

    df["checkIn"] = pd.to_datetime(df["checkIn"], errors="coerce", utc=True)
    df["checkOut"] = pd.to_datetime(df["checkOut"], errors="coerce", utc=True)
    # Fall back to the check-in day when the backend sends no explicit date
    df["date"] = pd.to_datetime(df["date"], errors="coerce", utc=True).fillna(df["checkIn"]).dt.date
    df["hours"] = (df["checkOut"] - df["checkIn"]).dt.total_seconds() / 3600

    return df.sort_values("checkIn", ascending=False, na_position="last").reset_index(drop=True)[ATTENDANCE_COLUMNS]


def today_record(df: pd.DataFrame, today: date) -> Optional[Dict[str, Any]]:
    if df.empty:
        return None
    rows = df[df["date"] == today]
    if rows.empty:
        return None
    return rows.iloc[0].to_dict()


def utc_today() -> date:
    # Record days are UTC dates, so "today" must be too
    return datetime.now(timezone.utc).date()


def attendance_actions(df: pd.DataFrame, today: Optional[date] = None) -> Dict[str, bool]:
    """Which of check-in / check-out is currently allowed."""
    record = today_record(df, today or utc_today())
    checked_in = record is not None and not pd.isna(record.get("checkIn"))
    checked_out = record is not None and not pd.isna(record.get("checkOut"))
    return {"can_check_in": not checked_in, "can_check_out": checked_in and not checked_out}


def daily_hours(df: pd.DataFrame) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=["date", "hours"])
    closed = df.dropna(subset=["hours"])
    return closed.groupby("date", as_index=False)["hours"].sum().sort_values("date")


def summarize_attendance(df: pd.DataFrame) -> Dict[str, float]:
    if df.empty:
        return {"days": 0, "total_hours": 0.0, "avg_hours": 0.0}
    per_day = daily_hours(df)
    total = float(per_day["hours"].sum()) if not per_day.empty else 0.0
    return {
        "days": int(df["date"].nunique()),
        "total_hours": round(total, 2),
        "avg_hours": round(total / len(per_day), 2) if len(per_day) else 0.0,
    }
