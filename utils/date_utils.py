import pandas as pd
from datetime import datetime, timedelta, date as dt_date
from typing import Any, Optional


def normalise_date(input_date: Any) -> dt_date:
    """
    Convert input to a datetime.date object.
    Supports formats like:
      - 'Mon 2025-07-07', '2025/07/07', '20250707', etc.
    """
    if isinstance(input_date, dt_date) and not isinstance(input_date, datetime):
        return input_date
    elif isinstance(input_date, pd.Timestamp):
        return input_date.date()
    elif isinstance(input_date, datetime):
        return input_date.date()
    elif isinstance(input_date, str):
        try:
            # pandas handles all common formats using dateutil.parser under the hood
            return pd.to_datetime(input_date.strip(), errors="raise").date()
        except Exception as e:
            raise ValueError(f"Could not parse date string '{input_date}': {e}")
    raise ValueError(f"Unsupported date type: {type(input_date)}")


def add_days(start: dt_date, days: int) -> dt_date:
    """Offset a date by a whole number of days."""
    return start + timedelta(days=days)


def age_date(birth_date: Optional[dt_date], age_days: Optional[int]) -> Optional[dt_date]:
    """Date on which someone born on `birth_date` reaches `age_days`, or None if either is unknown."""
    if birth_date is None or age_days is None:
        return None
    return add_days(birth_date, age_days)


def latest(*dates: Optional[dt_date]) -> Optional[dt_date]:
    """Latest of the given dates, ignoring None."""
    known = [d for d in dates if d is not None]
    return max(known) if known else None
