import pandas as pd
from collections import OrderedDict
from typing import Dict, List, Tuple
from core.schedule import Schedule, ScheduleItem, ScheduleStatus
from utils.constants import DATE_FORMAT, MONTH_FORMAT


SCHEDULE_COLUMNS = [
    "Vaccine",
    "Name",
    "Dose",
    "Due Date",
    "Status",
    "Rank",
    "Window End",
    "Rationale",
]


def _fmt(d) -> str:
    return d.strftime(DATE_FORMAT) if d is not None else ""


def schedule_to_frame(schedule: Schedule) -> pd.DataFrame:
    """
    Flatten a schedule into a DataFrame, one row per item, keeping the
    schedule's order.
    """
    rows = [
        {
            "Vaccine": item.vaccine_id,
            "Name": item.name,
            "Dose": item.label(),
            "Due Date": _fmt(item.due_date),
            "Status": item.status.value,
            "Rank": item.rank,
            "Window End": _fmt(item.window_end),
            "Rationale": item.rationale,
        }
        for item in schedule
    ]
    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)


def warnings_to_frame(schedule: Schedule) -> pd.DataFrame:
    rows = [
        {"Vaccine": w.vaccine_id, "Date Given": _fmt(w.date_given), "Warning": w.message}
        for w in schedule.warnings
    ]
    return pd.DataFrame(rows, columns=["Vaccine", "Date Given", "Warning"])


def summarize_schedule(schedule: Schedule) -> pd.DataFrame:
    """Count items per status, in severity order. Statuses with no items show 0."""
    counts = {status.value: 0 for status in ScheduleStatus}
    for item in schedule:
        counts[item.status.value] += 1
    summary_df = pd.DataFrame(
        {"Status": list(counts.keys()), "Count": list(counts.values())}
    )
    return summary_df


def group_by_month(schedule: Schedule) -> "OrderedDict[str, List[ScheduleItem]]":
    """
    Group dated items by the month they fall due, in calendar order, the way
    the schedule is read out to the user. Undated items are left out.
    """
    buckets: Dict[Tuple[int, int], List[ScheduleItem]] = {}
    for item in schedule:
        if item.due_date is None:
            continue
        buckets.setdefault((item.due_date.year, item.due_date.month), []).append(item)

    grouped = OrderedDict()
    for (year, month) in sorted(buckets):
        label = pd.Timestamp(year=year, month=month, day=1).strftime(MONTH_FORMAT)
        grouped[label] = buckets[(year, month)]
    return grouped
