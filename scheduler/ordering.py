from datetime import date as dt_date
from typing import Iterable, List, Tuple
from core.schedule import ScheduleItem

# Sorts after every real date so undated items come last within a rank
_NO_DATE = dt_date.max


def schedule_sort_key(item: ScheduleItem) -> Tuple[int, int, dt_date, str, int]:
    """
    Total order over schedule items: status severity, then priority rank,
    then due date, then vaccine id and dose number as final tie-breaks.
    """
    return (
        item.status.severity,
        item.rank,
        item.due_date or _NO_DATE,
        item.vaccine_id,
        item.dose_index or 0,
    )


def order_items(items: Iterable[ScheduleItem]) -> List[ScheduleItem]:
    return sorted(items, key=schedule_sort_key)
