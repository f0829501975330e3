from utils.logger import get_logger
from typing import Optional, Tuple
from core.catalog import VaccineCatalog
from core.priority import PriorityList
from core.records import RecordStore
from core.schedule import Schedule
from scheduler.builder import compute_schedule
from utils.constants import DUE_WINDOW_DAYS, INCLUDE_COMPLETED
from utils.date_utils import normalise_date

logger = get_logger(__name__)


class ScheduleRunner:
    """
    Keeps the most recent schedule for one profile and recomputes it from
    scratch whenever the records, priorities, catalog, reference date or
    options change.
    """

    def __init__(
        self,
        catalog: VaccineCatalog,
        due_window_days: int = DUE_WINDOW_DAYS,
        include_completed: bool = INCLUDE_COMPLETED,
    ):
        self.catalog = catalog
        self.due_window_days = due_window_days
        self.include_completed = include_completed
        self._cached: Optional[Schedule] = None
        self._cache_key: Optional[Tuple] = None
        self.computations = 0

    def set_catalog(self, catalog: VaccineCatalog) -> None:
        """Swap in a new catalog snapshot; the next run recomputes."""
        self.catalog = catalog
        self.invalidate()

    def invalidate(self) -> None:
        self._cached = None
        self._cache_key = None

    def run(self, records: RecordStore, priorities: PriorityList, today, plan_end=None) -> Schedule:
        today = normalise_date(today)
        key = (
            id(records),
            records.revision,
            records.birth_date,
            id(priorities),
            priorities.revision,
            self.catalog,
            today,
            plan_end,
            self.due_window_days,
            self.include_completed,
        )
        if self._cached is not None and key == self._cache_key:
            return self._cached

        self._cached = compute_schedule(
            self.catalog,
            records,
            priorities,
            today,
            due_window_days=self.due_window_days,
            include_completed=self.include_completed,
            plan_end=plan_end,
        )
        self._cache_key = key
        self.computations += 1
        logger.debug(f"Schedule recomputed ({self.computations} so far)")
        return self._cached
