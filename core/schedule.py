from dataclasses import dataclass
from datetime import date as dt_date
from enum import Enum
from typing import Iterator, List, Optional, Tuple


class ScheduleStatus(Enum):
    """Status of a recommended dose. Declaration order is severity order, most urgent first."""

    OVERDUE = "Overdue"
    DUE = "Due"
    UPCOMING = "Upcoming"
    COMPLETED = "Completed"
    INELIGIBLE = "Ineligible"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    def __str__(self) -> str:
        return self.value


_SEVERITY = {status: idx for idx, status in enumerate(ScheduleStatus)}


@dataclass(frozen=True)
class ScheduleItem:
    """One recommended dose produced by the engine. Never persisted."""

    vaccine_id: str
    name: str
    due_date: Optional[dt_date]
    status: ScheduleStatus
    dose_index: Optional[int]
    """1-based dose number this item represents, boosters counting on from the primary series."""
    rank: int
    booster: bool = False
    window_end: Optional[dt_date] = None
    """Latest date the dose keeps the series on its maximum spacing, when the rule defines one."""
    rationale: str = ""

    def label(self) -> str:
        if self.dose_index is None:
            return ""
        if self.booster:
            return f"Booster (dose #{self.dose_index})"
        return f"Dose#{self.dose_index}"


@dataclass(frozen=True)
class DoseWarning:
    """A non-fatal problem found in a recorded dose while scheduling."""

    vaccine_id: str
    date_given: dt_date
    message: str


@dataclass(frozen=True)
class Schedule:
    """Ordered, read-only output of one schedule computation."""

    items: Tuple[ScheduleItem, ...]
    today: dt_date
    warnings: Tuple[DoseWarning, ...] = ()

    def by_status(self, status: ScheduleStatus) -> List[ScheduleItem]:
        return [item for item in self.items if item.status == status]

    def for_vaccine(self, vaccine_id: str) -> Optional[ScheduleItem]:
        for item in self.items:
            if item.vaccine_id == vaccine_id:
                return item
        return None

    def vaccine_ids(self) -> List[str]:
        return [item.vaccine_id for item in self.items]

    def __iter__(self) -> Iterator[ScheduleItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]
