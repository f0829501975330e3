from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Set
from core.catalog import VaccineCatalog
from core.priority import PrioritySnapshot
from core.records import RecordSnapshot, SeriesPositions
from core.schedule import DoseWarning, ScheduleItem


@dataclass
class ScheduleState:
    """
    A dataclass to hold all the state relevant to computing one immunization
    schedule. A fresh state is built for every computation and discarded
    afterwards.
    """

    # engine inputs
    catalog: VaccineCatalog
    """The vaccine rule snapshot."""
    records: RecordSnapshot
    """The profile's dose history snapshot."""
    priorities: PrioritySnapshot
    """The profile's priority ordering snapshot."""
    today: date
    """The reference date statuses are computed against."""

    # engine params
    due_window_days: int
    """Items due within this many days after today are Due rather than Upcoming."""
    include_completed: bool
    """Whether completed, non-boosted series produce a Completed item."""
    plan_end: Optional[date] = None
    """Items due after this date are left out of the schedule."""

    # collections to fill
    items: List[ScheduleItem] = field(default_factory=list)
    """The schedule items emitted so far, unordered."""
    warnings: List[DoseWarning] = field(default_factory=list)
    """Non-fatal problems found in the dose history."""
    positions: Dict[str, SeriesPositions] = field(default_factory=dict)
    """Cache of series position assignments per vaccine id."""
    emitted_ids: Set[str] = field(default_factory=set)
    """Vaccine ids that already have an item."""

    def positions_for(self, vaccine_id: str) -> Optional[SeriesPositions]:
        """Series positions for a catalog vaccine, computed once per state."""
        if vaccine_id not in self.positions:
            rule = self.catalog.get(vaccine_id)
            if rule is None:
                return None
            self.positions[vaccine_id] = self.records.series_positions(rule)
        return self.positions[vaccine_id]

    def rank_of(self, vaccine_id: str) -> int:
        return self.priorities.rank_key(vaccine_id, self.catalog)

    def emit(self, item: ScheduleItem) -> None:
        self.items.append(item)
        self.emitted_ids.add(item.vaccine_id)

    def warn(self, vaccine_id: str, date_given: date, message: str) -> None:
        self.warnings.append(DoseWarning(vaccine_id, date_given, message))
