from dataclasses import dataclass, replace
from datetime import date as dt_date
from typing import Dict, Iterable, List, Optional, Tuple
import logging
from core.catalog import VaccineCatalog, VaccineRule
from utils.validate import validate_dose

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dose:
    """An administered dose, logged by the user."""

    vaccine_id: str
    date_given: dt_date
    sequence: Optional[int] = None
    """1-based position in the primary series; derived from date order when None."""
    lot: str = ""
    notes: str = ""
    booster: bool = False
    """Explicitly logged as a booster rather than a primary series dose."""

    def label(self) -> str:
        if self.booster:
            return "Booster"
        if self.sequence is not None:
            return f"Dose#{self.sequence}"
        return "Dose"


@dataclass(frozen=True)
class SeriesPositions:
    """The doses of one vaccine split into primary series positions and boosters."""

    primary: Dict[int, Dose]
    """Series position (1-based) -> dose."""
    boosters: Tuple[Dose, ...]
    """Doses given after, or in excess of, the primary series, ascending by date."""

    def missing_positions(self, dose_count: int) -> List[int]:
        return [p for p in range(1, dose_count + 1) if p not in self.primary]

    def is_complete(self, dose_count: int) -> bool:
        return not self.missing_positions(dose_count)

    def completion_date(self, dose_count: int) -> Optional[dt_date]:
        """Date the primary series was completed, or None while incomplete."""
        if not self.is_complete(dose_count):
            return None
        return max(d.date_given for d in self.primary.values())

    def last_primary_dose(self) -> Optional[Dose]:
        if not self.primary:
            return None
        return max(self.primary.values(), key=lambda d: d.date_given)

    def next_booster_index(self, dose_count: int) -> int:
        """Dose number for the next booster, clear of any number already recorded."""
        taken = [d.sequence for d in self.boosters if d.sequence is not None]
        return max([dose_count + len(self.boosters)] + taken) + 1

    def last_dose(self) -> Optional[Dose]:
        doses = list(self.primary.values()) + list(self.boosters)
        if not doses:
            return None
        return max(doses, key=lambda d: d.date_given)


def _by_date(doses: Iterable[Dose]) -> List[Dose]:
    # sorted() is stable, so same-day doses keep insertion order
    return sorted(doses, key=lambda d: d.date_given)


def assign_series_positions(doses: Iterable[Dose], dose_count: int) -> SeriesPositions:
    """
    Assign each dose of one vaccine to a primary series position or to the boosters.

    Explicit positions are kept. Doses without a position fill the lowest unused
    positions in date order. Doses marked as boosters, positioned beyond the
    series, or left over once every position is filled count as boosters.
    """
    ordered = _by_date(doses)
    primary: Dict[int, Dose] = {}
    boosters: List[Dose] = []

    for dose in ordered:
        if dose.booster or dose.sequence is None:
            continue
        if 1 <= dose.sequence <= dose_count and dose.sequence not in primary:
            primary[dose.sequence] = dose
        else:
            boosters.append(dose)

    for dose in ordered:
        if dose.booster:
            boosters.append(dose)
        elif dose.sequence is None:
            free = [p for p in range(1, dose_count + 1) if p not in primary]
            if free:
                primary[free[0]] = dose
            else:
                boosters.append(dose)

    return SeriesPositions(primary=primary, boosters=tuple(_by_date(boosters)))


@dataclass(frozen=True)
class RecordSnapshot:
    """Immutable copy of a profile's dose history handed to the schedule engine."""

    doses: Tuple[Dose, ...] = ()
    birth_date: Optional[dt_date] = None

    def doses_for(self, vaccine_id: str) -> List[Dose]:
        """Doses of one vaccine, ascending by administration date."""
        return _by_date(d for d in self.doses if d.vaccine_id == vaccine_id)

    def vaccine_ids(self) -> List[str]:
        """Distinct vaccine ids in first-seen order."""
        return list(dict.fromkeys(d.vaccine_id for d in self.doses))

    def series_positions(self, rule: VaccineRule) -> SeriesPositions:
        return assign_series_positions(self.doses_for(rule.vaccine_id), rule.dose_count or 0)

    def snapshot(self) -> "RecordSnapshot":
        return self


class RecordStore:
    """
    Per-profile list of administered doses.

    Every mutation is validated before it is applied; a rejected edit raises
    and leaves the store untouched. Each applied mutation bumps `revision` so
    cached schedules know to recompute.
    """

    def __init__(
        self,
        doses: Iterable[Dose] = (),
        birth_date: Optional[dt_date] = None,
        catalog: Optional[VaccineCatalog] = None,
    ):
        self.birth_date = birth_date
        self.catalog = catalog
        # Loaded history is taken as persisted; validation applies to edits
        self._doses: List[Dose] = list(doses)
        self.revision = 0

    def add(self, dose: Dose, today: Optional[dt_date] = None) -> None:
        validate_dose(dose, self._doses, self.catalog, self.birth_date, today)
        self._doses.append(dose)
        self._touch("added", dose)

    def remove(self, index: int) -> Dose:
        dose = self._doses.pop(index)
        self._touch("removed", dose)
        return dose

    def edit(self, index: int, today: Optional[dt_date] = None, **changes) -> Dose:
        """Replace fields of the dose at `index`; returns the updated dose."""
        updated = replace(self._doses[index], **changes)
        others = self._doses[:index] + self._doses[index + 1 :]
        validate_dose(updated, others, self.catalog, self.birth_date, today)
        self._doses[index] = updated
        self._touch("edited", updated)
        return updated

    def replace_all(self, doses: Iterable[Dose], today: Optional[dt_date] = None) -> None:
        """Atomically replace the whole history; nothing changes if any dose is rejected."""
        staged: List[Dose] = []
        for dose in doses:
            validate_dose(dose, staged, self.catalog, self.birth_date, today)
            staged.append(dose)
        self._doses = staged
        self.revision += 1
        logger.debug(f"Replaced dose history with {len(staged)} doses")

    def doses(self) -> Tuple[Dose, ...]:
        return tuple(self._doses)

    def doses_for(self, vaccine_id: str) -> List[Dose]:
        return self.snapshot().doses_for(vaccine_id)

    def vaccine_ids(self) -> List[str]:
        return self.snapshot().vaccine_ids()

    def snapshot(self) -> RecordSnapshot:
        return RecordSnapshot(doses=tuple(self._doses), birth_date=self.birth_date)

    def _touch(self, action: str, dose: Dose) -> None:
        self.revision += 1
        logger.debug(f"Dose {action}: {dose.vaccine_id} {dose.label()} on {dose.date_given}")

    def __len__(self) -> int:
        return len(self._doses)

    def __iter__(self):
        return iter(tuple(self._doses))
