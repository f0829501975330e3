from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple
from exceptions.custom_errors import DuplicateVaccineIdError, UnknownVaccineIdError
from utils.constants import DAYS_PER_YEAR

"""
This module contains the vaccine rule definitions and the read-only catalog that holds them.
"""


@dataclass(frozen=True)
class VaccineRule:
    """
    Dosing rules for one vaccine series. All intervals and ages are in days.
    """

    vaccine_id: str
    """Stable id used by dose records and priority entries."""
    name: str
    """Human readable name."""
    dose_count: Optional[int] = None
    """Number of doses in the primary series."""
    min_age_days: int = 0
    """Minimum age at which the first dose may be given."""
    min_spacing_days: Optional[int] = None
    """Minimum number of days between consecutive primary doses."""
    max_spacing_days: Optional[int] = None
    """Optional upper bound on the spacing between consecutive primary doses."""
    booster_interval_days: Optional[int] = None
    """Days between boosters once the primary series is complete."""
    max_age_days: Optional[int] = None
    """Age after which nothing further is scheduled for this rule."""
    prerequisites: Tuple[str, ...] = ()
    """Ids of series whose primary course must be complete first."""
    treats: Tuple[str, ...] = ()
    notes: str = ""
    recommended: bool = True

    def missing_fields(self) -> List[str]:
        """Return the names of required fields that are absent or malformed."""
        missing = []
        if self.dose_count is None or self.dose_count < 1:
            missing.append("dose_count")
        elif self.dose_count > 1 and (
            self.min_spacing_days is None or self.min_spacing_days < 0
        ):
            missing.append("min_spacing_days")
        if self.min_age_days is None or self.min_age_days < 0:
            missing.append("min_age_days")
        if self.booster_interval_days is not None and self.booster_interval_days < 1:
            missing.append("booster_interval_days")
        if (
            self.max_spacing_days is not None
            and self.min_spacing_days is not None
            and self.max_spacing_days < self.min_spacing_days
        ):
            missing.append("max_spacing_days")
        return missing

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()

    def describe_dosing(self) -> str:
        if not self.dose_count:
            return "unknown"
        if self.dose_count == 1:
            return "1x"
        if self.max_spacing_days is not None:
            return f"{self.dose_count}x every {self.min_spacing_days}-{self.max_spacing_days}d"
        return f"{self.dose_count}x every {self.min_spacing_days}d"

    def describe_booster(self) -> str:
        if self.booster_interval_days is None:
            return "none"
        if self.booster_interval_days == DAYS_PER_YEAR:
            return "every year"
        if self.booster_interval_days % DAYS_PER_YEAR == 0:
            return f"every {self.booster_interval_days // DAYS_PER_YEAR} years"
        return f"every {self.booster_interval_days} days"


@dataclass(frozen=True)
class VaccineCatalog:
    """
    An immutable snapshot of vaccine rules, in catalog order.

    A catalog update is represented by building a new VaccineCatalog; the
    engine never mutates the one it is handed.
    """

    rules: Tuple[VaccineRule, ...] = ()
    _by_id: Dict[str, VaccineRule] = field(default_factory=dict, init=False, repr=False, compare=False)
    _order: Dict[str, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        rules = tuple(self.rules)
        object.__setattr__(self, "rules", rules)
        for idx, rule in enumerate(rules):
            if rule.vaccine_id in self._by_id:
                raise DuplicateVaccineIdError(
                    f"Vaccine id {rule.vaccine_id!r} is defined more than once."
                )
            self._by_id[rule.vaccine_id] = rule
            self._order[rule.vaccine_id] = idx

    @classmethod
    def from_rules(cls, rules: Iterable[VaccineRule]) -> "VaccineCatalog":
        return cls(tuple(rules))

    def lookup(self, vaccine_id: str) -> VaccineRule:
        """Return the rule for `vaccine_id`, raising UnknownVaccineIdError if absent."""
        try:
            return self._by_id[vaccine_id]
        except KeyError:
            raise UnknownVaccineIdError(vaccine_id) from None

    def get(self, vaccine_id: str) -> Optional[VaccineRule]:
        return self._by_id.get(vaccine_id)

    def all_rules(self) -> Tuple[VaccineRule, ...]:
        return self.rules

    def index_of(self, vaccine_id: str) -> Optional[int]:
        return self._order.get(vaccine_id)

    def recommended_ids(self) -> List[str]:
        return [r.vaccine_id for r in self.rules if r.recommended]

    def __contains__(self, vaccine_id: object) -> bool:
        return vaccine_id in self._by_id

    def __iter__(self) -> Iterator[VaccineRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)
