from pydantic import BaseModel, model_validator, Field, ConfigDict
from typing import List, Optional, Any
from datetime import date
import re
from core.catalog import VaccineCatalog
from core.priority import PriorityList
from core.records import Dose, RecordStore


# Define data models
class DoseRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    vaccine: str
    date: date
    dose: Optional[int] = None
    booster: bool = False
    lot: str = ""
    notes: str = ""

    @model_validator(mode="before")
    @classmethod
    def extract_kind(cls, values: Any) -> Any:
        """
        Model validator to read the dose kind from a "kind" label if present.

        Saved profiles label each dose "Booster" or "Dose#<n>"; this sets
        `booster` or `dose` accordingly and drops the label.
        """
        if isinstance(values, dict) and "kind" in values:
            values = dict(values)
            kind = str(values.pop("kind") or "").strip()
            if kind.lower() == "booster":
                values["booster"] = True
            else:
                match = re.match(r"^dose\s*#?\s*(\d+)$", kind, re.IGNORECASE)
                if match:
                    values.setdefault("dose", int(match.group(1)))
        return values

    def to_dose(self) -> Dose:
        return Dose(
            vaccine_id=self.vaccine.strip(),
            date_given=self.date,
            sequence=self.dose,
            lot=self.lot,
            notes=self.notes,
            booster=self.booster,
        )


class VaccinePreference(BaseModel):
    model_config = ConfigDict(extra="allow")

    vaccine: str
    enabled: bool = True
    ranked: bool = True


class ProfileSnapshot(BaseModel):
    """The persisted shape of one tracked person: dose history plus priority ordering."""

    model_config = ConfigDict(extra="allow")

    name: str = "Default"
    birthDate: Optional[date] = None
    doses: List[DoseRecord] = Field(default_factory=list)
    priorities: List[VaccinePreference] = Field(default_factory=list)
    planEnd: Optional[date] = None

    @model_validator(mode="after")
    def check_priorities(self) -> "ProfileSnapshot":
        seen = set()
        for pref in self.priorities:
            if pref.vaccine in seen:
                raise ValueError(f"Duplicate vaccine {pref.vaccine!r} in priorities")
            seen.add(pref.vaccine)
        return self

    @classmethod
    def default(cls, catalog: VaccineCatalog, name: str = "Default") -> "ProfileSnapshot":
        """A new profile prioritising the catalog in order, with only recommended vaccines enabled."""
        return cls(
            name=name,
            priorities=[
                VaccinePreference(vaccine=r.vaccine_id, enabled=r.recommended)
                for r in catalog.all_rules()
            ],
        )

    @property
    def birth_date(self) -> Optional[date]:
        return self.birthDate

    @property
    def plan_end(self) -> Optional[date]:
        return self.planEnd

    def to_record_store(self, catalog: Optional[VaccineCatalog] = None) -> RecordStore:
        return RecordStore(
            [d.to_dose() for d in self.doses],
            birth_date=self.birthDate,
            catalog=catalog,
        )

    def to_priority_list(self) -> PriorityList:
        return PriorityList(
            [p.vaccine for p in self.priorities if p.ranked],
            disabled=[p.vaccine for p in self.priorities if not p.enabled],
        )

    @classmethod
    def from_state(cls, name: str, records: RecordStore, priorities: PriorityList, plan_end: Optional[date] = None) -> "ProfileSnapshot":
        """Capture a record store and priority list back into the persisted shape."""
        return cls(
            name=name,
            birthDate=records.birth_date,
            doses=[
                DoseRecord(
                    vaccine=d.vaccine_id,
                    date=d.date_given,
                    dose=d.sequence,
                    booster=d.booster,
                    lot=d.lot,
                    notes=d.notes,
                )
                for d in records.doses()
            ],
            priorities=[
                VaccinePreference(vaccine=vid, enabled=priorities.is_enabled(vid))
                for vid in priorities.ordered_vaccine_ids()
            ]
            + [
                VaccinePreference(vaccine=vid, enabled=False, ranked=False)
                for vid in priorities.unranked_disabled()
            ],
            planEnd=plan_end,
        )
