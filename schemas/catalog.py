from pydantic import BaseModel, model_validator, Field, ConfigDict
from typing import List, Optional, Any
from core.catalog import VaccineRule
from utils.constants import DAYS_PER_MONTH, DAYS_PER_YEAR, LIFETIME_BOOSTER_YEARS

# Named booster cadences accepted in catalog files
BOOSTER_CADENCES = {
    "annual": DAYS_PER_YEAR,
    "lifetime": LIFETIME_BOOSTER_YEARS * DAYS_PER_YEAR,
}

# Month based keys converted to their day based equivalents
MONTH_KEYS = {
    "minAgeMonths": "minAgeDays",
    "minSpacingMonths": "minSpacingDays",
    "maxSpacingMonths": "maxSpacingDays",
    "boosterIntervalMonths": "boosterIntervalDays",
    "maxAgeMonths": "maxAgeDays",
}


class VaccineRuleSchema(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: Optional[str] = None
    treats: List[str] = Field(default_factory=list)
    doses: Optional[int] = None
    minAgeDays: int = 0
    minSpacingDays: Optional[int] = None
    maxSpacingDays: Optional[int] = None
    boosterIntervalDays: Optional[int] = None
    maxAgeDays: Optional[int] = None
    prerequisites: List[str] = Field(default_factory=list)
    notes: str = ""
    recommended: bool = True

    @model_validator(mode="before")
    @classmethod
    def normalise_intervals(cls, values: Any) -> Any:
        """
        Model validator to accept the shorthand forms used in catalog files.

        A "booster" key may hold a named cadence ("annual", "lifetime"), a number
        of years (bare or as {"years": n}), or null for no booster; it is moved
        to "boosterIntervalDays".
        Keys given in months (e.g. "minSpacingMonths") are converted to days
        unless the day based key is also present.
        """
        if not isinstance(values, dict):
            return values
        values = dict(values)

        if "booster" in values and "boosterIntervalDays" not in values:
            booster = values.pop("booster")
            if isinstance(booster, str):
                key = booster.strip().lower()
                if key in ("", "none"):
                    booster = None
                elif key in BOOSTER_CADENCES:
                    booster = BOOSTER_CADENCES[key]
                else:
                    raise ValueError(f"Unknown booster cadence {booster!r}")
            elif isinstance(booster, bool):
                raise ValueError(f"Unknown booster cadence {booster!r}")
            elif isinstance(booster, (int, float)):
                booster = round(booster * DAYS_PER_YEAR)
            elif isinstance(booster, dict) and "years" in booster:
                booster = int(booster["years"]) * DAYS_PER_YEAR
            values["boosterIntervalDays"] = booster

        for month_key, day_key in MONTH_KEYS.items():
            if month_key in values:
                months = values.pop(month_key)
                if day_key not in values and months is not None:
                    values[day_key] = round(float(months) * DAYS_PER_MONTH)
        return values

    def to_rule(self) -> VaccineRule:
        return VaccineRule(
            vaccine_id=self.id.strip(),
            name=(self.name or self.id).strip(),
            dose_count=self.doses,
            min_age_days=self.minAgeDays,
            min_spacing_days=self.minSpacingDays,
            max_spacing_days=self.maxSpacingDays,
            booster_interval_days=self.boosterIntervalDays,
            max_age_days=self.maxAgeDays,
            prerequisites=tuple(p.strip() for p in self.prerequisites),
            treats=tuple(self.treats),
            notes=self.notes,
            recommended=self.recommended,
        )
