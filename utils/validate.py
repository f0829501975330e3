from datetime import date as dt_date
from typing import Iterable, List, Optional, Sequence
from exceptions.custom_errors import (
    DoseSequenceError,
    InvalidDoseDateError,
    InvalidPriorityOrderError,
    UnknownVaccineIdError,
)


def validate_dose(
    dose,
    existing: Sequence,
    catalog=None,
    birth_date: Optional[dt_date] = None,
    today: Optional[dt_date] = None,
):
    """
    Validate a dose before it is added to (or edited in) a record store.

    Args:
        dose (Dose): The dose being added or edited.
        existing (Sequence[Dose]): The other doses in the store.
        catalog (VaccineCatalog, optional): When given, the vaccine id must exist in it.
        birth_date (date, optional): When given, the dose may not predate it.
        today (date, optional): When given, the dose may not be in the future.

    Raises:
        UnknownVaccineIdError: If the vaccine id is not in the catalog.
        InvalidDoseDateError: If the date is impossible or out of order with its series position.
        DoseSequenceError: If the series position is already taken by another dose.
    """
    if catalog is not None and dose.vaccine_id not in catalog:
        raise UnknownVaccineIdError(dose.vaccine_id)

    if birth_date is not None and dose.date_given < birth_date:
        raise InvalidDoseDateError(
            f"{dose.vaccine_id} dose on {dose.date_given} is before the birth date {birth_date}."
        )

    if today is not None and dose.date_given > today:
        raise InvalidDoseDateError(
            f"{dose.vaccine_id} dose on {dose.date_given} is in the future."
        )

    if dose.sequence is None or dose.booster:
        return

    if dose.sequence < 1:
        raise DoseSequenceError(f"Dose number must be 1 or more, got {dose.sequence}.")

    for other in existing:
        if other.vaccine_id != dose.vaccine_id or other.booster or other.sequence is None:
            continue
        if other.sequence == dose.sequence:
            raise DoseSequenceError(
                f"{dose.vaccine_id} dose #{dose.sequence} is already recorded on {other.date_given}."
            )
        if other.sequence < dose.sequence and other.date_given > dose.date_given:
            raise InvalidDoseDateError(
                f"{dose.vaccine_id} dose #{dose.sequence} on {dose.date_given} is before "
                f"dose #{other.sequence} on {other.date_given}."
            )
        if other.sequence > dose.sequence and other.date_given < dose.date_given:
            raise InvalidDoseDateError(
                f"{dose.vaccine_id} dose #{dose.sequence} on {dose.date_given} is after "
                f"dose #{other.sequence} on {other.date_given}."
            )


def validate_priority_order(vaccine_ids: Iterable[str]) -> List[str]:
    """Validate a full priority ordering and return it as a list."""
    ordering = [str(v).strip() for v in vaccine_ids]
    seen = set()
    duplicated = []
    for vid in ordering:
        if not vid:
            raise InvalidPriorityOrderError("Priority list contains an empty vaccine id.")
        if vid in seen:
            duplicated.append(vid)
        seen.add(vid)
    if duplicated:
        raise InvalidPriorityOrderError(
            f"Duplicate vaccines in priority list: {', '.join(sorted(set(duplicated)))}"
        )
    return ordering


def validate_profile_inputs(birth_date: Optional[dt_date], today: dt_date, plan_end: Optional[dt_date]):
    """Validate profile-level dates. Returns a list of messages, empty when valid."""
    errors = []

    if birth_date is not None and birth_date > today:
        errors.append(f" • Birth date ({birth_date}) must not be after today ({today}).\n")

    if plan_end is not None and plan_end < today:
        errors.append(f" • Plan end ({plan_end}) must be on or after today ({today}).\n")

    if errors:
        errors.insert(0, "Recheck your inputs:\n")

    return errors
