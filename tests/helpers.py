from datetime import date, timedelta

from core.catalog import VaccineRule


DAY_ZERO = date(2024, 1, 1)


def day(n: int) -> date:
    """Date `n` days after DAY_ZERO."""
    return DAY_ZERO + timedelta(days=n)


def make_rule(vaccine_id: str, **kwargs) -> VaccineRule:
    kwargs.setdefault("name", vaccine_id)
    kwargs.setdefault("dose_count", 1)
    return VaccineRule(vaccine_id=vaccine_id, **kwargs)
