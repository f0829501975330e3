from datetime import date as dt_date
from typing import Optional
from core.catalog import VaccineRule
from core.schedule import ScheduleItem, ScheduleStatus
from core.state import ScheduleState
from utils.date_utils import add_days


def classify_status(due_date: dt_date, today: dt_date, due_window_days: int) -> ScheduleStatus:
    """Overdue when due on or before today, Due inside the near-term window, Upcoming after it."""
    if due_date <= today:
        return ScheduleStatus.OVERDUE
    if due_date <= add_days(today, due_window_days):
        return ScheduleStatus.DUE
    return ScheduleStatus.UPCOMING


def beyond_plan(due_date: dt_date, state: ScheduleState) -> bool:
    return state.plan_end is not None and due_date > state.plan_end


def scheduled_item(
    rule: VaccineRule,
    state: ScheduleState,
    due_date: dt_date,
    dose_index: int,
    rationale: str,
    booster: bool = False,
    window_end: Optional[dt_date] = None,
) -> ScheduleItem:
    """Build an Overdue / Due / Upcoming item for a dose still to be given."""
    return ScheduleItem(
        vaccine_id=rule.vaccine_id,
        name=rule.name,
        due_date=due_date,
        status=classify_status(due_date, state.today, state.due_window_days),
        dose_index=dose_index,
        rank=state.rank_of(rule.vaccine_id),
        booster=booster,
        window_end=window_end,
        rationale=rationale,
    )


def ineligible_item(
    vaccine_id: str, state: ScheduleState, reason: str, name: Optional[str] = None
) -> ScheduleItem:
    """Placeholder item for a vaccine that cannot be scheduled."""
    return ScheduleItem(
        vaccine_id=vaccine_id,
        name=name or vaccine_id,
        due_date=None,
        status=ScheduleStatus.INELIGIBLE,
        dose_index=None,
        rank=state.rank_of(vaccine_id),
        rationale=reason,
    )


def completed_item(rule: VaccineRule, state: ScheduleState, completed_on: Optional[dt_date]) -> ScheduleItem:
    return ScheduleItem(
        vaccine_id=rule.vaccine_id,
        name=rule.name,
        due_date=completed_on,
        status=ScheduleStatus.COMPLETED,
        dose_index=None,
        rank=state.rank_of(rule.vaccine_id),
        rationale=f"Primary series of {rule.dose_count} complete; no booster required.",
    )
