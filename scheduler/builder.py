from datetime import date as dt_date
from typing import Optional
from utils.logger import get_logger
from utils.constants import DUE_WINDOW_DAYS, INCLUDE_COMPLETED
from utils.date_utils import normalise_date
from utils.schedule_utils import ineligible_item
from core.catalog import VaccineCatalog, VaccineRule
from core.constraint_manager import ConstraintManager
from core.priority import PrioritySnapshot
from core.schedule import Schedule
from core.state import ScheduleState
from scheduler.ordering import order_items
from scheduler.rules import *

logger = get_logger(__name__)


def build_state(
    catalog: VaccineCatalog,
    records,
    priorities,
    today,
    due_window_days: int = DUE_WINDOW_DAYS,
    include_completed: bool = INCLUDE_COMPLETED,
    plan_end: Optional[dt_date] = None,
) -> ScheduleState:
    """Snapshot the mutable inputs into a fresh ScheduleState."""
    return ScheduleState(
        catalog=catalog,
        records=records.snapshot(),
        priorities=priorities.snapshot() if priorities is not None else PrioritySnapshot(),
        today=normalise_date(today),
        due_window_days=due_window_days,
        include_completed=include_completed,
        plan_end=normalise_date(plan_end) if plan_end is not None else None,
    )


def _degrade_to_ineligible(rule: VaccineRule, state: ScheduleState, error: Exception):
    return ineligible_item(rule.vaccine_id, state, f"Could not evaluate rule: {error}", name=rule.name)


def add_unknown_vaccines(state: ScheduleState) -> None:
    """
    Vaccine ids referenced by the priority list or the dose history but absent
    from the catalog each get one Ineligible item.
    """
    referenced = state.priorities.ordered_vaccine_ids() + state.records.vaccine_ids()
    for vaccine_id in dict.fromkeys(referenced):
        if vaccine_id in state.catalog or vaccine_id in state.emitted_ids:
            continue
        if not state.priorities.is_enabled(vaccine_id):
            continue
        for dose in state.records.doses_for(vaccine_id):
            state.warn(vaccine_id, dose.date_given, f"{vaccine_id} is not in the vaccine catalog.")
        logger.warning(f"⚠️ Unknown vaccine id {vaccine_id!r} marked Ineligible.")
        state.emit(ineligible_item(vaccine_id, state, "Not in the vaccine catalog."))


# == Compute Schedule ==
def compute_schedule(
    catalog: VaccineCatalog,
    records,
    priorities=None,
    today=None,
    due_window_days: int = DUE_WINDOW_DAYS,
    include_completed: bool = INCLUDE_COMPLETED,
    plan_end: Optional[dt_date] = None,
) -> Schedule:
    """
    Computes the ordered schedule of recommended doses for one profile.

    This is a pure function of its inputs: the record store and priority list
    are snapshotted first, nothing is mutated, and the same inputs always give
    the same ordered output. Data problems never raise; the affected vaccine
    is returned as an Ineligible item instead.

    Args:
        catalog (VaccineCatalog): The vaccine rule snapshot.
        records (RecordStore | RecordSnapshot): The profile's dose history.
        priorities (PriorityList | PrioritySnapshot, optional): The user's priority ordering.
        today (date | str): Reference date. Required.
        due_window_days (int): Items due within this many days are Due rather than Upcoming.
        include_completed (bool): Emit Completed items for finished, non-boosted series.
        plan_end (date, optional): Leave out items due after this date.

    Returns:
        Schedule: Items ordered by status severity, priority rank, then due date.
    """
    if today is None:
        raise ValueError("compute_schedule needs a reference date for 'today'.")

    state = build_state(
        catalog, records, priorities, today, due_window_days, include_completed, plan_end
    )

    cm = ConstraintManager(state)
    cm.add_rule(rule_data_rule)  # Malformed catalog entries become placeholders
    cm.add_rule(history_check_rule)  # Warn about questionable recorded doses
    cm.add_rule(priority_filter_rule)  # Skip vaccines switched off by the user
    cm.add_rule(prerequisite_rule)  # Gate on prerequisite series
    cm.add_rule(primary_series_rule)  # Next dose of an incomplete series
    cm.add_rule(booster_rule)  # Next booster of a complete series
    cm.add_rule(completed_rule)  # Complete series without boosters

    cm.apply_all(on_error=_degrade_to_ineligible)
    add_unknown_vaccines(state)

    items = order_items(state.items)
    logger.debug(
        f"Computed schedule for {state.today}: {len(items)} items, {len(state.warnings)} warnings"
    )
    return Schedule(items=tuple(items), today=state.today, warnings=tuple(state.warnings))


def compute_profile_schedule(profile, catalog: VaccineCatalog, today, **kwargs) -> Schedule:
    """Compute the schedule for a ProfileSnapshot (see schemas.profile)."""
    kwargs.setdefault("plan_end", profile.plan_end)
    return compute_schedule(
        catalog,
        profile.to_record_store(catalog),
        profile.to_priority_list(),
        today,
        **kwargs,
    )
