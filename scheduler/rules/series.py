from core.catalog import VaccineRule
from core.constraint_manager import OMIT
from core.state import ScheduleState
from utils.date_utils import add_days, age_date, latest
from utils.schedule_utils import beyond_plan, ineligible_item, scheduled_item

"""
This module contains the rule scheduling the next dose of an incomplete primary series.
"""


def prerequisite_completion(rule: VaccineRule, state: ScheduleState):
    """Latest completion date among the rule's prerequisites, None if it has none."""
    dates = []
    for prereq_id in rule.prerequisites:
        prereq = state.catalog.lookup(prereq_id)
        dates.append(state.positions_for(prereq_id).completion_date(prereq.dose_count))
    return latest(*dates)


def primary_series_rule(rule: VaccineRule, state: ScheduleState):
    """
    Schedule the first missing dose of the primary series.

    The due date is the latest of:
    1. the date the minimum age is reached (when the birth date is known),
    2. the last primary dose plus the minimum spacing,
    3. the date the prerequisite series were completed.
    With none of these known the dose is due today.
    """
    positions = state.positions_for(rule.vaccine_id)
    missing = positions.missing_positions(rule.dose_count)
    if not missing:
        return None

    next_index = missing[0]
    last = positions.last_primary_dose()
    spacing = rule.min_spacing_days or 0

    min_age_date = age_date(state.records.birth_date, rule.min_age_days)
    spacing_date = add_days(last.date_given, spacing) if last else None
    due_date = latest(min_age_date, spacing_date, prerequisite_completion(rule, state)) or state.today

    max_age_date = age_date(state.records.birth_date, rule.max_age_days)
    if max_age_date is not None and max(due_date, state.today) > max_age_date:
        return ineligible_item(
            rule.vaccine_id,
            state,
            f"Past the maximum age of {rule.max_age_days} days for dose #{next_index}.",
            name=rule.name,
        )

    if beyond_plan(due_date, state):
        return OMIT

    reasons = [f"Dose {next_index} of {rule.dose_count}"]
    if last is not None:
        reasons.append(f"{spacing} days after the dose on {last.date_given}")
    elif min_age_date is not None and due_date == min_age_date:
        reasons.append(f"at the minimum age of {rule.min_age_days} days")

    window_end = None
    if last is not None and rule.max_spacing_days is not None:
        window_end = add_days(last.date_given, rule.max_spacing_days)
        if window_end < state.today:
            reasons.append("maximum spacing exceeded, continue the series")

    return scheduled_item(
        rule,
        state,
        due_date,
        next_index,
        "; ".join(reasons) + ".",
        window_end=window_end,
    )
