from core.catalog import VaccineRule
from core.constraint_manager import OMIT
from core.state import ScheduleState
from utils.date_utils import add_days, age_date
from utils.schedule_utils import beyond_plan, completed_item, scheduled_item

"""
This module contains the rules for vaccines whose primary series is complete.
"""


def booster_rule(rule: VaccineRule, state: ScheduleState):
    """
    Schedule the next booster, one interval after the most recent dose of the
    vaccine (primary or booster). Nothing is scheduled past the maximum age.
    """
    if rule.booster_interval_days is None:
        return None

    positions = state.positions_for(rule.vaccine_id)
    last = positions.last_dose()
    due_date = add_days(last.date_given, rule.booster_interval_days)

    max_age_date = age_date(state.records.birth_date, rule.max_age_days)
    if max_age_date is not None and max(due_date, state.today) > max_age_date:
        return OMIT

    if beyond_plan(due_date, state):
        return OMIT

    return scheduled_item(
        rule,
        state,
        due_date,
        positions.next_booster_index(rule.dose_count),
        f"Booster {rule.describe_booster()}; last dose on {last.date_given}.",
        booster=True,
    )


def completed_rule(rule: VaccineRule, state: ScheduleState):
    """A finished series with no booster is shown as Completed, or left out when configured so."""
    if not state.include_completed:
        return OMIT
    positions = state.positions_for(rule.vaccine_id)
    return completed_item(rule, state, positions.completion_date(rule.dose_count))
