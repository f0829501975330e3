from core.catalog import VaccineRule
from core.constraint_manager import OMIT
from core.state import ScheduleState
from utils.date_utils import age_date, add_days
from utils.schedule_utils import ineligible_item

"""
This module contains the rules deciding whether a vaccine can be scheduled at all.
"""


def rule_data_rule(rule: VaccineRule, state: ScheduleState):
    """
    A catalog entry without the interval or age data needed to schedule it
    becomes an Ineligible placeholder, so the vaccine is still shown.
    """
    missing = rule.missing_fields()
    if missing:
        return ineligible_item(
            rule.vaccine_id,
            state,
            f"Missing rule data: {', '.join(missing)}.",
            name=rule.name,
        )
    return None


def priority_filter_rule(rule: VaccineRule, state: ScheduleState):
    """Vaccines switched off in the priority list are left out of the schedule."""
    if not state.priorities.is_enabled(rule.vaccine_id):
        return OMIT
    return None


def prerequisite_rule(rule: VaccineRule, state: ScheduleState):
    """
    Gate a vaccine on the primary series of its prerequisites.

    If any prerequisite is unknown, malformed or incomplete, the vaccine is
    Ineligible and no dose of it is scheduled.
    """
    blocking = []
    for prereq_id in rule.prerequisites:
        prereq = state.catalog.get(prereq_id)
        if prereq is None:
            blocking.append(f"{prereq_id} (not in catalog)")
            continue
        if not prereq.is_complete:
            blocking.append(f"{prereq.name} (incomplete rule data)")
            continue
        positions = state.positions_for(prereq_id)
        if not positions.is_complete(prereq.dose_count):
            blocking.append(prereq.name)

    if blocking:
        return ineligible_item(
            rule.vaccine_id,
            state,
            f"Requires completed series: {', '.join(blocking)}.",
            name=rule.name,
        )
    return None


def history_check_rule(rule: VaccineRule, state: ScheduleState):
    """
    Report recorded doses that break the rule without blocking the schedule:
    doses given below the minimum age, primary doses spaced too closely and
    doses given before a prerequisite series was complete.
    """
    doses = state.records.doses_for(rule.vaccine_id)
    if not doses:
        return None

    min_age_date = age_date(state.records.birth_date, rule.min_age_days)
    if min_age_date is not None:
        for dose in doses:
            if dose.date_given < min_age_date:
                state.warn(
                    rule.vaccine_id,
                    dose.date_given,
                    f"{rule.name} given before the minimum age of {rule.min_age_days} days.",
                )

    positions = state.positions_for(rule.vaccine_id)
    ordered = sorted(positions.primary.items())
    spacing = rule.min_spacing_days or 0
    for (_, prev), (pos, dose) in zip(ordered, ordered[1:]):
        if dose.date_given < add_days(prev.date_given, spacing):
            state.warn(
                rule.vaccine_id,
                dose.date_given,
                f"{rule.name} dose #{pos} given less than {spacing} days after the previous dose.",
            )

    for prereq_id in rule.prerequisites:
        prereq = state.catalog.get(prereq_id)
        if prereq is None or not prereq.is_complete:
            continue
        completed_on = state.positions_for(prereq_id).completion_date(prereq.dose_count)
        for dose in doses:
            if completed_on is None or dose.date_given < completed_on:
                state.warn(
                    rule.vaccine_id,
                    dose.date_given,
                    f"{rule.name} given before the {prereq.name} series was complete.",
                )
    return None
