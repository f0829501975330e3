from typing import Callable, List, Optional, Union
import logging
from core.catalog import VaccineRule
from core.schedule import ScheduleItem
from core.state import ScheduleState

logger = logging.getLogger(__name__)

# Returned by a rule step to end evaluation without emitting an item
OMIT = object()

StepResult = Union[ScheduleItem, object, None]
RuleStep = Callable[[VaccineRule, ScheduleState], StepResult]


class ConstraintManager:
    """
    Registers the evaluation steps for a vaccine rule and runs them in order.

    Each step returns a ScheduleItem (emit it and stop), OMIT (stop without an
    item) or None (fall through to the next step).
    """

    def __init__(self, state: ScheduleState):
        self.state = state
        self.rules: List[RuleStep] = []

    def add_rule(self, rule_func: RuleStep, condition: bool = True):
        """Register a rule step with optional enablement condition."""
        if condition:
            self.rules.append(rule_func)

    def evaluate(self, rule: VaccineRule) -> Optional[ScheduleItem]:
        """Run the registered steps against one vaccine rule."""
        for step in self.rules:
            result = step(rule, self.state)
            if result is OMIT:
                return None
            if result is not None:
                return result
        return None

    def apply_all(self, on_error: Optional[Callable[[VaccineRule, ScheduleState, Exception], Optional[ScheduleItem]]] = None):
        """
        Evaluate every catalog rule and emit the resulting items into the state.

        A step failing on one rule does not stop the others: the error is
        logged and `on_error` may supply a replacement item.
        """
        for rule in self.state.catalog.all_rules():
            try:
                item = self.evaluate(rule)
            except Exception as e:
                if on_error is None:
                    raise
                logger.warning(f"⚠️ Could not evaluate {rule.vaccine_id!r}: {e}")
                item = on_error(rule, self.state, e)
            if item is not None:
                self.state.emit(item)
