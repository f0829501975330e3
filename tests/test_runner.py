import pytest

from core.catalog import VaccineCatalog
from core.priority import PriorityList
from core.records import Dose, RecordStore
from core.schedule import ScheduleStatus
from scheduler.runner import ScheduleRunner
from tests.helpers import day, make_rule


@pytest.fixture
def runner(basic_catalog):
    return ScheduleRunner(basic_catalog)


@pytest.fixture
def records():
    return RecordStore([Dose("HepB", day(0))])


@pytest.fixture
def priorities():
    return PriorityList(["Tdap", "HepB"])


def test_unchanged_inputs_reuse_schedule(runner, records, priorities):
    first = runner.run(records, priorities, day(10))
    second = runner.run(records, priorities, "2024-01-11")
    assert second is first
    assert runner.computations == 1


def test_record_change_recomputes(runner, records, priorities):
    before = runner.run(records, priorities, day(100))
    records.add(Dose("HepB", day(40)), today=day(100))
    after = runner.run(records, priorities, day(100))
    assert runner.computations == 2
    assert before.for_vaccine("HepB").dose_index == 2
    assert after.for_vaccine("HepB").dose_index == 3


def test_priority_change_recomputes(runner, records, priorities):
    before = runner.run(records, priorities, day(100))
    priorities.reorder(["HepB", "Tdap"])
    after = runner.run(records, priorities, day(100))
    assert runner.computations == 2
    assert before.for_vaccine("HepB").rank == 1
    assert after.for_vaccine("HepB").rank == 0


def test_new_reference_date_recomputes(runner, records, priorities):
    early = runner.run(records, priorities, day(10))
    late = runner.run(records, priorities, day(40))
    assert runner.computations == 2
    assert early.for_vaccine("HepB").status == ScheduleStatus.DUE
    assert late.for_vaccine("HepB").status == ScheduleStatus.OVERDUE


def test_catalog_swap_recomputes(runner, records, priorities):
    runner.run(records, priorities, day(10))
    runner.set_catalog(VaccineCatalog.from_rules([make_rule("HepB", dose_count=1)]))
    schedule = runner.run(records, priorities, day(10))
    assert runner.computations == 2
    assert schedule.for_vaccine("HepB").status == ScheduleStatus.COMPLETED
    assert schedule.for_vaccine("Tdap").status == ScheduleStatus.INELIGIBLE


def test_invalidate_forces_recompute(runner, records, priorities):
    runner.run(records, priorities, day(10))
    runner.invalidate()
    runner.run(records, priorities, day(10))
    assert runner.computations == 2


def test_different_store_is_not_served_from_cache(runner, records, priorities):
    runner.run(records, priorities, day(10))
    other = RecordStore()
    schedule = runner.run(other, priorities, day(10))
    assert runner.computations == 2
    assert schedule.for_vaccine("HepB").dose_index == 1
