import pytest

from core.catalog import VaccineCatalog
from core.records import Dose, RecordStore
from tests.helpers import DAY_ZERO, day, make_rule


@pytest.fixture
def hepb_rule():
    return make_rule("HepB", dose_count=3, min_spacing_days=30, min_age_days=0)


@pytest.fixture
def tdap_rule():
    return make_rule("Tdap", dose_count=1, booster_interval_days=3650)


@pytest.fixture
def basic_catalog(hepb_rule, tdap_rule):
    return VaccineCatalog.from_rules(
        [
            hepb_rule,
            tdap_rule,
            make_rule("MMR", dose_count=2, min_spacing_days=28, min_age_days=365),
            make_rule("Flu", dose_count=1, booster_interval_days=365, min_age_days=180),
        ]
    )


@pytest.fixture
def prereq_catalog():
    return VaccineCatalog.from_rules(
        [
            make_rule("A", dose_count=2, min_spacing_days=30),
            make_rule("B", dose_count=1, prerequisites=("A",)),
        ]
    )


@pytest.fixture
def mixed_history():
    return RecordStore(
        [
            Dose("HepB", day(0)),
            Dose("HepB", day(35)),
            Dose("Tdap", day(10)),
            Dose("MMR", day(400), sequence=1),
            Dose("Retired", day(20)),
        ],
        birth_date=DAY_ZERO,
    )
