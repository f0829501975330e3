import pytest

from core.catalog import VaccineCatalog, VaccineRule
from exceptions.custom_errors import DuplicateVaccineIdError, UnknownVaccineIdError
from tests.helpers import make_rule


def test_lookup_returns_rule(basic_catalog):
    rule = basic_catalog.lookup("HepB")
    assert rule.dose_count == 3
    assert rule.min_spacing_days == 30


def test_lookup_unknown_raises(basic_catalog):
    with pytest.raises(UnknownVaccineIdError) as exc:
        basic_catalog.lookup("Nope")
    assert exc.value.vaccine_id == "Nope"
    assert basic_catalog.get("Nope") is None


def test_all_rules_keeps_catalog_order(basic_catalog):
    assert [r.vaccine_id for r in basic_catalog.all_rules()] == ["HepB", "Tdap", "MMR", "Flu"]
    assert basic_catalog.index_of("MMR") == 2
    assert basic_catalog.index_of("Nope") is None
    assert "Flu" in basic_catalog
    assert len(basic_catalog) == 4


def test_duplicate_ids_rejected():
    with pytest.raises(DuplicateVaccineIdError):
        VaccineCatalog.from_rules([make_rule("X"), make_rule("X")])


def test_rules_are_immutable(hepb_rule):
    with pytest.raises(Exception):
        hepb_rule.dose_count = 5


def test_missing_fields():
    assert make_rule("ok", dose_count=2, min_spacing_days=10).missing_fields() == []
    assert VaccineRule("bare", "Bare").missing_fields() == ["dose_count"]
    assert make_rule("nospacing", dose_count=3).missing_fields() == ["min_spacing_days"]
    assert "booster_interval_days" in make_rule("b", booster_interval_days=0).missing_fields()
    assert "max_spacing_days" in make_rule(
        "range", dose_count=2, min_spacing_days=60, max_spacing_days=30
    ).missing_fields()


def test_single_dose_rule_needs_no_spacing():
    assert make_rule("single", dose_count=1).is_complete


def test_descriptions():
    assert make_rule("a", dose_count=1).describe_dosing() == "1x"
    assert make_rule("b", dose_count=3, min_spacing_days=180).describe_dosing() == "3x every 180d"
    assert (
        make_rule("c", dose_count=2, min_spacing_days=30, max_spacing_days=180).describe_dosing()
        == "2x every 30-180d"
    )
    assert make_rule("d", booster_interval_days=365).describe_booster() == "every year"
    assert make_rule("e", booster_interval_days=3650).describe_booster() == "every 10 years"
    assert make_rule("f").describe_booster() == "none"


def test_recommended_ids():
    catalog = VaccineCatalog.from_rules(
        [make_rule("a"), make_rule("b", recommended=False), make_rule("c")]
    )
    assert catalog.recommended_ids() == ["a", "c"]


def test_catalog_equality_is_by_rules():
    assert VaccineCatalog.from_rules([make_rule("a")]) == VaccineCatalog.from_rules([make_rule("a")])
    assert VaccineCatalog.from_rules([make_rule("a")]) != VaccineCatalog.from_rules([make_rule("b")])
