import io
import json
from datetime import date

import pytest

from core.priority import PriorityList
from core.records import Dose, RecordStore
from exceptions.custom_errors import FileContentError, FileReadingError, MissingRuleFieldError
from schemas.profile import ProfileSnapshot
from utils.constants import DAYS_PER_MONTH, DAYS_PER_YEAR, LIFETIME_BOOSTER_YEARS
from utils.loader import load_dose_records, load_profile, load_vaccine_catalog, parse_catalog_entries


def test_default_catalog_loads():
    catalog = load_vaccine_catalog()
    assert len(catalog) == 14
    assert all(rule.is_complete for rule in catalog)
    assert catalog.lookup("Flu").booster_interval_days == DAYS_PER_YEAR
    assert catalog.lookup("Hepatitis B").booster_interval_days == LIFETIME_BOOSTER_YEARS * DAYS_PER_YEAR
    assert "Hepatitis A&B" not in catalog.recommended_ids()


def test_catalog_accepts_wrapped_list():
    buffer = io.StringIO(json.dumps({"vaccines": [{"id": "Flu", "doses": 1}]}))
    catalog = load_vaccine_catalog(buffer)
    assert [r.vaccine_id for r in catalog] == ["Flu"]


def test_booster_cadences_and_month_keys():
    catalog = parse_catalog_entries(
        [
            {"id": "A", "doses": 1, "booster": "annual"},
            {"id": "B", "doses": 1, "booster": {"years": 10}},
            {"id": "C", "doses": 1, "booster": None},
            {"id": "F", "doses": 1, "booster": 10},
            {"id": "G", "doses": 1, "booster": 0.5},
            {"id": "D", "doses": 2, "minSpacingMonths": 6, "minAgeMonths": 12},
            {"id": "E", "doses": 2, "minSpacingMonths": 6, "minSpacingDays": 28},
        ]
    )
    assert catalog.lookup("A").booster_interval_days == DAYS_PER_YEAR
    assert catalog.lookup("B").booster_interval_days == 10 * DAYS_PER_YEAR
    assert catalog.lookup("C").booster_interval_days is None
    assert catalog.lookup("F").booster_interval_days == 10 * DAYS_PER_YEAR
    assert catalog.lookup("G").booster_interval_days == round(0.5 * DAYS_PER_YEAR)
    assert catalog.lookup("D").min_spacing_days == 6 * DAYS_PER_MONTH
    assert catalog.lookup("D").min_age_days == 12 * DAYS_PER_MONTH
    assert catalog.lookup("E").min_spacing_days == 28


def test_malformed_entries_become_placeholders():
    catalog = parse_catalog_entries(
        [
            {"id": "Good", "name": "Good vaccine", "doses": 1},
            {"id": "BadBooster", "doses": 1, "booster": "fortnightly"},
            {"id": "FlagBooster", "doses": 1, "booster": True},
            {"id": "BadDoses", "name": "Bad doses", "doses": "several"},
            {"id": "NoDoses"},
        ]
    )
    assert len(catalog) == 5
    assert catalog.lookup("Good").is_complete
    assert catalog.lookup("BadBooster").missing_fields() == ["dose_count"]
    assert catalog.lookup("FlagBooster").missing_fields() == ["dose_count"]
    assert catalog.lookup("BadDoses").name == "Bad doses"
    assert not catalog.lookup("NoDoses").is_complete


def test_entries_without_id_are_skipped():
    catalog = parse_catalog_entries([{"name": "Nameless", "doses": 1}, {"id": "  "}, {"id": "Flu", "doses": 1}])
    assert [r.vaccine_id for r in catalog] == ["Flu"]


def test_strict_mode_raises_for_incomplete_rules():
    with pytest.raises(MissingRuleFieldError) as exc:
        parse_catalog_entries([{"id": "Two", "doses": 2}], strict=True)
    assert exc.value.vaccine_id == "Two"
    assert "min_spacing_days" in exc.value.fields

    with pytest.raises(MissingRuleFieldError):
        parse_catalog_entries([{"id": "Bad", "doses": "several"}], strict=True)


def test_unreadable_catalog_file(tmp_path):
    with pytest.raises(FileReadingError):
        load_vaccine_catalog(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(FileReadingError):
        load_vaccine_catalog(broken)


def test_catalog_must_be_a_list():
    with pytest.raises(FileContentError):
        load_vaccine_catalog(io.StringIO('"Flu"'))


def test_load_dose_records_from_csv(tmp_path):
    path = tmp_path / "history.csv"
    path.write_text(
        "Vaccine,Date Given,Dose,Lot Number,Notes\n"
        "HepB,2024-01-01,1,LOT-A,left arm\n"
        "HepB,2024-02-05,,,\n"
        "Tdap,2024-03-01,Booster,LOT-B,\n"
        ",2024-03-02,1,,\n",
        encoding="utf-8",
    )
    doses = load_dose_records(str(path))
    assert len(doses) == 3
    first, second, third = doses
    assert (first.vaccine_id, first.date_given, first.sequence) == ("HepB", date(2024, 1, 1), 1)
    assert first.lot == "LOT-A" and first.notes == "left arm"
    assert second.sequence is None and second.lot == ""
    assert third.booster and third.sequence is None


def test_load_dose_records_missing_column(tmp_path):
    path = tmp_path / "history.csv"
    path.write_text("Vaccine,Lot\nHepB,LOT-A\n", encoding="utf-8")
    with pytest.raises(FileContentError):
        load_dose_records(str(path))


def test_load_dose_records_bad_rows(tmp_path):
    path = tmp_path / "history.csv"
    path.write_text("Vaccine,Date,Dose\nHepB,not a date,1\nHepB,2024-01-01,first\n", encoding="utf-8")
    with pytest.raises(FileContentError):
        load_dose_records(str(path))


def test_load_profile(tmp_path):
    path = tmp_path / "profile.json"
    path.write_text(
        json.dumps(
            {
                "name": "Sam",
                "birthDate": "1990-05-01",
                "planEnd": "2060-01-01",
                "doses": [
                    {"vaccine": "HepB", "date": "2020-01-01", "kind": "Dose#1"},
                    {"vaccine": "Tdap", "date": "2021-06-01", "kind": "Booster", "lot": "X1"},
                ],
                "priorities": [{"vaccine": "Tdap"}, {"vaccine": "HepB", "enabled": False}],
            }
        ),
        encoding="utf-8",
    )
    profile = load_profile(path)
    assert profile.name == "Sam"
    assert profile.birth_date == date(1990, 5, 1)
    assert profile.plan_end == date(2060, 1, 1)

    store = profile.to_record_store()
    hepb, tdap = store.doses()
    assert hepb.sequence == 1 and not hepb.booster
    assert tdap.booster and tdap.lot == "X1"

    priorities = profile.to_priority_list()
    assert priorities.ordered_vaccine_ids() == ["Tdap", "HepB"]
    assert not priorities.is_enabled("HepB")


def test_load_profile_rejects_duplicate_priorities(tmp_path):
    path = tmp_path / "profile.json"
    path.write_text(
        json.dumps({"priorities": [{"vaccine": "Flu"}, {"vaccine": "Flu"}]}),
        encoding="utf-8",
    )
    with pytest.raises(FileContentError):
        load_profile(path)


def test_default_profile_enables_recommended_vaccines():
    catalog = load_vaccine_catalog()
    profile = ProfileSnapshot.default(catalog, name="New")
    priorities = profile.to_priority_list()
    assert priorities.ordered_vaccine_ids() == [r.vaccine_id for r in catalog]
    assert not priorities.is_enabled("Hepatitis A&B")
    assert priorities.is_enabled("Flu")


def test_profile_captures_live_state():
    store = RecordStore(
        [Dose("HepB", date(2020, 1, 1), sequence=1, lot="L1"), Dose("Flu", date(2021, 10, 1), booster=True)],
        birth_date=date(1990, 5, 1),
    )
    priorities = PriorityList(["Flu", "HepB"], disabled=["HepB"])
    profile = ProfileSnapshot.from_state("Sam", store, priorities, plan_end=date(2050, 1, 1))

    assert profile.birth_date == date(1990, 5, 1)
    assert profile.plan_end == date(2050, 1, 1)
    assert profile.to_record_store().doses() == store.doses()
    assert profile.to_priority_list().as_dict() == {"Flu": True, "HepB": False}
