import json
import pandas as pd
from pathlib import Path
from typing import IO, List, Optional, Union
from pydantic import ValidationError
from config.paths import CATALOG_PATH
from core.catalog import VaccineCatalog, VaccineRule
from core.records import Dose
from exceptions.custom_errors import (
    FileContentError,
    FileReadingError,
    MissingRuleFieldError,
)
from schemas.catalog import VaccineRuleSchema
from schemas.profile import ProfileSnapshot
from utils.date_utils import normalise_date
from utils.logger import get_logger

logger = get_logger(__name__)


def _read_json(path_or_buffer: Union[str, Path, IO], what: str):
    try:
        if hasattr(path_or_buffer, "read"):
            return json.load(path_or_buffer)
        with open(path_or_buffer, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise FileReadingError(f"Error loading {what}: {e}")


def parse_catalog_entries(entries: List[dict], strict: bool = False) -> VaccineCatalog:
    """
    Build a catalog from raw rule dictionaries.

    Entries without an id are skipped with a warning. Entries that fail
    validation are kept as bare placeholders so the vaccine still shows up as
    Ineligible; with `strict=True` any incomplete rule raises instead.
    """
    rules: List[VaccineRule] = []
    for idx, entry in enumerate(entries):
        if not isinstance(entry, dict) or not str(entry.get("id", "")).strip():
            logger.warning(f"⚠️ Catalog entry {idx} has no id; skipped.")
            continue
        try:
            rule = VaccineRuleSchema.model_validate(entry).to_rule()
        except ValidationError as e:
            vaccine_id = str(entry["id"]).strip()
            if strict:
                raise MissingRuleFieldError(vaccine_id, [err["loc"][0] for err in e.errors() if err["loc"]])
            logger.warning(f"⚠️ Catalog entry {vaccine_id!r} is malformed and kept as a placeholder: {e}")
            rule = VaccineRule(vaccine_id=vaccine_id, name=str(entry.get("name") or vaccine_id))
        if strict and rule.missing_fields():
            raise MissingRuleFieldError(rule.vaccine_id, rule.missing_fields())
        rules.append(rule)
    return VaccineCatalog.from_rules(rules)


def load_vaccine_catalog(
    path_or_buffer: Union[str, Path, IO, None] = None, strict: bool = False
) -> VaccineCatalog:
    """
    Load the vaccine catalog from a JSON file holding a list of rules.

    Parameters:
        path_or_buffer: Path to the JSON file or a file-like object. Defaults to 'config/vaccines.json'.
        strict: Raise MissingRuleFieldError for incomplete rules instead of keeping placeholders.

    Returns:
        VaccineCatalog: The rules in file order.
    """
    if path_or_buffer is None:
        path_or_buffer = CATALOG_PATH

    data = _read_json(path_or_buffer, "vaccine catalog")
    if isinstance(data, dict):
        data = data.get("vaccines", [])
    if not isinstance(data, list):
        raise FileContentError("Vaccine catalog must be a list of rules.")

    catalog = parse_catalog_entries(data, strict=strict)
    logger.info(f"📋 Loaded {len(catalog)} vaccine rules.")
    return catalog


def _read_table(path_or_buffer: Union[str, Path, bytes, IO]) -> pd.DataFrame:
    name = str(getattr(path_or_buffer, "name", path_or_buffer)).lower()
    try:
        if name.endswith(".csv"):
            return pd.read_csv(path_or_buffer)
        return pd.read_excel(path_or_buffer)
    except Exception as e:
        raise FileReadingError(f"Error loading dose records: {e}")


def load_dose_records(path_or_buffer: Union[str, Path, bytes, IO]) -> List[Dose]:
    """
    Load past doses from an Excel or CSV file by matching columns containing
    'vaccine', 'date', 'dose'/'sequence', 'lot' and 'note'.

    Parameters:
        path_or_buffer: Path to the file, or a file-like object (CSV when its name ends in .csv).

    Returns:
        List[Dose]: Doses in file order. Rows without a vaccine or date are dropped.
    """
    df = _read_table(path_or_buffer)

    col_map = {str(col).lower().strip(): col for col in df.columns}

    def find_col(*keywords: str, required: bool = True) -> Optional[str]:
        """Find column containing any of the keywords."""
        for key, original in col_map.items():
            if any(k in key for k in keywords):
                return original
        if required:
            raise FileContentError(f"No column found containing {keywords}")
        return None

    vaccine_col = find_col("vaccine")
    date_col = find_col("date", "given")
    seq_col = find_col("dose", "sequence", required=False)
    lot_col = find_col("lot", required=False)
    notes_col = find_col("note", required=False)

    df = df.dropna(subset=[vaccine_col, date_col])

    doses: List[Dose] = []
    invalid_rows = []
    for row_idx, row in df.iterrows():
        try:
            date_given = normalise_date(row[date_col])
        except ValueError:
            invalid_rows.append(str(row_idx))
            continue

        sequence, booster = None, False
        if seq_col is not None and not pd.isna(row[seq_col]):
            raw = str(row[seq_col]).strip()
            if raw.lower() == "booster":
                booster = True
            else:
                digits = "".join(ch for ch in raw.split(".")[0] if ch.isdigit())
                if not digits:
                    invalid_rows.append(str(row_idx))
                    continue
                sequence = int(digits)

        doses.append(
            Dose(
                vaccine_id=str(row[vaccine_col]).strip(),
                date_given=date_given,
                sequence=sequence,
                lot=str(row[lot_col]).strip() if lot_col is not None and not pd.isna(row[lot_col]) else "",
                notes=str(row[notes_col]).strip() if notes_col is not None and not pd.isna(row[notes_col]) else "",
                booster=booster,
            )
        )

    if invalid_rows:
        raise FileContentError(f"Invalid date or dose number in rows: {', '.join(invalid_rows)}")
    return doses


def load_profile(path_or_buffer: Union[str, Path, IO]) -> ProfileSnapshot:
    """Load a saved profile (dose history and priorities) from JSON."""
    data = _read_json(path_or_buffer, "profile")
    try:
        return ProfileSnapshot.model_validate(data)
    except ValidationError as e:
        raise FileContentError(f"Invalid profile: {e}")
