import json
from config.paths import CONSTANTS_PATH

"""
Loads configuration constants from config/constants.json and exposes them as module-level variables.
Edit constants.json to change values; import from utils.constants to use in code.
"""

with open(CONSTANTS_PATH, "r", encoding="utf-8") as f:
    _constants = json.load(f)

# Expose constants as variables
DUE_WINDOW_DAYS = _constants["DUE_WINDOW_DAYS"]
INCLUDE_COMPLETED = _constants["INCLUDE_COMPLETED"]

DAYS_PER_MONTH = _constants["DAYS_PER_MONTH"]
DAYS_PER_YEAR = _constants["DAYS_PER_YEAR"]
LIFETIME_BOOSTER_YEARS = _constants["LIFETIME_BOOSTER_YEARS"]

DATE_FORMAT = _constants["DATE_FORMAT"]
MONTH_FORMAT = _constants["MONTH_FORMAT"]

LOG_LEVEL = _constants.get("LOG_LEVEL", "INFO")
