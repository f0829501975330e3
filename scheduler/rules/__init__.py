"""
scheduler.rules
---------------

Exposes all schedule evaluation steps by importing from:

- `eligibility`: Rule data checks, priority filtering, prerequisite gating and dose history warnings.
- `series`: Scheduling of the next dose of an incomplete primary series.
- `booster`: Booster recurrence and completed series.

Allows unified access to all rule steps via wildcard imports.
"""
from .eligibility import *
from .series import *
from .booster import *
