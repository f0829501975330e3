"""
scheduler
---------

Main scheduling module. Initializes key components:

- `builder`: Schedule computation (`compute_schedule`) and rule registration.
- `runner`: Cached recomputation for a live profile.
- `extractor`: DataFrame and month grouped views of a schedule.

Provides high-level access to core scheduling functionality.
"""
from . import builder, runner
from .builder import compute_schedule, compute_profile_schedule
