"""
core
----

Core schedule engine components:

- VaccineRule & VaccineCatalog:
  Immutable vaccine dosing rules and the read-only catalog holding them.

- Dose, RecordStore & RecordSnapshot:
  A profile's administered doses, validated on every edit.

- PriorityList & PrioritySnapshot:
  The user's ordering of vaccines, replaced atomically on reorder.

- ConstraintManager:
  Register and apply rule evaluation steps in a controlled sequence.

- ScheduleState:
  Encapsulate all inputs, parameters, and intermediate collections needed to
  compute one schedule.
"""
