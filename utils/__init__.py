"""
utils package
-------------

Contains utility modules used throughout the immunization planner.

Includes helpers for configuration constants, logging, dates, loading catalogs and dose records, validation, and building schedule items.
"""
