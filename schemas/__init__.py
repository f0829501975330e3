"""
schemas package
---------------

Pydantic models validating raw catalog entries and saved profiles before they are turned into core objects.
"""
