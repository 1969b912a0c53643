"""
Schedule Pricing Package

Prices items billed on recurring weekday schedules over a future period.
Counts how often each active weekday falls inside the period and extends
the unit price across those occurrences.
"""

__version__ = "1.0.0"
