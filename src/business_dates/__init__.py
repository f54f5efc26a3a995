"""
Business dates service.

A Flask API that adds business days and business hours to a date on
the Colombian work calendar, skipping weekends, holidays and lunch.
"""

__version__ = "1.0.0"
