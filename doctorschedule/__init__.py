"""
doctorschedule - expand doctors' availability into bookable time slots.
"""

__version__ = "0.1.0"
