"""
weeklyslots - weekly availability and time-slot scheduling for clinic providers.
"""

__version__ = "0.1.0"
