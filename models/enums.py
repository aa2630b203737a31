"""
Shared enumerations for activity status, goal periods and badge tiers.
"""
from enum import Enum


class ActivityStatus(str, Enum):
    """Review status of a logged activity. Only APPROVED counts towards XP."""
    PENDING = 'pending'
    APPROVED = 'approved'
    DENIED = 'denied'


class GoalPeriod(str, Enum):
    """Time window of a goal; the end date is derived from it."""
    SEMESTER = 'semester'
    YEAR = 'year'
    CUSTOM = 'custom'


class BadgeTier(str, Enum):
    BRONZE = 'bronze'
    SILVER = 'silver'
    GOLD = 'gold'
    PLATINUM = 'platinum'
