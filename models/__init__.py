"""
Database models package.
"""
# Import all models for easy access
from .enums import ActivityStatus, GoalPeriod, BadgeTier
from .category import Category
from .profile import Profile
from .activity import Activity
from .goal import Goal
from .badge import Badge, UserBadge
from .kudos import Kudos
from .sub_skill import SubSkill

# Import Base for table creation
from database import Base

# Export all models
__all__ = [
    'ActivityStatus',
    'GoalPeriod',
    'BadgeTier',
    'Category',
    'Profile',
    'Activity',
    'Goal',
    'Badge',
    'UserBadge',
    'Kudos',
    'SubSkill',
    'Base'
]
