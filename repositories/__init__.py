"""
Repository pattern implementation for database operations.
"""

from .base_repository import BaseRepository
from .category_repository import CategoryRepository
from .profile_repository import ProfileRepository
from .activity_repository import ActivityRepository
from .goal_repository import GoalRepository
from .badge_repository import BadgeRepository, UserBadgeRepository
from .kudos_repository import KudosRepository
from .sub_skill_repository import SubSkillRepository

__all__ = [
    'BaseRepository',
    'CategoryRepository',
    'ProfileRepository',
    'ActivityRepository',
    'GoalRepository',
    'BadgeRepository',
    'UserBadgeRepository',
    'KudosRepository',
    'SubSkillRepository'
]
