"""
Category service: category definitions, per-user progress and leaderboards.
"""
import logging
import re
from typing import Dict, Any, List, Optional
from injector import inject

from database.connection import get_db_session
from repositories.category_repository import CategoryRepository
from repositories.activity_repository import ActivityRepository
from repositories.profile_repository import ProfileRepository
from repositories.badge_repository import BadgeRepository, UserBadgeRepository
from repositories.sub_skill_repository import SubSkillRepository
from services.exceptions import ValidationError, ConflictError
from services.profile_service import ProfileService
from services.xp_engine import (
    LeaderboardEntry,
    compute_category_stats,
    compute_leaderboard,
    require_positive
)
import config.settings as settings

logger = logging.getLogger(__name__)


def slugify(name: str) -> str:
    return re.sub(r'[^a-z0-9]+', '-', name.lower()).strip('-')


class CategoryService:
    """Service for category operations."""

    @inject
    def __init__(
        self,
        category_repository: CategoryRepository,
        activity_repository: ActivityRepository,
        profile_repository: ProfileRepository,
        badge_repository: BadgeRepository,
        user_badge_repository: UserBadgeRepository,
        sub_skill_repository: SubSkillRepository,
        profile_service: ProfileService
    ):
        """Initialize category service."""
        self.category_repository = category_repository
        self.activity_repository = activity_repository
        self.profile_repository = profile_repository
        self.badge_repository = badge_repository
        self.user_badge_repository = user_badge_repository
        self.sub_skill_repository = sub_skill_repository
        self.profile_service = profile_service

    def list_categories(self) -> List[Dict[str, Any]]:
        with get_db_session() as session:
            return [
                category.to_dict()
                for category in self.category_repository.get_all_categories(session)
            ]

    def get_category(self, category_id: int) -> Dict[str, Any]:
        with get_db_session() as session:
            return self.category_repository.get_by_id_or_raise(session, category_id).to_dict()

    def create_category(
        self,
        admin_id: int,
        name: str,
        slug: Optional[str] = None,
        description: Optional[str] = None,
        icon: Optional[str] = None,
        color: Optional[str] = None,
        xp_multiplier: float = 1.0
    ) -> Dict[str, Any]:
        """
        Create a category.

        Args:
            admin_id: Acting administrator
            name: Display name
            slug: URL slug, derived from the name when omitted
            description: Category description
            icon: Icon name
            color: Display color
            xp_multiplier: Positive XP multiplier

        Returns:
            Serialized category

        Raises:
            ConflictError: If the slug is already taken
        """
        name = (name or '').strip()
        if not name:
            raise ValidationError("name is required")
        slug = slugify(slug or name)
        if not slug:
            raise ValidationError("slug must contain letters or digits")
        multiplier = require_positive(xp_multiplier, 'xp_multiplier')

        with get_db_session() as session:
            self.profile_service.require_admin(session, admin_id)
            if self.category_repository.get_by_slug(session, slug):
                raise ConflictError(f"Category with slug {slug} already exists")

            category = self.category_repository.create(
                session,
                name=name,
                slug=slug,
                description=description,
                icon=icon or 'Award',
                color=color,
                xp_multiplier=multiplier
            )
            result = category.to_dict()

        logger.info(f"Category created: {result['id']} ({slug}, x{multiplier})")
        return result

    def create_sub_skill(
        self,
        admin_id: int,
        category_id: int,
        name: str,
        description: Optional[str] = None,
        icon: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Add a sub-skill to a category.

        Raises:
            ConflictError: If the category already has a sub-skill with this name
        """
        name = (name or '').strip()
        if not name:
            raise ValidationError("name is required")

        with get_db_session() as session:
            self.profile_service.require_admin(session, admin_id)
            self.category_repository.get_by_id_or_raise(session, category_id)
            if self.sub_skill_repository.get_by_name(session, category_id, name):
                raise ConflictError(f"Sub-skill {name} already exists in category {category_id}")

            sub_skill = self.sub_skill_repository.create(
                session,
                category_id=category_id,
                name=name,
                description=description,
                icon=icon or 'Star'
            )
            result = sub_skill.to_dict()

        logger.info(f"Sub-skill created: {result['id']} ({name}) in category {category_id}")
        return result

    def get_category_detail(self, category_id: int, user_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Get a category with its sub-skills, leaderboard, badges and the user's progress.

        Args:
            category_id: Category ID
            user_id: Profile whose stats and earned badges to include (optional)

        Returns:
            Dictionary with category, stats (None without user_id),
            leaderboard, badges and sub_skills
        """
        with get_db_session() as session:
            category = self.category_repository.get_by_id_or_raise(session, category_id)
            activities = self.activity_repository.get_approved(session, category_id=category_id)

            stats = None
            earned_ids = set()
            if user_id is not None:
                self.profile_repository.get_by_id_or_raise(session, user_id)
                own = [activity for activity in activities if activity.user_id == user_id]
                stats = compute_category_stats(own, category, settings.CATEGORY_TARGET_HOURS).to_dict()
                earned_ids = self.user_badge_repository.get_earned_ids(session, user_id)

            badges = [
                dict(badge.to_dict(), earned=badge.id in earned_ids)
                for badge in self.badge_repository.get_badges(session, category_id)
            ]

            return {
                'category': category.to_dict(),
                'stats': stats,
                'leaderboard': self._with_profiles(
                    session, compute_leaderboard(activities, settings.LEADERBOARD_LIMIT)
                ),
                'badges': badges,
                'sub_skills': [
                    sub_skill.to_dict()
                    for sub_skill in self.sub_skill_repository.get_by_category(session, category_id)
                ]
            }

    def get_leaderboard(self, category_id: int, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Rank users by XP earned in a category.

        Args:
            category_id: Category ID
            limit: Maximum number of entries (defaults to LEADERBOARD_LIMIT)

        Returns:
            Ranked entries with the user's name and avatar
        """
        limit = settings.LEADERBOARD_LIMIT if limit is None else limit
        if limit < 0 or limit > settings.MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 0 and {settings.MAX_PAGE_SIZE}")

        with get_db_session() as session:
            self.category_repository.get_by_id_or_raise(session, category_id)
            activities = self.activity_repository.get_approved(session, category_id=category_id)
            return self._with_profiles(session, compute_leaderboard(activities, limit))

    def _with_profiles(self, session, entries: List[LeaderboardEntry]) -> List[Dict[str, Any]]:
        profiles = {
            profile.id: profile
            for profile in self.profile_repository.get_by_ids(
                session, [entry.user_id for entry in entries]
            )
        }

        leaderboard = []
        for entry in entries:
            row = entry.to_dict()
            profile = profiles.get(entry.user_id)
            row['full_name'] = profile.full_name if profile else None
            row['avatar_url'] = profile.avatar_url if profile else None
            row['level'] = profile.level if profile else None
            leaderboard.append(row)
        return leaderboard
