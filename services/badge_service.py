"""
Badge service: definitions, manual awards and criteria-based unlocks.
"""
import logging
from typing import Any, Dict, List, Optional
from injector import inject
from sqlalchemy.orm import Session

from database.connection import get_db_session
from models.enums import BadgeTier
from repositories.badge_repository import BadgeRepository, UserBadgeRepository
from repositories.activity_repository import ActivityRepository
from repositories.category_repository import CategoryRepository
from repositories.profile_repository import ProfileRepository
from services.exceptions import ValidationError, ConflictError
from services.kafka_service import KafkaService
from services.profile_service import ProfileService
from services.xp_engine import CategoryStats, compute_category_stats

logger = logging.getLogger(__name__)

CRITERIA_FIELDS = {
    'activities_count': 'activities_count',
    'xp_amount': 'total_xp',
    'hours_amount': 'total_hours',
}


def validate_criteria(criteria: Optional[Dict[str, Any]]) -> Dict[str, float]:
    """Check badge criteria keys and thresholds; returns a cleaned copy."""
    if criteria is None:
        return {}
    if not isinstance(criteria, dict):
        raise ValidationError("criteria must be an object")

    unknown = set(criteria) - set(CRITERIA_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown criteria: {', '.join(sorted(unknown))}")

    cleaned = {}
    for key, threshold in criteria.items():
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)) or threshold <= 0:
            raise ValidationError(f"criteria.{key} must be a positive number")
        cleaned[key] = threshold
    return cleaned


def criteria_met(criteria: Dict[str, Any], stats: CategoryStats) -> bool:
    """True when every threshold in criteria is reached. Empty criteria never unlock."""
    if not criteria:
        return False
    return all(
        getattr(stats, CRITERIA_FIELDS[key]) >= threshold
        for key, threshold in criteria.items()
        if key in CRITERIA_FIELDS
    )


class BadgeService:
    """Service for badge definitions and awards."""

    @inject
    def __init__(
        self,
        badge_repository: BadgeRepository,
        user_badge_repository: UserBadgeRepository,
        activity_repository: ActivityRepository,
        category_repository: CategoryRepository,
        profile_repository: ProfileRepository,
        profile_service: ProfileService,
        kafka_service: KafkaService
    ):
        """Initialize badge service."""
        self.badge_repository = badge_repository
        self.user_badge_repository = user_badge_repository
        self.activity_repository = activity_repository
        self.category_repository = category_repository
        self.profile_repository = profile_repository
        self.profile_service = profile_service
        self.kafka_service = kafka_service

    def list_badges(self, category_id: Optional[int] = None) -> List[Dict[str, Any]]:
        with get_db_session() as session:
            return [
                badge.to_dict()
                for badge in self.badge_repository.get_badges(session, category_id)
            ]

    def create_badge(
        self,
        admin_id: int,
        name: str,
        category_id: Optional[int] = None,
        description: Optional[str] = None,
        icon: Optional[str] = None,
        criteria: Optional[Dict[str, Any]] = None,
        tier: str = BadgeTier.BRONZE.value
    ) -> Dict[str, Any]:
        """
        Create a badge definition.

        Args:
            admin_id: Acting administrator
            name: Badge name
            category_id: Category the criteria are measured in, None for all
            description: Badge description
            icon: Icon name
            criteria: Unlock thresholds (activities_count, xp_amount, hours_amount)
            tier: bronze, silver, gold or platinum

        Returns:
            Serialized badge
        """
        name = (name or '').strip()
        if not name:
            raise ValidationError("name is required")
        try:
            tier = BadgeTier(tier).value
        except ValueError:
            raise ValidationError(f"Unknown tier: {tier}")
        cleaned_criteria = validate_criteria(criteria)

        with get_db_session() as session:
            self.profile_service.require_admin(session, admin_id)

            if category_id is not None and not self.category_repository.get_by_id(session, category_id):
                raise ValidationError(f"Unknown category: {category_id}")

            badge = self.badge_repository.create(
                session,
                name=name,
                category_id=category_id,
                description=description,
                icon=icon or 'Award',
                criteria=cleaned_criteria,
                tier=tier
            )
            result = badge.to_dict()

        logger.info(f"Badge created: {result['id']} ({name}, {tier})")
        return result

    def award_badge(self, badge_id: int, user_id: int, admin_id: int) -> Dict[str, Any]:
        """
        Award a badge to a user by hand.

        Raises:
            ConflictError: If the user already has the badge
        """
        with get_db_session() as session:
            self.profile_service.require_admin(session, admin_id)
            badge = self.badge_repository.get_by_id_or_raise(session, badge_id)
            self.profile_repository.get_by_id_or_raise(session, user_id)

            if self.user_badge_repository.exists(session, user_id=user_id, badge_id=badge_id):
                raise ConflictError("User already has this badge")

            user_badge = self.user_badge_repository.award(session, user_id, badge_id)
            result = user_badge.to_dict()
            badge_data = badge.to_dict()

        logger.info(f"Badge {badge_id} awarded to profile {user_id} by admin {admin_id}")
        self.kafka_service.publish_badge_awarded(user_id, badge_data, manual=True)
        return result

    def get_user_badges(self, user_id: int) -> List[Dict[str, Any]]:
        with get_db_session() as session:
            self.profile_repository.get_by_id_or_raise(session, user_id)
            return [
                user_badge.to_dict()
                for user_badge in self.user_badge_repository.get_by_user(session, user_id)
            ]

    def check_unlocks(self, session: Session, user_id: int) -> List[Dict[str, Any]]:
        """
        Award every not-yet-earned badge whose criteria the user now meets.

        Runs inside the caller's transaction, after the approving write has
        been flushed. Publishing is left to the caller, after commit.

        Args:
            session: Open database session
            user_id: Profile ID

        Returns:
            Serialized badges newly awarded
        """
        earned_ids = self.user_badge_repository.get_earned_ids(session, user_id)
        candidates = self.badge_repository.get_unlockable(session, earned_ids)
        if not candidates:
            return []

        activities = self.activity_repository.get_approved(session, user_id=user_id)
        stats_by_scope = {}

        unlocked = []
        for badge in candidates:
            scope = badge.category_id
            if scope not in stats_by_scope:
                scoped = [a for a in activities if scope is None or a.category_id == scope]
                stats_by_scope[scope] = compute_category_stats(scoped, badge.category)

            if criteria_met(badge.criteria, stats_by_scope[scope]):
                self.user_badge_repository.award(session, user_id, badge.id)
                unlocked.append(badge.to_dict())
                logger.info(f"Badge {badge.id} ({badge.name}) unlocked by profile {user_id}")

        return unlocked
