"""
Activity service: logging activities, the activity feed and kudos.
"""
import logging
from datetime import date
from typing import Dict, Any, List, Optional
from injector import inject
from sqlalchemy.exc import IntegrityError

from database.connection import get_db_session
from models.enums import ActivityStatus
from repositories.activity_repository import ActivityRepository
from repositories.category_repository import CategoryRepository
from repositories.profile_repository import ProfileRepository
from repositories.kudos_repository import KudosRepository
from services.badge_service import BadgeService
from services.exceptions import ValidationError, ConflictError
from services.kafka_service import KafkaService
from services.profile_service import ProfileService
from services.xp_engine import MAX_ACTIVITY_HOURS, compute_xp_for_activity, require_positive
import config.settings as settings

logger = logging.getLogger(__name__)


class ActivityService:
    """Service for handling activity operations."""

    @inject
    def __init__(
        self,
        activity_repository: ActivityRepository,
        category_repository: CategoryRepository,
        profile_repository: ProfileRepository,
        kudos_repository: KudosRepository,
        profile_service: ProfileService,
        badge_service: BadgeService,
        kafka_service: KafkaService
    ):
        """Initialize activity service."""
        self.activity_repository = activity_repository
        self.category_repository = category_repository
        self.profile_repository = profile_repository
        self.kudos_repository = kudos_repository
        self.profile_service = profile_service
        self.badge_service = badge_service
        self.kafka_service = kafka_service

    def log_activity(
        self,
        user_id: int,
        category_id: int,
        title: str,
        activity_date: date,
        duration_hours: float,
        description: Optional[str] = None,
        photo_url: Optional[str] = None,
        proof_link: Optional[str] = None,
        is_posted: bool = True,
        auto_approve: Optional[bool] = None
    ) -> Dict[str, Any]:
        """
        Log an activity for a user.

        XP is computed from the category's current multiplier and stored on
        the activity. When the activity is approved straight away the
        profile's running total and level are updated in the same
        transaction as the insert.

        Args:
            user_id: Profile ID of the owner
            category_id: Category ID
            title: Activity title
            activity_date: Day the activity took place
            duration_hours: Hours spent, positive and at most MAX_ACTIVITY_HOURS
            description: Optional description
            photo_url: Optional photo link
            proof_link: Optional proof link
            is_posted: Show in the public feed
            auto_approve: Override AUTO_APPROVE_ACTIVITIES for this call

        Returns:
            Dictionary with the activity, new profile totals (when approved)
            and any badges unlocked
        """
        title = (title or '').strip()
        if not title:
            raise ValidationError("title is required")
        if require_positive(duration_hours, 'duration_hours') > MAX_ACTIVITY_HOURS:
            raise ValidationError(f"duration_hours cannot exceed {MAX_ACTIVITY_HOURS} per activity")
        if not isinstance(activity_date, date):
            raise ValidationError("date is required")

        approve = settings.AUTO_APPROVE_ACTIVITIES if auto_approve is None else auto_approve
        status = ActivityStatus.APPROVED if approve else ActivityStatus.PENDING

        with get_db_session() as session:
            self.profile_repository.get_by_id_or_raise(session, user_id)
            category = self.category_repository.get_by_id(session, category_id)
            if category is None:
                raise ValidationError(f"Unknown category: {category_id}")

            xp_earned = compute_xp_for_activity(duration_hours, category)

            activity = self.activity_repository.create_activity(
                session,
                user_id=user_id,
                category_id=category.id,
                title=title,
                activity_date=activity_date,
                duration_hours=float(duration_hours),
                xp_earned=xp_earned,
                status=status.value,
                description=description,
                photo_url=photo_url or None,
                proof_link=proof_link or None,
                is_posted=is_posted
            )

            totals = None
            unlocked = []
            if status is ActivityStatus.APPROVED:
                totals = self.profile_service.apply_xp(session, user_id, xp_earned)
                unlocked = self.badge_service.check_unlocks(session, user_id)

            result = {
                'activity': activity.to_dict(),
                'profile': totals.to_dict() if totals else None,
                'badges_unlocked': unlocked
            }

        logger.info(
            f"Activity {result['activity']['id']} logged for profile {user_id}: "
            f"{duration_hours}h in category {category_id}, {xp_earned} XP ({status.value})"
        )

        # Transaction committed - now safe to publish
        self.kafka_service.publish_activity_logged(result['activity'])
        if totals and totals.leveled_up:
            self.kafka_service.publish_level_up(
                user_id, totals.previous_level, totals.level, totals.total_xp
            )
        for badge in unlocked:
            self.kafka_service.publish_badge_awarded(user_id, badge, manual=False)

        return result

    def get_feed(
        self,
        user_id: Optional[int] = None,
        category_id: Optional[int] = None,
        viewer_id: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Get the approved activity feed with kudos information.

        Args:
            user_id: Only this user's activities
            category_id: Only this category's activities
            viewer_id: Profile looking at the feed, for viewer_has_kudoed
            limit: Maximum number of activities (defaults to FEED_LIMIT)

        Returns:
            List of serialized activities, newest first
        """
        limit = settings.FEED_LIMIT if limit is None else limit
        if limit <= 0 or limit > settings.MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {settings.MAX_PAGE_SIZE}")

        with get_db_session() as session:
            activities = self.activity_repository.get_feed(
                session, user_id=user_id, category_id=category_id, limit=limit
            )
            ids = [activity.id for activity in activities]
            counts = self.kudos_repository.count_by_activity(session, ids)
            kudoed = (
                self.kudos_repository.kudoed_by(session, ids, viewer_id)
                if viewer_id is not None else set()
            )

            feed = []
            for activity in activities:
                item = activity.to_dict()
                item['category'] = activity.category.to_dict() if activity.category else None
                item['profile'] = {
                    'id': activity.profile.id,
                    'full_name': activity.profile.full_name,
                    'avatar_url': activity.profile.avatar_url,
                    'level': activity.profile.level
                } if activity.profile else None
                item['kudos_count'] = counts.get(activity.id, 0)
                item['viewer_has_kudoed'] = activity.id in kudoed
                feed.append(item)

            return feed

    def toggle_kudos(self, activity_id: int, user_id: int) -> Dict[str, Any]:
        """
        Give kudos to an activity, or take them back if already given.

        Args:
            activity_id: Activity ID
            user_id: Profile ID giving kudos

        Returns:
            Dictionary with the new kudoed state and count

        Raises:
            ConflictError: If a concurrent request gave the same kudos first
        """
        with get_db_session() as session:
            self.profile_repository.get_by_id_or_raise(session, user_id)
            activity = self.activity_repository.get_by_id_or_raise(session, activity_id)
            if activity.status != ActivityStatus.APPROVED.value:
                raise ValidationError("Only approved activities can receive kudos")

            existing = self.kudos_repository.find(session, activity_id, user_id)
            if existing:
                self.kudos_repository.delete(session, existing)
                kudoed = False
            else:
                try:
                    self.kudos_repository.create(session, activity_id=activity_id, user_id=user_id)
                except IntegrityError:
                    # A concurrent toggle inserted the same row first
                    raise ConflictError("Kudos already given to this activity")
                kudoed = True

            count = self.kudos_repository.count_by_activity(session, [activity_id]).get(activity_id, 0)

        return {
            'activity_id': activity_id,
            'kudoed': kudoed,
            'kudos_count': count
        }
