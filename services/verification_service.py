"""
Verification service: the admin review queue for pending activities.
"""
import logging
from typing import Dict, Any, Optional
from injector import inject

from database.connection import get_db_session
from models.enums import ActivityStatus
from repositories.activity_repository import ActivityRepository
from services.badge_service import BadgeService
from services.exceptions import ValidationError, InvalidTransitionError, NotFoundError
from services.kafka_service import KafkaService
from services.profile_service import ProfileService
import config.settings as settings

logger = logging.getLogger(__name__)

DECISIONS = (ActivityStatus.APPROVED.value, ActivityStatus.DENIED.value)


class VerificationService:
    """Service for reviewing submitted activities."""

    @inject
    def __init__(
        self,
        activity_repository: ActivityRepository,
        profile_service: ProfileService,
        badge_service: BadgeService,
        kafka_service: KafkaService
    ):
        self.activity_repository = activity_repository
        self.profile_service = profile_service
        self.badge_service = badge_service
        self.kafka_service = kafka_service

    def list_pending(
        self,
        admin_id: int,
        page: int = 1,
        per_page: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Get the pending review queue, oldest first.

        Args:
            admin_id: Acting administrator
            page: Page number (1-based)
            per_page: Items per page, capped at MAX_PAGE_SIZE

        Returns:
            Dictionary with activities and pagination info
        """
        per_page = settings.PENDING_PAGE_SIZE if per_page is None else per_page
        if page < 1:
            raise ValidationError("page must be 1 or greater")
        if per_page < 1:
            raise ValidationError("per_page must be 1 or greater")
        per_page = min(per_page, settings.MAX_PAGE_SIZE)

        with get_db_session() as session:
            self.profile_service.require_admin(session, admin_id)
            activities, total = self.activity_repository.get_pending(session, page, per_page)

            items = []
            for activity in activities:
                item = activity.to_dict()
                item['profile_name'] = activity.profile.full_name if activity.profile else None
                item['category_name'] = activity.category.name if activity.category else None
                items.append(item)

        return {
            'activities': items,
            'pagination': {
                'page': page,
                'per_page': per_page,
                'total': total,
                'pages': (total + per_page - 1) // per_page
            }
        }

    def verify_activity(self, activity_id: int, admin_id: int, status: str) -> Dict[str, Any]:
        """
        Approve or deny a pending activity.

        Approval credits the stored xp_earned to the owner's running total
        and checks badge unlocks in the same transaction. Denial leaves the
        totals untouched. A decided activity cannot be decided again.

        Args:
            activity_id: Activity ID
            admin_id: Acting administrator
            status: approved or denied

        Returns:
            Dictionary with the activity, new profile totals (when approved)
            and any badges unlocked

        Raises:
            ValidationError: If status is not approved or denied
            PermissionDeniedError: If admin_id is not an administrator
            NotFoundError: If the activity does not exist
            InvalidTransitionError: If the activity is no longer pending
        """
        if status not in DECISIONS:
            raise ValidationError(f"status must be one of: {', '.join(DECISIONS)}")

        with get_db_session() as session:
            self.profile_service.require_admin(session, admin_id)

            activity = self.activity_repository.get_for_update(session, activity_id)
            if activity is None:
                raise NotFoundError('Activity', activity_id)
            if activity.status != ActivityStatus.PENDING.value:
                raise InvalidTransitionError(
                    f"Activity {activity_id} is already {activity.status}"
                )

            self.activity_repository.set_status(session, activity, status, admin_id)

            totals = None
            unlocked = []
            if status == ActivityStatus.APPROVED.value:
                totals = self.profile_service.apply_xp(session, activity.user_id, activity.xp_earned)
                unlocked = self.badge_service.check_unlocks(session, activity.user_id)

            result = {
                'activity': activity.to_dict(),
                'profile': totals.to_dict() if totals else None,
                'badges_unlocked': unlocked
            }

        user_id = result['activity']['user_id']
        logger.info(f"Activity {activity_id} {status} by admin {admin_id}")

        self.kafka_service.publish_activity_verified(result['activity'])
        if totals and totals.leveled_up:
            self.kafka_service.publish_level_up(
                user_id, totals.previous_level, totals.level, totals.total_xp
            )
        for badge in unlocked:
            self.kafka_service.publish_badge_awarded(user_id, badge, manual=False)

        return result
