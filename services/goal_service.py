"""
Goal service: persisting goals and evaluating their progress.
"""
import logging
from datetime import date, datetime, timezone
from typing import Dict, Any, List, Optional
from injector import inject

from database.connection import get_db_session
from repositories.goal_repository import GoalRepository
from repositories.category_repository import CategoryRepository
from repositories.activity_repository import ActivityRepository
from repositories.profile_repository import ProfileRepository
from services.exceptions import ValidationError, NotFoundError, InvalidTransitionError, DataIntegrityError
from services.goal_lifecycle import create_goal, evaluate_goal
from services.kafka_service import KafkaService

logger = logging.getLogger(__name__)


class GoalService:
    """Service for goal operations."""

    @inject
    def __init__(
        self,
        goal_repository: GoalRepository,
        category_repository: CategoryRepository,
        activity_repository: ActivityRepository,
        profile_repository: ProfileRepository,
        kafka_service: KafkaService
    ):
        self.goal_repository = goal_repository
        self.category_repository = category_repository
        self.activity_repository = activity_repository
        self.profile_repository = profile_repository
        self.kafka_service = kafka_service

    def create_goal(
        self,
        user_id: int,
        category_id: int,
        target_hours: float,
        period: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> Dict[str, Any]:
        """
        Create a goal for a user.

        Args:
            user_id: Owner profile ID
            category_id: Category the goal counts hours in
            target_hours: Hours needed for completion
            period: semester, year or custom
            start_date: First day of the window, defaults to today
            end_date: Last day of the window, custom goals only

        Returns:
            Serialized goal
        """
        start_date = start_date or date.today()

        with get_db_session() as session:
            self.profile_repository.get_by_id_or_raise(session, user_id)
            category = self.category_repository.get_by_id(session, category_id)
            if category is None:
                raise ValidationError(f"Unknown category: {category_id}")

            goal = create_goal(user_id, category, target_hours, period, start_date, end_date)
            goal.created_at = datetime.now(timezone.utc)
            self.goal_repository.add(session, goal)
            result = goal.to_dict()

        logger.info(
            f"Goal {result['id']} created for profile {user_id}: "
            f"{result['target_hours']}h in category {category_id} until {result['end_date']}"
        )
        return result

    def list_goals(self, user_id: int) -> List[Dict[str, Any]]:
        """
        Get a user's goals with live progress.

        Goals that reach 100% are marked completed here; the completion is
        recorded and published once, however many times the list is read.

        Args:
            user_id: Owner profile ID

        Returns:
            Serialized goals with current_hours, current_xp and progress_percentage
        """
        completed = []

        with get_db_session() as session:
            self.profile_repository.get_by_id_or_raise(session, user_id)
            goals = self.goal_repository.get_by_user(session, user_id)
            categories = self.category_repository.get_categories_by_id(session)

            results = []
            for goal in goals:
                category = categories.get(goal.category_id)
                if category is None:
                    raise DataIntegrityError(
                        f"Goal {goal.id} references missing category {goal.category_id}"
                    )

                activities = self.activity_repository.get_approved(
                    session,
                    user_id=user_id,
                    category_id=goal.category_id,
                    start_date=goal.start_date,
                    end_date=goal.end_date
                )
                evaluated = evaluate_goal(goal, activities)

                if evaluated.completion_event:
                    if self.goal_repository.mark_completed(session, goal.id, datetime.now(timezone.utc)):
                        session.refresh(goal)
                        completed.append(goal.to_dict())
                        logger.info(f"Goal {goal.id} completed by profile {user_id}")

                item = evaluated.to_dict()
                item['category'] = category.to_dict()
                results.append(item)

        for goal_data in completed:
            self.kafka_service.publish_goal_completed(goal_data)

        return results

    def delete_goal(self, goal_id: int, user_id: int) -> None:
        """
        Delete one of a user's active goals.

        Raises:
            NotFoundError: If the goal does not exist or belongs to someone else
            InvalidTransitionError: If the goal is already completed
        """
        with get_db_session() as session:
            goal = self.goal_repository.get_by_id(session, goal_id)
            if goal is None or goal.user_id != user_id:
                raise NotFoundError('Goal', goal_id)
            if goal.is_completed:
                raise InvalidTransitionError("Completed goals are kept and cannot be deleted")

            self.goal_repository.delete(session, goal)

        logger.info(f"Goal {goal_id} deleted by profile {user_id}")
