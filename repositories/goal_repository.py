"""
Goal repository for database operations.
"""
from typing import List
from datetime import datetime
from sqlalchemy.orm import Session

from repositories.base_repository import BaseRepository
from models.goal import Goal


class GoalRepository(BaseRepository[Goal]):
    """Repository for Goal entity operations."""

    def __init__(self):
        """Initialize GoalRepository."""
        super().__init__(Goal)

    def get_by_user(self, session: Session, user_id: int) -> List[Goal]:
        """
        Get a user's goals, newest first.

        Args:
            session: Database session
            user_id: Owning profile ID

        Returns:
            List of goals
        """
        return session.query(Goal).filter(
            Goal.user_id == user_id
        ).order_by(Goal.created_at.desc(), Goal.id.desc()).all()

    def mark_completed(self, session: Session, goal_id: int, completed_at: datetime) -> bool:
        """
        Flag a goal completed if it is not already.

        Runs as a single conditional UPDATE so concurrent evaluations of the
        same goal complete it once.

        Args:
            session: Database session
            goal_id: Goal ID
            completed_at: Completion timestamp

        Returns:
            True if this call completed the goal, False if it was already completed
        """
        updated = session.query(Goal).filter(
            Goal.id == goal_id,
            Goal.is_completed.is_(False)
        ).update(
            {Goal.is_completed: True, Goal.completed_at: completed_at},
            synchronize_session='fetch'
        )
        return updated == 1
