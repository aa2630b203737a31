"""
Badge and earned-badge repositories.
"""
from typing import List, Optional, Set
from datetime import datetime, timezone
from sqlalchemy.orm import Session, joinedload

from repositories.base_repository import BaseRepository
from models.badge import Badge, UserBadge


class BadgeRepository(BaseRepository[Badge]):
    """Repository for badge definitions."""

    def __init__(self):
        """Initialize BadgeRepository."""
        super().__init__(Badge)

    def get_badges(self, session: Session, category_id: Optional[int] = None) -> List[Badge]:
        """
        Get badge definitions, optionally only those of one category.

        Args:
            session: Database session
            category_id: Category to filter by

        Returns:
            List of badges ordered by ID
        """
        query = session.query(Badge)
        if category_id is not None:
            query = query.filter(Badge.category_id == category_id)
        return query.order_by(Badge.id).all()

    def get_unlockable(self, session: Session, exclude_ids: Set[int]) -> List[Badge]:
        """
        Get badges with criteria that the user has not earned yet.

        Args:
            session: Database session
            exclude_ids: IDs of badges already earned

        Returns:
            List of badges
        """
        query = session.query(Badge)
        if exclude_ids:
            query = query.filter(Badge.id.notin_(exclude_ids))
        return [badge for badge in query.order_by(Badge.id).all() if badge.criteria]


class UserBadgeRepository(BaseRepository[UserBadge]):
    """Repository for badges earned by users."""

    def __init__(self):
        """Initialize UserBadgeRepository."""
        super().__init__(UserBadge)

    def get_by_user(self, session: Session, user_id: int) -> List[UserBadge]:
        """
        Get all badges a user has earned, newest first.

        Args:
            session: Database session
            user_id: Profile ID

        Returns:
            List of earned badges with badge definitions loaded
        """
        return session.query(UserBadge).options(
            joinedload(UserBadge.badge)
        ).filter(
            UserBadge.user_id == user_id
        ).order_by(UserBadge.earned_at.desc(), UserBadge.id.desc()).all()

    def get_earned_ids(self, session: Session, user_id: int) -> Set[int]:
        """
        Get the IDs of badges a user has earned.

        Args:
            session: Database session
            user_id: Profile ID

        Returns:
            Set of badge IDs
        """
        rows = session.query(UserBadge.badge_id).filter(UserBadge.user_id == user_id).all()
        return {row.badge_id for row in rows}

    def award(self, session: Session, user_id: int, badge_id: int) -> UserBadge:
        """
        Record a badge as earned.

        Args:
            session: Database session
            user_id: Profile ID
            badge_id: Badge ID

        Returns:
            Created UserBadge instance
        """
        return self.create(
            session,
            user_id=user_id,
            badge_id=badge_id,
            earned_at=datetime.now(timezone.utc)
        )
