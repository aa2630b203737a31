"""
Kudos repository for database operations.
"""
from typing import Dict, List, Optional, Set
from sqlalchemy import func
from sqlalchemy.orm import Session

from repositories.base_repository import BaseRepository
from models.kudos import Kudos


class KudosRepository(BaseRepository[Kudos]):
    """Repository for Kudos entity operations."""

    def __init__(self):
        """Initialize KudosRepository."""
        super().__init__(Kudos)

    def find(self, session: Session, activity_id: int, user_id: int) -> Optional[Kudos]:
        return self.find_one_by(session, activity_id=activity_id, user_id=user_id)

    def count_by_activity(self, session: Session, activity_ids: List[int]) -> Dict[int, int]:
        """
        Count kudos for several activities in one query.

        Args:
            session: Database session
            activity_ids: Activity IDs

        Returns:
            Mapping of activity ID to kudos count (activities with none are absent)
        """
        if not activity_ids:
            return {}

        rows = session.query(
            Kudos.activity_id, func.count(Kudos.id)
        ).filter(
            Kudos.activity_id.in_(activity_ids)
        ).group_by(Kudos.activity_id).all()

        return {activity_id: count for activity_id, count in rows}

    def kudoed_by(self, session: Session, activity_ids: List[int], user_id: int) -> Set[int]:
        """
        Get which of the given activities a user has given kudos to.

        Args:
            session: Database session
            activity_ids: Activity IDs
            user_id: Profile ID of the viewer

        Returns:
            Set of activity IDs
        """
        if not activity_ids:
            return set()

        rows = session.query(Kudos.activity_id).filter(
            Kudos.activity_id.in_(activity_ids),
            Kudos.user_id == user_id
        ).all()

        return {row.activity_id for row in rows}
