"""
Profile repository for database operations.
"""
from typing import List, Optional
from datetime import datetime, timezone
from sqlalchemy.orm import Session

from repositories.base_repository import BaseRepository
from models.profile import Profile
from services.exceptions import NotFoundError


class ProfileRepository(BaseRepository[Profile]):
    """Repository for Profile entity operations."""

    def __init__(self):
        """Initialize ProfileRepository."""
        super().__init__(Profile)

    def get_by_email(self, session: Session, email: str) -> Optional[Profile]:
        """
        Get profile by email address.

        Args:
            session: Database session
            email: Email address

        Returns:
            Profile instance or None if not found
        """
        return session.query(Profile).filter_by(email=email).first()

    def get_for_update(self, session: Session, profile_id: int) -> Profile:
        """
        Load a profile and lock its row until the transaction ends.

        Args:
            session: Database session
            profile_id: Profile ID

        Returns:
            Locked profile instance
        """
        profile = session.query(Profile).filter(
            Profile.id == profile_id
        ).with_for_update().first()

        if profile is None:
            raise NotFoundError('Profile', profile_id)
        return profile

    def set_totals(self, session: Session, profile: Profile, total_xp: int, level: int) -> Profile:
        """
        Write total_xp and level together.

        Args:
            session: Database session
            profile: Profile to update (locked via get_for_update)
            total_xp: New running XP total
            level: Level derived from total_xp

        Returns:
            Updated profile instance
        """
        profile.total_xp = total_xp
        profile.level = level
        profile.updated_at = datetime.now(timezone.utc)
        session.flush()
        return profile

    def get_by_ids(self, session: Session, profile_ids: List[int]) -> List[Profile]:
        """Get profiles for a list of IDs, in no particular order."""
        if not profile_ids:
            return []
        return session.query(Profile).filter(Profile.id.in_(profile_ids)).all()
