"""
Sub-skill repository for database operations.
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from repositories.base_repository import BaseRepository
from models.sub_skill import SubSkill


class SubSkillRepository(BaseRepository[SubSkill]):
    """Repository for SubSkill entity operations."""

    def __init__(self):
        """Initialize SubSkillRepository."""
        super().__init__(SubSkill)

    def get_by_category(self, session: Session, category_id: int) -> List[SubSkill]:
        """
        Get a category's sub-skills ordered by name.

        Args:
            session: Database session
            category_id: Category ID

        Returns:
            List of sub-skills
        """
        return session.query(SubSkill).filter(
            SubSkill.category_id == category_id
        ).order_by(SubSkill.name, SubSkill.id).all()

    def get_by_name(self, session: Session, category_id: int, name: str) -> Optional[SubSkill]:
        return self.find_one_by(session, category_id=category_id, name=name)
