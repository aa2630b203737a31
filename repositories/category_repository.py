"""
Repository for Category database operations.
"""
from typing import List, Optional, Dict
from sqlalchemy.orm import Session
from models.category import Category
from .base_repository import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository for category operations."""

    def __init__(self):
        """Initialize repository with Category model."""
        super().__init__(Category)

    def get_all_categories(self, session: Session) -> List[Category]:
        """
        Get all categories ordered by name.

        Args:
            session: Database session

        Returns:
            List of all categories
        """
        return session.query(Category).order_by(Category.name).all()

    def get_categories_by_id(self, session: Session) -> Dict[int, Category]:
        """
        Get all categories keyed by ID.

        Args:
            session: Database session

        Returns:
            Dictionary mapping category ID to category
        """
        return {category.id: category for category in self.get_all_categories(session)}

    def get_by_slug(self, session: Session, slug: str) -> Optional[Category]:
        """
        Get category by slug.

        Args:
            session: Database session
            slug: Category slug

        Returns:
            Category if found, None otherwise
        """
        return session.query(Category).filter(Category.slug == slug).first()
