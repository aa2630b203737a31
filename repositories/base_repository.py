"""
Base repository class providing common database operations.
"""
from abc import ABC
from typing import TypeVar, Generic, Optional, Type
from sqlalchemy.orm import Session
from database import Base
from services.exceptions import NotFoundError

# Generic type for model classes
ModelType = TypeVar('ModelType', bound=Base)


class BaseRepository(Generic[ModelType], ABC):
    """Abstract base class for repository pattern implementation."""

    def __init__(self, model_class: Type[ModelType]):
        """
        Initialize repository with model class.

        Args:
            model_class: SQLAlchemy model class
        """
        self.model_class = model_class

    @property
    def entity_name(self) -> str:
        return self.model_class.__name__

    def get_by_id(self, session: Session, id: int) -> Optional[ModelType]:
        """
        Get entity by ID.

        Args:
            session: Database session
            id: Entity ID

        Returns:
            Entity instance or None if not found
        """
        return session.query(self.model_class).filter(
            self.model_class.id == id
        ).first()

    def get_by_id_or_raise(self, session: Session, id: int) -> ModelType:
        """
        Get entity by ID, raising NotFoundError when it does not exist.

        Args:
            session: Database session
            id: Entity ID

        Returns:
            Entity instance
        """
        entity = self.get_by_id(session, id)
        if entity is None:
            raise NotFoundError(self.entity_name, id)
        return entity

    def create(self, session: Session, **kwargs) -> ModelType:
        """
        Create new entity.

        Args:
            session: Database session
            **kwargs: Entity attributes

        Returns:
            Created entity instance
        """
        entity = self.model_class(**kwargs)
        session.add(entity)
        session.flush()  # Get the ID without committing
        return entity

    def add(self, session: Session, entity: ModelType) -> ModelType:
        """Persist an entity built elsewhere and assign its ID."""
        session.add(entity)
        session.flush()
        return entity

    def update(
        self,
        session: Session,
        entity: ModelType,
        **kwargs
    ) -> ModelType:
        """
        Update existing entity.

        Args:
            session: Database session
            entity: Entity instance to update
            **kwargs: Attributes to update

        Returns:
            Updated entity instance
        """
        for key, value in kwargs.items():
            if hasattr(entity, key):
                setattr(entity, key, value)

        session.flush()
        return entity

    def delete(self, session: Session, entity: ModelType) -> None:
        """
        Delete entity.

        Args:
            session: Database session
            entity: Entity instance to delete
        """
        session.delete(entity)
        session.flush()

    def exists(self, session: Session, **filters) -> bool:
        """
        Check if entity exists with given filters.

        Args:
            session: Database session
            **filters: Filter conditions

        Returns:
            True if entity exists, False otherwise
        """
        return self.find_one_by(session, **filters) is not None

    def find_one_by(self, session: Session, **filters) -> Optional[ModelType]:
        """
        Find single entity by filters.

        Args:
            session: Database session
            **filters: Filter conditions

        Returns:
            Entity instance or None if not found
        """
        return self._filtered(session, **filters).first()

    def _filtered(self, session: Session, **filters):
        query = session.query(self.model_class)

        for key, value in filters.items():
            if hasattr(self.model_class, key):
                query = query.filter(getattr(self.model_class, key) == value)

        return query
