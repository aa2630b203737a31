"""
Goal model for user-declared hour targets within a category and time window.
"""
from sqlalchemy import Column, Integer, String, DateTime, Date, Float, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from database import Base


class Goal(Base):
    """Model for goals. Once is_completed is set it is never cleared."""
    __tablename__ = 'goals'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('profiles.id'), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey('categories.id'), nullable=False)
    target_hours = Column(Float, nullable=False)
    target_xp = Column(Integer, nullable=False)
    period = Column(String(20), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    profile = relationship('Profile', back_populates='goals')
    category = relationship('Category')

    def __repr__(self):
        return f'<Goal {self.id}: {self.target_hours}h in category {self.category_id}>'

    def to_dict(self):
        """Convert goal to dictionary for API responses."""
        return {
            'id': self.id,
            'user_id': self.user_id,
            'category_id': self.category_id,
            'target_hours': self.target_hours,
            'target_xp': self.target_xp,
            'period': self.period,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
            'is_completed': bool(self.is_completed),
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
