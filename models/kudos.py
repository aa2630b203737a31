"""
Kudos model: one user's applause for another user's activity.
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from database import Base


class Kudos(Base):
    """Model for kudos given to an activity."""
    __tablename__ = 'kudos'
    __table_args__ = (
        UniqueConstraint('activity_id', 'user_id', name='uq_kudos_activity_user'),
    )

    id = Column(Integer, primary_key=True)
    activity_id = Column(Integer, ForeignKey('activities.id'), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('profiles.id'), nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    activity = relationship('Activity', back_populates='kudos')

    def __repr__(self):
        return f'<Kudos activity={self.activity_id} user={self.user_id}>'
