"""
Activity model: the ledger of logged user effort and its review state.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, Date, Float, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from database import Base
from models.enums import ActivityStatus


class Activity(Base):
    """Model for logged activities with admin verification fields."""
    __tablename__ = 'activities'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('profiles.id'), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey('categories.id'), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    description = Column(Text)
    date = Column(Date, nullable=False)
    duration_hours = Column(Float, nullable=False)

    # Snapshot taken at creation time, never recomputed
    xp_earned = Column(Integer, nullable=False, default=0)

    photo_url = Column(String(1000))
    proof_link = Column(String(1000))

    # Review workflow fields
    status = Column(String(20), nullable=False, default=ActivityStatus.PENDING.value, index=True)
    verified_by = Column(Integer, ForeignKey('profiles.id'))
    verified_at = Column(DateTime)

    is_posted = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    profile = relationship('Profile', foreign_keys=[user_id], back_populates='activities')
    verifier = relationship('Profile', foreign_keys=[verified_by])
    category = relationship('Category', back_populates='activities')
    kudos = relationship('Kudos', back_populates='activity', cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Activity {self.id}: {self.title}>'

    def to_dict(self):
        """Convert activity to dictionary for API responses."""
        return {
            'id': self.id,
            'user_id': self.user_id,
            'category_id': self.category_id,
            'title': self.title,
            'description': self.description,
            'date': self.date.isoformat() if self.date else None,
            'duration_hours': self.duration_hours,
            'xp_earned': self.xp_earned,
            'photo_url': self.photo_url,
            'proof_link': self.proof_link,
            'status': self.status,
            'verified_by': self.verified_by,
            'verified_at': self.verified_at.isoformat() if self.verified_at else None,
            'is_posted': self.is_posted,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
