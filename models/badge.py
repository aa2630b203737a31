"""
Badge definitions and the badges users have earned.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from database import Base
from models.enums import BadgeTier


class Badge(Base):
    """
    Model for badge definitions.

    criteria keys (all optional, every present key must be met):
    activities_count, xp_amount, hours_amount. A badge without category
    is measured across all categories.
    """
    __tablename__ = 'badges'

    id = Column(Integer, primary_key=True)
    category_id = Column(Integer, ForeignKey('categories.id'))
    name = Column(String(200), nullable=False)
    description = Column(Text)
    icon = Column(String(100), default='Award')
    criteria = Column(JSON, nullable=False, default=dict)
    tier = Column(String(20), nullable=False, default=BadgeTier.BRONZE.value)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    category = relationship('Category', back_populates='badges')

    def __repr__(self):
        return f'<Badge {self.id}: {self.name} ({self.tier})>'

    def to_dict(self):
        """Convert badge to dictionary for API responses."""
        return {
            'id': self.id,
            'category_id': self.category_id,
            'name': self.name,
            'description': self.description,
            'icon': self.icon,
            'criteria': self.criteria or {},
            'tier': self.tier,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }


class UserBadge(Base):
    """Model for a badge earned by a user."""
    __tablename__ = 'user_badges'
    __table_args__ = (
        UniqueConstraint('user_id', 'badge_id', name='uq_user_badges_user_badge'),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('profiles.id'), nullable=False, index=True)
    badge_id = Column(Integer, ForeignKey('badges.id'), nullable=False)
    earned_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    badge = relationship('Badge')

    def __repr__(self):
        return f'<UserBadge user={self.user_id} badge={self.badge_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'badge_id': self.badge_id,
            'earned_at': self.earned_at.isoformat() if self.earned_at else None,
            'badge': self.badge.to_dict() if self.badge else None
        }
