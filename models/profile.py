"""
Profile model holding a user's identity and running XP totals.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from database import Base


class Profile(Base):
    """Model for user profiles."""
    __tablename__ = 'profiles'

    id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, nullable=False)
    full_name = Column(String(500), nullable=False)
    avatar_url = Column(String(1000))
    school = Column(String(500))
    graduation_year = Column(Integer)
    bio = Column(Text)
    is_admin = Column(Boolean, default=False, nullable=False)
    is_public = Column(Boolean, default=True, nullable=False)

    # total_xp and level are always written together
    total_xp = Column(Integer, default=0, nullable=False)
    level = Column(Integer, default=1, nullable=False)
    streak = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    activities = relationship('Activity', foreign_keys='Activity.user_id', back_populates='profile')
    goals = relationship('Goal', back_populates='profile')

    def __repr__(self):
        return f'<Profile {self.id}: {self.full_name}>'

    def to_dict(self):
        """Convert profile to dictionary for API responses."""
        return {
            'id': self.id,
            'email': self.email,
            'full_name': self.full_name,
            'avatar_url': self.avatar_url,
            'school': self.school,
            'graduation_year': self.graduation_year,
            'bio': self.bio,
            'is_admin': self.is_admin,
            'is_public': self.is_public,
            'total_xp': self.total_xp,
            'level': self.level,
            'streak': self.streak,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
