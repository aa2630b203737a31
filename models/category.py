"""
Category model for skill domains and their XP multipliers.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, Float
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from database import Base


class Category(Base):
    """Model for skill categories. Read-only to the XP engine."""
    __tablename__ = 'categories'

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    slug = Column(String(200), unique=True, nullable=False)
    description = Column(Text)
    icon = Column(String(100), default='Award')
    color = Column(String(50))
    xp_multiplier = Column(Float, nullable=False, default=1.0)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    activities = relationship('Activity', back_populates='category')
    badges = relationship('Badge', back_populates='category')
    sub_skills = relationship('SubSkill', back_populates='category', order_by='SubSkill.name')

    def __repr__(self):
        return f'<Category {self.id}: {self.name}>'

    def to_dict(self):
        """Convert category to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'description': self.description,
            'icon': self.icon,
            'color': self.color,
            'xp_multiplier': self.xp_multiplier,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
