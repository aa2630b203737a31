"""
SubSkill model for the named skills practised inside a category.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from database import Base


class SubSkill(Base):
    """Model for sub-skills of a category."""
    __tablename__ = 'sub_skills'
    __table_args__ = (
        UniqueConstraint('category_id', 'name', name='uq_sub_skills_category_name'),
    )

    id = Column(Integer, primary_key=True)
    category_id = Column(Integer, ForeignKey('categories.id'), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    icon = Column(String(100), default='Star')
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    category = relationship('Category', back_populates='sub_skills')

    def __repr__(self):
        return f'<SubSkill {self.id}: {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'category_id': self.category_id,
            'name': self.name,
            'description': self.description,
            'icon': self.icon,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
