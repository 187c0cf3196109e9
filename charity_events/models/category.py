"""Category model definition."""

from typing import Any, Dict

from sqlalchemy import Column, DateTime, Integer, String, Text, func
from sqlalchemy.orm import relationship

from .base import Base


class Category(Base):
    """
    Category an event belongs to (e.g. 'Fun Run', 'Gala Dinner').

    Fields:
        id: Unique identifier (auto-generated)
        name: Unique display name
        description: Optional longer description
        created_at: When the category was created
        updated_at: When the category was last modified
    """
    __tablename__ = 'categories'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    events = relationship('Event', back_populates='category')

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __str__(self) -> str:
        """String representation."""
        return f"Category(id={self.id}, name={self.name})"
