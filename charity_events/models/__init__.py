"""Models package initialization."""

from .base import Base
from .category import Category
from .event import Event

__all__ = ['Base', 'Category', 'Event']
