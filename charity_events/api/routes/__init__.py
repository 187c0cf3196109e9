"""Routes package initialization."""

from . import categories, events, health

__all__ = [
    'categories',
    'events',
    'health'
]
