"""Database access for the events API: engine, sessions and retrying transactions."""

from .db_core import (
    ConnectionError,
    Database,
    DatabaseConfig,
    DatabaseError,
    SessionError,
    db,
)
from .operations import execute_in_transaction, with_retry

__all__ = [
    'ConnectionError',
    'Database',
    'DatabaseConfig',
    'DatabaseError',
    'SessionError',
    'db',
    'execute_in_transaction',
    'with_retry',
]
