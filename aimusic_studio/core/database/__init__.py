"""
Database layer for AI Music Studio.

Structure:
- entities/: Table models, one module per table
- repositories/: Data access helpers built on the entities
- session.py: Global engine and session factory management
- utils.py: Engine / session factory helpers
"""

from .base import Base, new_id, utc_now
from .session import (
    async_session_maker,
    engine,
    get_session,
    init_db,
)
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
)

__all__ = [
    "Base",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "get_session",
    "init_db",
    "new_id",
    "utc_now",
]
