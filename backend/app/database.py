"""
Database session dependency for the API routers.

Re-exports from the unified core.db module. Initialization happens in the
application lifespan, never at import time.
"""

from core.db import db, get_db

__all__ = ["db", "get_db"]
