"""
CRM Core Library.

Configuration, logging, database, models, repositories and the Redis
response cache shared by the API.

Usage:
    # Database
    from core.db import db, get_db
    from core.models import Order, Master, CashOperation
    from core.repositories import OrderRepository

    # Config
    from core.config import get_settings, Settings

    # Logging
    from core.logging import get_logger, configure_logging

    # Cache
    from core.cache import RedisCache, CacheKeys
"""

__version__ = "1.0.0"
