# src/ganttdb/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root": it turns settings into a concrete
SqlProjectDatabase. Keeping settings injectable makes it easy to test.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..storage.connection import SqliteConnectionProvider
from ..core.ports import ProjectDatabase
from ..storage.sql_database import SqlProjectDatabase

logger = logging.getLogger(__name__)


def create_project_database(*, settings=None) -> ProjectDatabase:
    """
    Build the project database from settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    provider = SqliteConnectionProvider(
        settings.database_url,
        timeout=getattr(settings, "connect_timeout", 30.0),
    )
    logger.debug("Project database url=%s in_memory=%s", provider.url, provider.is_in_memory)
    return SqlProjectDatabase(provider, init_script_path=settings.init_script)
