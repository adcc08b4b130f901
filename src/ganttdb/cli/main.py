# src/ganttdb/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the project database from settings, runs the
init script against it, reports the tables it created and shuts the store down again. Useful to check that a
configured store address and init script work together.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.errors import ProjectDatabaseError
from ..logging_setup import setup_logging
from .bootstrap import create_project_database

logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s url=%s", settings.app_name, settings.database_url)

    db = create_project_database(settings=settings)
    try:
        db.init()
        logger.info("Store tables: %s", ", ".join(db.table_names()))
    except ProjectDatabaseError as exc:
        logger.error("Store check failed: %s", exc)
        return 1
    finally:
        try:
            db.shutdown()
        except ProjectDatabaseError:
            logger.exception("Shutdown failed.")

    logger.info("Store check passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
