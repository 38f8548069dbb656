import logging
import logging.config

from fastapi import FastAPI

from huddle.api.errors import register_exception_handlers
from huddle.api.routes import router as api_router
from huddle.config import Settings, get_settings
from huddle.database import Database
from huddle.provisioning import provision

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        }
    },
    "handlers": {
        "default": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        }
    },
    "root": {
        "handlers": ["default"],
        "level": "INFO",
    },
}

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.config.dictConfig(LOGGING_CONFIG)


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Build the API application around an explicit storage capability.

    A database passed in by the caller stays owned by the caller; one built
    here from ``settings`` is disposed on shutdown.
    """

    settings = settings or get_settings()
    owns_database = database is None
    if database is None:
        database = Database.from_settings(settings)

    app = FastAPI(title=settings.app_name, debug=settings.debug)
    app.state.settings = settings
    app.state.database = database

    register_exception_handlers(app)

    @app.on_event("startup")
    def _startup() -> None:
        database.ping()
        report = provision(database.engine, fail_fast=settings.provision_fail_fast)
        logger.info(
            "Schema ready: %d created, %d existing, %d failed",
            len(report.created),
            len(report.existing),
            len(report.failed),
        )

    @app.on_event("shutdown")
    def _shutdown() -> None:
        if owns_database:
            database.dispose()

    app.include_router(api_router)
    return app
