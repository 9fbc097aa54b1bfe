"""Structured JSON logging for the API and the store client."""

import logging
from contextvars import ContextVar

from pythonjsonlogger.json import JsonFormatter as _JsonFormatter

from vmdash.config import Settings, settings as default_settings

# Set by RequestIdMiddleware; "-" outside of a request (e.g. store client calls)
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class _RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


class _VMDashJsonFormatter(_JsonFormatter):
    """Adds service name, version and environment to every record."""

    def __init__(self, *args: object, app_settings: Settings, **kwargs: object) -> None:
        super().__init__(*args, **kwargs)  # type: ignore[arg-type]
        self._app_settings = app_settings

    def add_fields(
        self,
        log_record: dict[str, object],
        record: logging.LogRecord,
        message_dict: dict[str, object],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault("service", self._app_settings.app_name)
        log_record.setdefault("version", self._app_settings.app_version)
        log_record.setdefault("env", self._app_settings.env)


def configure_logging(app_settings: Settings | None = None) -> None:
    """Install the JSON handler on the root logger.

    Called from create_app. Levels used across the package:
        DEBUG   - reads (list, diagnostics)
        INFO    - mutations, startup/shutdown, store mode changes
        WARNING - client-correctable errors, fallback transitions, rollbacks
        ERROR   - datastore failures and unhandled exceptions
    """
    app_settings = app_settings or default_settings
    log_level = logging.DEBUG if app_settings.debug else logging.INFO

    handler = logging.StreamHandler()
    handler.setFormatter(
        _VMDashJsonFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s %(request_id)s",
            datefmt="%Y-%m-%dT%H:%M:%SZ",
            app_settings=app_settings,
        )
    )
    handler.addFilter(_RequestIdFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
