"""
Logging setup for the Payments API.

Every module logs through a standard-library logger obtained with
``logging.getLogger(__name__)``. This module only decides how records are
rendered, once, at application startup:

  - LOG_JSON=true  -> one JSON object per line (python-json-logger), suited
                      to log shippers that index fields such as payment_id
  - LOG_JSON=false -> human-readable text for local development

Structured context is passed with ``extra={...}``:

    logger.info("Payment created", extra={"payment_id": str(payment.id)})

Passwords, password hashes and session tokens must never be passed to a
logger. Nothing in the services does so, and no request-body logging
middleware is installed.
"""

import logging
import sys

from pythonjsonlogger import jsonlogger

from payments_api.config import settings


TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """
    Install a single stream handler on the root logger.

    Calling this more than once replaces the previous handler instead of
    stacking duplicates (uvicorn --reload re-imports the app).

    Args:
        level: Log level name. Defaults to settings.LOG_LEVEL.
        json_output: Emit JSON lines. Defaults to settings.LOG_JSON.
    """
    level = (level or settings.LOG_LEVEL).upper()
    if json_output is None:
        json_output = settings.LOG_JSON

    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(
            jsonlogger.JsonFormatter(
                JSON_FORMAT,
                rename_fields={"levelname": "level", "name": "logger"},
            )
        )
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    # SQL echo is controlled by DEBUG on the engine; keep the logger quiet otherwise
    if not settings.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
