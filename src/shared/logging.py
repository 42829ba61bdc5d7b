"""
Logging for the query engine and the HTTP driver.

Module loggers live under the ``ogm`` namespace (``ogm.cypher.composer``,
``ogm.driver.transaction`` ...). Driver log lines emitted on behalf of a
transaction carry its correlation ID so one unit of work can be followed
from begin through commit or rollback.
"""

import logging
import uuid
from typing import Any

LOG_FORMAT = "%(asctime)s  %(name)-30s  %(levelname)-7s  %(message)s"


def setup_logging(component: str, level: str = "INFO") -> logging.Logger:
    """
    Configure the root handler and return the logger for an entry point.

    Args:
        component: Logger name, e.g. ``ogm.main``.
        level: Level name from settings (``log_level``); unknown names fall back to INFO.

    Returns:
        The logger for ``component``.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    return logging.getLogger(component)


def generate_correlation_id() -> str:
    """Short random ID naming one transaction in the logs."""
    return uuid.uuid4().hex[:12]


class TransactionLogAdapter(logging.LoggerAdapter):
    """Prefixes every message with ``[<correlation_id>]``."""

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        return f"[{self.extra['correlation_id']}] {msg}", kwargs


def transaction_logger(logger: logging.Logger, correlation_id: str) -> TransactionLogAdapter:
    return TransactionLogAdapter(logger, {"correlation_id": correlation_id})
