from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class Notifier:
    """User-visible transient messages. The base implementation only logs them."""

    def success(self, message: str) -> None:
        logger.info("success: %s", message)

    def info(self, message: str) -> None:
        logger.info("info: %s", message)

    def warning(self, message: str) -> None:
        logger.warning("warning: %s", message)

    def error(self, message: str) -> None:
        logger.error("error: %s", message)
