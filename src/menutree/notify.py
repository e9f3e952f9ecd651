"""Default notifier that routes user-facing messages to the log."""

from loguru import logger


class LogNotifier:
    """Notifier for headless use (CLI, scripts)."""

    def notify(self, message: str, *, level: str = "info") -> None:
        if level == "error":
            logger.error(message)
        elif level == "success":
            logger.success(message)
        else:
            logger.info(message)
