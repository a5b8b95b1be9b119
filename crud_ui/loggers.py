import logging
import sys

import httpx

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


class NtfyHandler(logging.Handler):
    """Push warnings and errors of a mount to an ntfy.sh topic."""

    def __init__(self, topic: str, priority: str = "high", tags: list[str] = None, timeout: float = 5.0):
        super().__init__()
        self.url = f"https://ntfy.sh/{topic}"
        self.priority = priority  # min, low, default, high, max
        self.tags = tags or ["warning"]
        self.client = httpx.Client(timeout=timeout)

    def emit(self, record):
        try:
            response = self.client.post(
                self.url,
                content=self.format(record).encode("utf-8"),
                headers={
                    "Title": f"{record.name}: {record.levelname}",
                    "Priority": self.priority,
                    "Tags": ",".join(self.tags),
                },
            )
            response.raise_for_status()
        except Exception:
            self.handleError(record)

    def close(self):
        self.client.close()
        super().close()


def configure_logger(name: str, debug_log: bool = False, ntfy_topic: str = "") -> logging.Logger:
    """Logger for one mount: stdout at DEBUG when debug_log is on, ntfy for warnings when a topic is set."""
    logger = logging.getLogger(f"crud_ui.{name}")
    for handler in list(logger.handlers):
        if getattr(handler, "_crud_ui_handler", False):
            logger.removeHandler(handler)
            handler.close()

    if debug_log:
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setLevel(logging.DEBUG)
        stdout_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        stdout_handler._crud_ui_handler = True
        logger.addHandler(stdout_handler)
        logger.setLevel(logging.DEBUG)

    if ntfy_topic:
        ntfy_handler = NtfyHandler(ntfy_topic, tags=["warning", "crud_ui"])
        ntfy_handler.setLevel(logging.WARNING)
        ntfy_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        ntfy_handler._crud_ui_handler = True
        logger.addHandler(ntfy_handler)

    return logger
