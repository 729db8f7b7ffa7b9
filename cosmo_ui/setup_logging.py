import logging
import os


def setup_logging(level: str = "INFO") -> None:
    """Minimal logging setup shared by every cosmo_ui module.

    - Sets root logger level
    - Ensures a basic StreamHandler is attached once
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
    resolved = logging.getLevelName(str(level).upper())
    root.setLevel(resolved if isinstance(resolved, int) else logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger after ensuring logging is initialized."""
    if not logging.getLogger().handlers:
        setup_logging(os.getenv("LOG_LEVEL", "INFO"))
    return logging.getLogger(name)
