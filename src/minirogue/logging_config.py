import logging
import os


def configure_logging(default_level: int = logging.INFO) -> None:
    """Send generation logs to stderr at MINIROGUE_LOG_LEVEL (default INFO)."""
    level_name = os.getenv("MINIROGUE_LOG_LEVEL", "").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, default_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
