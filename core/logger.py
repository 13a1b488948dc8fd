import logging
import os
import sys
from typing import Optional, Union


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

COLOR_MAP = {
    "CHAIN": "36",      # cyan
    "SEMAPHORE": "35",  # magenta
    "REGISTRY": "33",   # yellow
    "SDK": "34",        # blue
    "CLAIM": "32",      # green
    "ZK": "34",
}

LEVEL_COLORS = {
    logging.WARNING: "33",
    logging.ERROR: "31",
    logging.CRITICAL: "1;31",
}


def colorize(msg: str, levelno: int = logging.INFO) -> str:
    if levelno in LEVEL_COLORS:
        return f"\033[{LEVEL_COLORS[levelno]}m{msg}\033[0m"
    for key, color in COLOR_MAP.items():
        if f"[{key}]" in msg:
            return f"\033[{color}m{msg}\033[0m"
    return msg


class TagColorFormatter(logging.Formatter):
    """Formatter that colors records by their [TAG] prefix or severity."""

    def __init__(self, fmt: str = LOG_FORMAT, use_color: bool = True):
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        if not self.use_color:
            return msg
        return colorize(msg, record.levelno)


def setup_logging(level: Optional[Union[int, str]] = None, stream=None) -> logging.Logger:
    """
    Configure the root logger for scripts.

    Args:
        level: Level name or number (default: LOG_LEVEL env, else INFO)
        stream: Output stream (default: stderr)
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    stream = stream or sys.stderr
    handler = logging.StreamHandler(stream)
    handler.setFormatter(TagColorFormatter(use_color=hasattr(stream, "isatty") and stream.isatty()))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    # web3 request logging is noisy at DEBUG
    logging.getLogger("web3").setLevel(max(level, logging.INFO))
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return root
