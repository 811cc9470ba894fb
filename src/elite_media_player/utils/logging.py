"""Logging setup for the player and its console formatter."""

from __future__ import annotations

import json
import logging
import logging.config
import os
import sys
from pathlib import Path
from typing import TextIO

LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[3] / "logging_config.json"
FALLBACK_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FALLBACK_DATEFMT = "%Y-%m-%d %H:%M:%S"
PACKAGE_PREFIX = "elite_media_player."


class ColoredFormatter(logging.Formatter):
    """Console formatter for the player's logs.

    Wraps the levelname in an ANSI color and drops the ``elite_media_player.``
    prefix from logger names so session lines stay short. Colors are off when
    ``NO_COLOR`` is set or the target stream is not a TTY; ``use_color`` forces
    either way.
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[2m",        # dim: position ticks and transitions
        logging.INFO: "\033[32m",        # green
        logging.WARNING: "\033[33m",     # yellow: load failures, unknown tracks
        logging.ERROR: "\033[31m",       # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        *,
        stream: TextIO | None = None,
        use_color: bool | None = None,
        short_names: bool = True,
    ) -> None:
        super().__init__(fmt, datefmt, style)
        self._stream = stream
        self._force_color = use_color
        self._short_names = short_names

    def _use_color(self) -> bool:
        if self._force_color is not None:
            return self._force_color
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = self._stream or sys.stdout
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        color = self._use_color()
        shorten = self._short_names and record.name.startswith(PACKAGE_PREFIX)
        if color or shorten:
            record = logging.makeLogRecord(record.__dict__)
        if shorten:
            record.name = record.name.removeprefix(PACKAGE_PREFIX)
        if color:
            level_color = self.COLORS.get(record.levelno, "")
            record.levelname = f"{level_color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(log_level: str = "INFO", config_path: Path | None = None) -> None:
    """Configure logging from the JSON dictConfig file, falling back to basicConfig."""
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)
    path = config_path or LOGGING_CONFIG_PATH

    try:
        with open(path) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.basicConfig(
            level=resolved_level,
            format=FALLBACK_FORMAT,
            datefmt=FALLBACK_DATEFMT,
        )
        logging.getLogger(__name__).warning(
            "Could not load %s, falling back to basic config", path
        )

    logging.getLogger().setLevel(resolved_level)
