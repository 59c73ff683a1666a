import os
import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - "
    "<level>{message}</level>"
)


def setup_logger(*, json_logs: bool = False, level: str = "INFO", log_dir: str | Path = "logs") -> None:
    """Console sink at LOG_LEVEL (or ``level``) plus a rotating DEBUG file.

    Scan lines are tagged ``[SCAN]``, provider lines ``[HELIUS]``, ``[DEXSCREENER]``
    and so on, so a single grep follows one token through every fallback.
    """
    console_level = os.getenv("LOG_LEVEL", level).upper()

    console: dict = {"sink": sys.stdout, "level": console_level}
    if json_logs:
        console["serialize"] = True
    else:
        console.update(format=CONSOLE_FORMAT, colorize=True)

    logger.configure(handlers=[
        console,
        {
            "sink": str(Path(log_dir) / "vetting_{time:YYYY-MM-DD}.log"),
            "level": "DEBUG",
            "rotation": "20 MB",
            "retention": "7 days",
            "compression": "gz",
            "serialize": json_logs,
        },
    ])
