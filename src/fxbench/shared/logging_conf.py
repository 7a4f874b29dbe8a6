# src/fxbench/shared/logging_conf.py
"""
Logging Configuration - Logging Setup for the Service Entry Point

Library modules only create module loggers (logging.getLogger(__name__)).
Handlers, levels and formats are installed once by the composition root
through setup_logging().

Files that USE this module:
- fxbench.app (setup_logging at startup)

Files that this module USES:
- None (pure configuration module)
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Union[int, str]) -> int:
    """Accept either a logging constant or a level name such as "debug"."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    log_dir: Optional[Union[str, Path]] = None,
    log_stdout: Optional[bool] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure application-wide logging.

    Can output to stdout, a rotating file, or both.

    Args:
        level: Logging level as constant or name (default: INFO)
        log_file: Optional path to log file (enables file logging)
        log_dir: Optional directory for log files; the file is named fxbench.log
        log_stdout: Log to stdout; None reads FXBENCH_LOG_STDOUT (default true)
        max_bytes: Maximum size per log file before rotation (default: 10MB)
        backup_count: Number of rotated files to keep (default: 5)
    """
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    handlers: List[logging.Handler] = []

    if log_stdout is None:
        log_stdout = os.environ.get("FXBENCH_LOG_STDOUT", "true").lower() == "true"

    if log_stdout:
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setFormatter(formatter)
        handlers.append(stdout_handler)

    log_file_path: Optional[Path] = None
    if log_dir:
        log_file_path = Path(log_dir) / "fxbench.log"
    elif log_file:
        log_file_path = Path(log_file)

    if log_file_path is not None:
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Never leave the process without a handler
    if not handlers:
        fallback = logging.StreamHandler(sys.stderr)
        fallback.setFormatter(formatter)
        handlers.append(fallback)

    logging.basicConfig(
        level=_resolve_level(level),
        handlers=handlers,
        force=True,
    )

    logger = logging.getLogger(__name__)
    if log_file_path is not None:
        logger.info("Logging configured: file=%s, level=%s", log_file_path, level)
    else:
        logger.info("Logging configured: stdout, level=%s", level)
