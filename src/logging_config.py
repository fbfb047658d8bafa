import logging
import logging.handlers
from pathlib import Path
from typing import Optional

LOG_DIR = Path(__file__).parent.parent / "logs"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    tool: str = "draft_coordinator",
) -> Path:
    """Configure root logging for one draft tool process.

    The autopick poller and the pool loader each write to their own
    rotating file (``logs/<tool>.log``) so a long-running poller does not
    interleave with one-off loads. Console output follows ``log_level``;
    the file always keeps DEBUG, which includes the poller's no-op checks.

    Returns:
        Path of the log file in use.
    """
    log_dir = Path(log_dir) if log_dir else LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{tool}.log"

    root_logger = logging.getLogger()
    if root_logger.handlers:
        return log_file  # Already configured by this process

    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.getLogger(__name__).info(
        "%s logging to %s (console level %s)", tool, log_file, log_level.upper()
    )
    return log_file
