import logging
import sys
import time
from pathlib import Path
from typing import IO, Iterable, Optional
from datetime import datetime

# Default log directory
DEFAULT_LOG_DIR = Path("var/log")

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

logger = logging.getLogger(__name__)


def get_log_file_path(
        module_name: str,
        log_dir: Optional[Path] = None,
        include_timestamp: bool = True
) -> Path:
    """
    Builds a log file path for a logger name, creating the directory if needed.

    Parameters
    ----------
    module_name : str
        The logger name (e.g. "rna_mfe_fold.folding.recurrences").
    log_dir : Optional[Path], optional
        Target directory. Defaults to `DEFAULT_LOG_DIR`.
    include_timestamp : bool, optional
        Append a `%Y%m%d_%H%M%S` stamp so repeated runs do not overwrite each other.

    Returns
    -------
    Path
        The log file path.
    """
    if log_dir is None:
        log_dir = DEFAULT_LOG_DIR

    log_dir.mkdir(parents=True, exist_ok=True)

    safe_name = module_name.replace(".", "_")

    if include_timestamp:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{safe_name}_{timestamp}.log"
    else:
        filename = f"{safe_name}.log"

    return log_dir / filename


def setup_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = True,
    console_level: Optional[int] = None,
    file_level: Optional[int] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Configures and returns a logger with a console handler and an optional file handler.

    Existing handlers on the logger are cleared first so repeated calls do not
    duplicate output.

    Parameters
    ----------
    name : str
        The logger name, typically `__name__`.
    level : int, optional
        Base level for the logger and its handlers, by default `logging.INFO`.
    log_file : Optional[str], optional
        Explicit log file path. Overrides the generated path.
    log_dir : Optional[Path], optional
        Directory for the generated log file. Ignored when `log_file` is set.
    enable_file_logging : bool, optional
        Create a timestamped log file when `log_file` is not given.
    console_level, file_level : Optional[int], optional
        Per-handler level overrides.
    stream : Optional[IO[str]], optional
        Console stream, by default `sys.stdout`.

    Returns
    -------
    logging.Logger
        The configured logger.
    """
    configured = logging.getLogger(name)
    configured.setLevel(level)
    if configured.hasHandlers():
        configured.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # A plain stream handler; `logging_redirect_tqdm` swaps it out while a DP progress bar is live.
    console_handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(console_level if console_level is not None else level)
    configured.addHandler(console_handler)

    file_handler = None
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode='a')
    elif enable_file_logging:
        log_path = get_log_file_path(name, log_dir=log_dir, include_timestamp=True)
        file_handler = logging.FileHandler(log_path, mode='a')
        configured.info(f"Logging to file: {log_path}")

    if file_handler:
        file_handler.setFormatter(formatter)
        file_handler.setLevel(file_level if file_level is not None else level)
        configured.addHandler(file_handler)

    return configured


def setup_loggers(
    names: Iterable[str],
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    enable_file_logging: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """Applies `setup_logger` with the same settings to several logger names."""
    for name in names:
        setup_logger(
            name,
            level=level,
            log_file=log_file,
            enable_file_logging=enable_file_logging,
            stream=stream,
        )


def cleanup_old_logs(log_dir: Optional[Path] = None, days_to_keep: int = 7) -> int:
    """
    Removes `*.log` files older than `days_to_keep` days.

    Returns
    -------
    int
        The number of files removed.
    """
    if log_dir is None:
        log_dir = DEFAULT_LOG_DIR

    if not log_dir.exists():
        return 0

    cutoff_time = time.time() - (days_to_keep * 86400)

    removed = 0
    for log_file in log_dir.glob("*.log"):
        if log_file.stat().st_mtime < cutoff_time:
            log_file.unlink()
            logger.info(f"Removed old log: {log_file}")
            removed += 1
    return removed
