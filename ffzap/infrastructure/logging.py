import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from platformdirs import user_log_dir

from ffzap.domain.events import LogLineEmitted
from ffzap.domain.models import LogLevel
from ffzap.infrastructure.event_bus import EventBus

APP_NAME = "ffzap"
LOG_NAME_FORMAT = "%d-%m-%YT%H-%M-%S"
FAILED_PATHS_HEADER = "The following files were not processed due to the errors above:"


def default_log_dir() -> Path:
    """Platform-appropriate directory for ffzap run logs."""
    return Path(user_log_dir(APP_NAME, appauthor=False))


def resolve_log_path(
    log_path: Optional[Path] = None,
    log_dir: Optional[Path] = None,
    started_at: Optional[datetime] = None,
) -> Path:
    """Returns the log file for one run, named after its start timestamp."""
    if log_path:
        return Path(log_path)
    started_at = started_at or datetime.now()
    directory = Path(log_dir) if log_dir else default_log_dir()
    return directory / f"{started_at.strftime(LOG_NAME_FORMAT)}.log"


def setup_logging(
    log_path: Optional[Path] = None,
    debug: bool = False,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """
    Setup logging configuration for ffzap.

    Creates the log directory and opens the log file for this run (appending
    when an explicit log_path already exists).
    Returns configured logger instance.

    Args:
        log_path: Optional explicit log file (overrides log_dir)
        debug: If True, enable DEBUG level logging (tool command lines)
        log_dir: Optional directory for timestamped log files
    """
    log_file = resolve_log_path(log_path=log_path, log_dir=log_dir)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.FileHandler(log_file, encoding="utf-8")],
        force=True  # Override any existing configuration
    )

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized: {log_file} (debug={'ON' if debug else 'OFF'})")

    return logger


def _configured_log_file() -> Optional[Path]:
    for handler in logging.getLogger().handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


class RunLogger:
    """Per-run log sink shared by all workers.

    Every line goes to the log file exactly once; the file handler's lock
    serializes concurrent writers. Lines flagged for display are published as
    LogLineEmitted so the front-end prints them through the progress console.
    Display errors are logged and never raised to the worker.
    """

    def __init__(
        self,
        event_bus: EventBus,
        log_path: Optional[Path] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.event_bus = event_bus
        self.logger = logger or logging.getLogger("ffzap.run")
        self._log_path = Path(log_path) if log_path else _configured_log_file()

    @property
    def log_path(self) -> Optional[Path]:
        return self._log_path

    def get_log_path(self) -> str:
        return str(self._log_path) if self._log_path else ""

    def log_info(self, line: str, worker_id: int, display: bool = False):
        self._log(LogLevel.INFO, line, worker_id, display)

    def log_error(self, line: str, worker_id: int, display: bool = False):
        self._log(LogLevel.ERROR, line, worker_id, display)

    def append_failed_paths_to_log(self, paths: Sequence[str]):
        """Writes the trailing block of failed paths once the run is over."""
        if not paths:
            return
        lines: List[str] = [FAILED_PATHS_HEADER, *paths]
        self.logger.info("\n".join(lines))

    def _log(self, level: LogLevel, line: str, worker_id: int, display: bool):
        formatted = f"[{level.value} in THREAD {worker_id}] -- {line}"
        if level == LogLevel.ERROR:
            self.logger.error(formatted)
        else:
            self.logger.info(formatted)

        if display:
            # The file record is already written; a broken display must not stop the caller
            try:
                self.event_bus.publish(LogLineEmitted(level=level, worker_id=worker_id, line=formatted))
            except Exception as e:
                self.logger.warning(f"Could not display log line from THREAD {worker_id}: {e}")
