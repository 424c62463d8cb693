"""
Logging for the chat session service.

The "chatsession" logger records the session lifecycle (created, deleted,
removed for inactivity), every received turn with its effective temperature
and a prompt preview, backend failures, failed expiry sweeps and one line per
HTTP request. Those records go to the console and to a daily file; records
from other libraries (uvicorn, httpx) reach the console only.
"""

import datetime
import logging
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .settings import settings


APP_LOGGER_NAME = "chatsession"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"

_LOGGING_CONFIGURED = False


def is_app_record(record: logging.LogRecord) -> bool:
    return record.name == APP_LOGGER_NAME or record.name.startswith(APP_LOGGER_NAME + ".")


class LocalTimezoneFormatter(logging.Formatter):
    """
    Logging formatter that forces timestamps into a configured timezone.
    Defaults to the system local timezone when LOG_TIMEZONE is not set
    or when the provided timezone is invalid.
    """

    def __init__(self, *args, timezone_name: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._tzinfo = self._resolve_tzinfo(timezone_name)

    @staticmethod
    def _resolve_tzinfo(timezone_name: str | None) -> datetime.tzinfo:
        if timezone_name:
            try:
                return ZoneInfo(timezone_name)
            except ZoneInfoNotFoundError:
                pass
        return datetime.datetime.now().astimezone().tzinfo or datetime.timezone.utc

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        dt = datetime.datetime.fromtimestamp(record.created, tz=self._tzinfo)
        if datefmt:
            return dt.strftime(datefmt)
        return dt.isoformat(timespec="milliseconds")


class DailyFileHandler(logging.Handler):
    """
    Daily file handler writing each day's logs into
    <log_dir>/<prefix>-YYYY-MM-DD.log, keeping at most backup_count files.
    """

    def __init__(
        self,
        log_dir: Path,
        filename_prefix: str = "app",
        backup_count: int = 7,
        encoding: str = "utf-8",
    ) -> None:
        super().__init__()
        self.log_dir = log_dir
        self.filename_prefix = filename_prefix
        self.backup_count = backup_count
        self.encoding = encoding
        self.terminator = "\n"
        self._current_date: datetime.date | None = None
        self._stream = None
        self._ensure_stream()

    def _file_path_for_date(self, day: datetime.date) -> Path:
        return self.log_dir / f"{self.filename_prefix}-{day.isoformat()}.log"

    def _cleanup_old_files(self) -> None:
        if self.backup_count <= 0:
            return
        prefix = f"{self.filename_prefix}-"
        candidates = sorted(
            p
            for p in self.log_dir.iterdir()
            if p.is_file() and p.name.startswith(prefix) and p.suffix == ".log"
        )
        if len(candidates) <= self.backup_count:
            return
        for old in candidates[: len(candidates) - self.backup_count]:
            try:
                old.unlink()
            except OSError:
                logging.getLogger(__name__).debug("Could not remove old log file %s", old)

    def _ensure_stream(self) -> None:
        today = datetime.date.today()
        if self._current_date == today and self._stream:
            return

        self._current_date = today
        if self._stream:
            self._stream.close()
            self._stream = None

        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._stream = open(self._file_path_for_date(today), "a", encoding=self.encoding)
        self._cleanup_old_files()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            self._ensure_stream()
            if self._stream is None:
                return
            self._stream.write(msg + self.terminator)
            self._stream.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        try:
            if self._stream:
                self._stream.close()
                self._stream = None
        finally:
            super().close()


def setup_logging(log_dir: Path | str = "logs") -> None:
    """
    Configure application logging once per process.

    The daily file lives under ``log_dir``.
    """
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    root_logger = logging.getLogger()
    app_logger = logging.getLogger(APP_LOGGER_NAME)

    level_value = getattr(logging, str(settings.log_level).upper(), logging.INFO)

    formatter = LocalTimezoneFormatter(
        LOG_FORMAT,
        timezone_name=settings.log_timezone,
    )

    file_handler = DailyFileHandler(log_dir=Path(log_dir), filename_prefix="app")
    file_handler.setFormatter(formatter)
    file_handler.addFilter(is_app_record)
    app_logger.setLevel(level_value)
    app_logger.propagate = True
    app_logger.addHandler(file_handler)

    root_logger.setLevel(level_value)
    has_console = any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in root_logger.handlers
    )
    if not has_console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    _LOGGING_CONFIGURED = True


logger = logging.getLogger(APP_LOGGER_NAME)
