"""
veloxio Logger Module

Logging for the VFS subsystems:
- Structured logging with contextual information
- Subsystem-specific loggers ('provider', 'archive', ...)
- Console and optional file output
- In-memory buffer of recent records for diagnostics
- Thread-safe operation

Author: YSNRFD
Version: 1.0.0
"""

import logging
import sys
import threading
from collections import deque
from enum import IntEnum
from pathlib import Path
from typing import Optional, Any, Deque, List


class LogLevel(IntEnum):
    """Log level enumeration with numeric values for comparison."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @classmethod
    def from_name(cls, name: str) -> 'LogLevel':
        """Look up a level by its (case-insensitive) name."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {name}") from None


class LogFormatter(logging.Formatter):
    """
    Log formatter for veloxio.

    Produces lines of the form::

        [2024-01-01 12:00:00.000] ERROR    [provider] Failed to mount archive {path=base.pak error_code=6103 kind=duplicate_key}

    Context entries whose value is None are left out, so a mount
    failure only shows the fields its exception actually carried.
    """

    FORMAT = '[%(asctime)s.%(msecs)03d] %(levelname)-8s [%(subsystem)s] %(message)s'
    DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__(
            self.FORMAT,
            datefmt=self.DATE_FORMAT,
            defaults={'subsystem': 'vfs'}
        )
        self.use_colors = use_colors and getattr(sys.stdout, 'isatty', lambda: False)()

    @staticmethod
    def format_context(context: Optional[dict[str, Any]]) -> str:
        """Render context as ``{k=v ...}``, or an empty string."""
        fields = [f"{k}={v}" for k, v in (context or {}).items() if v is not None]
        return f"{{{' '.join(fields)}}}" if fields else ""

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        context = self.format_context(getattr(record, 'context', None))
        if context:
            line = f"{line} {context}"
        if self.use_colors and record.levelname in self.COLORS:
            line = f"{self.COLORS[record.levelname]}{line}{self.RESET}"
        return line


class LogBuffer(logging.Handler):
    """
    Handler keeping the most recent records in memory.

    Each entry holds its own copy of the record context, so callers can
    look up what happened to one logical path or archive after the fact.
    """

    def __init__(self, max_entries: int = 10000):
        super().__init__()
        self._entries: Deque[dict[str, Any]] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    @property
    def max_entries(self) -> int:
        return self._entries.maxlen

    def emit(self, record: logging.LogRecord) -> None:
        entry = {
            'timestamp': record.created,
            'level': record.levelname,
            'message': record.getMessage(),
            'subsystem': getattr(record, 'subsystem', None),
            'context': dict(getattr(record, 'context', None) or {}),
        }
        with self._lock:
            self._entries.append(entry)

    def get_logs(
        self,
        level: Optional[str] = None,
        subsystem: Optional[str] = None,
        path: Optional[str] = None,
        limit: int = 100
    ) -> List[dict[str, Any]]:
        """
        Retrieve buffered entries, oldest first.

        Args:
            level: Only entries at exactly this level name
            subsystem: Only entries from this subsystem
            path: Only entries whose context ``path`` equals this
            limit: Maximum number of (most recent) entries returned
        """
        with self._lock:
            logs = list(self._entries)

        if level:
            logs = [e for e in logs if e['level'] == level]
        if subsystem:
            logs = [e for e in logs if e['subsystem'] == subsystem]
        if path is not None:
            logs = [e for e in logs if e['context'].get('path') == path]

        return logs[-limit:] if limit > 0 else []

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class Logger:
    """
    Main logging class for veloxio.

    One instance per subsystem name, backed by the stdlib logger
    ``veloxio.<subsystem>``. The in-memory buffer is attached on first
    use so diagnostics are recorded even if ``initialize`` was never
    called by the host application.

    Example:
        >>> log = Logger('provider')
        >>> log.info("Mounted archive", context={'path': 'assets.pak'})
    """

    _instances: dict[str, 'Logger'] = {}
    _lock = threading.Lock()
    _buffer: Optional[LogBuffer] = None
    _handlers: List[logging.Handler] = []

    def __new__(cls, subsystem: str = 'vfs') -> 'Logger':
        """Get or create a logger for a subsystem."""
        with cls._lock:
            if cls._buffer is None:
                cls._buffer = LogBuffer()
                cls._buffer.setLevel(LogLevel.DEBUG)
                root_logger = logging.getLogger('veloxio')
                root_logger.addHandler(cls._buffer)
                if root_logger.level == logging.NOTSET:
                    root_logger.setLevel(LogLevel.INFO)
            if subsystem not in cls._instances:
                instance = super().__new__(cls)
                instance._subsystem = subsystem
                instance._logger = logging.getLogger(f'veloxio.{subsystem}')
                cls._instances[subsystem] = instance
            return cls._instances[subsystem]

    @property
    def subsystem(self) -> str:
        return self._subsystem

    @classmethod
    def initialize(
        cls,
        level: int = LogLevel.INFO,
        log_file: Optional[str] = None,
        console_output: bool = True,
        use_colors: bool = True
    ) -> None:
        """
        Configure output handlers for all veloxio loggers.

        Calling it again replaces the handlers installed by the
        previous call.

        Args:
            level: Minimum log level to capture
            log_file: Optional file path for log output
            console_output: Whether to write to stdout
            use_colors: Whether to use ANSI colors in console output
        """
        Logger('vfs')
        with cls._lock:
            root_logger = logging.getLogger('veloxio')
            for handler in cls._handlers:
                root_logger.removeHandler(handler)
                handler.close()
            cls._handlers = []

            root_logger.setLevel(level)

            if console_output:
                console_handler = logging.StreamHandler(sys.stdout)
                console_handler.setLevel(level)
                console_handler.setFormatter(LogFormatter(use_colors=use_colors))
                cls._handlers.append(console_handler)

            if log_file:
                file_path = Path(log_file)
                file_path.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_file)
                file_handler.setLevel(level)
                file_handler.setFormatter(LogFormatter(use_colors=False))
                cls._handlers.append(file_handler)

            for handler in cls._handlers:
                root_logger.addHandler(handler)

    @classmethod
    def get_buffered_logs(
        cls,
        level: Optional[str] = None,
        subsystem: Optional[str] = None,
        path: Optional[str] = None,
        limit: int = 100
    ) -> List[dict[str, Any]]:
        """Get records from the in-memory log buffer (see ``LogBuffer.get_logs``)."""
        if cls._buffer is None:
            return []
        return cls._buffer.get_logs(level=level, subsystem=subsystem, path=path, limit=limit)

    @classmethod
    def clear_buffered_logs(cls) -> None:
        if cls._buffer is not None:
            cls._buffer.clear()

    def _log(
        self,
        level: int,
        message: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        """Internal logging method."""
        extra = {
            'subsystem': self._subsystem,
            'context': context or {},
        }
        self._logger.log(level, message, extra=extra)

    def debug(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        """Log a debug message."""
        self._log(LogLevel.DEBUG, message, context)

    def info(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        """Log an info message."""
        self._log(LogLevel.INFO, message, context)

    def warning(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        """Log a warning message."""
        self._log(LogLevel.WARNING, message, context)

    def error(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        """Log an error message."""
        self._log(LogLevel.ERROR, message, context)


def get_logger(subsystem: str) -> Logger:
    """
    Get a logger for the specified subsystem.

    Args:
        subsystem: Name of the subsystem (e.g., 'provider', 'archive')

    Returns:
        Logger instance for the subsystem
    """
    return Logger(subsystem)
