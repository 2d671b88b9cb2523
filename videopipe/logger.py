"""Levelled console logging with optional buffered, daily log files."""

from __future__ import annotations

import atexit
import os
import sys
import threading
import time
from enum import IntEnum

from .fsutil import exists, file_name, open_mkdirs
from .timeutil import date_now, time_now, timestamp_now

_BUFFER_LIMIT = 2047


class LogLevel(IntEnum):
    """Log levels; a message is shown when its level is not above the current one."""

    FATAL = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    VERBOSE = 4
    DEBUG = 5


_LEVEL_NAMES = {
    LogLevel.DEBUG: "debug",
    LogLevel.VERBOSE: "verbo",
    LogLevel.INFO: "info",
    LogLevel.WARNING: "warn",
    LogLevel.ERROR: "error",
    LogLevel.FATAL: "fatal",
}

_LEVEL_COLORS = {
    LogLevel.FATAL: "31",
    LogLevel.ERROR: "31",
    LogLevel.WARNING: "33",
    LogLevel.INFO: "35",
    LogLevel.VERBOSE: "34",
}


class FatalError(RuntimeError):
    """Raised after a fatal message has been logged."""


def level_string(level: int) -> str:
    """Return the short name of a log level."""
    try:
        return _LEVEL_NAMES[LogLevel(level)]
    except ValueError:
        return "unknow"


def remove_color_text(text: str) -> str:
    """Strip ``ESC[...m`` colour sequences from ``text``."""
    chars = text
    index = 0
    while index < len(chars):
        if chars[index] == "\x1b" and index + 1 < len(chars) and chars[index + 1] == "[":
            end = chars.find("m", index + 2)
            if end != -1:
                chars = chars[:index] + chars[end + 1:]
        index += 1
    return chars


class Logger:
    """Buffers lines and appends them once a second to ``<directory><date>.txt``."""

    def __init__(self, directory: str = "", level: LogLevel = LogLevel.INFO) -> None:
        self.directory = ""
        if directory:
            self.set_save_directory(directory)
        self.level = LogLevel(level)
        self._lock = threading.Lock()
        self._file_lock = threading.Lock()
        self._cache: list[str] = []
        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._shutdown = False

    def write(self, line: str) -> None:
        """Queue a line for the log file, starting the flush thread on first use."""
        with self._lock:
            if self._shutdown:
                return
            if not self._running.is_set():
                if self._thread is not None:
                    return
                self._running.set()
                self._thread = threading.Thread(target=self._flush_job, daemon=True)
                self._thread.start()
            self._cache.append(line)

    def flush(self) -> None:
        """Write all queued lines to today's log file."""
        with self._file_lock:
            with self._lock:
                local, self._cache = self._cache, []
            if not local or not self.directory:
                return
            path = f"{self.directory}{date_now()}.txt"
            mode = "a" if exists(path) else "w"
            try:
                with open_mkdirs(path, mode) as handle:
                    handle.writelines(f"{line}\n" for line in local)
            except OSError:
                pass

    def _flush_job(self) -> None:
        tick = timestamp_now()
        while self._running.is_set():
            if timestamp_now() - tick < 1000:
                time.sleep(0.1)
                continue
            tick = timestamp_now()
            self.flush()
        self.flush()

    def set_save_directory(self, path: str) -> None:
        """Set the directory for log files; an empty path means the current one."""
        directory = path or "."
        endings = "/\\" if os.name == "nt" else "/"
        if directory[-1] not in endings:
            directory += "/"
        self.directory = directory

    def close(self) -> None:
        """Stop accepting lines, flush what is queued and stop the flush thread."""
        with self._lock:
            if self._shutdown:
                return
            self._shutdown = True
        if not self._running.is_set():
            return
        self._running.clear()
        if self._thread is not None:
            self._thread.join()
            self._thread = None


_logger = Logger()
atexit.register(_logger.close)


def set_logger_save_directory(path: str) -> None:
    """Enable writing log files into ``path``."""
    _logger.set_save_directory(path)


def set_log_level(level: LogLevel) -> None:
    """Set the most verbose level that is still shown."""
    _logger.level = LogLevel(level)


def get_log_level() -> LogLevel:
    """Return the current log level."""
    return _logger.level


def destroy_logger() -> None:
    """Flush and close the shared logger."""
    _logger.close()


def log(level: LogLevel, message: str, file: str | None = None,
        line: int | None = None) -> str | None:
    """Print a formatted message and return it, or None if the level filters it out.

    A fatal message raises FatalError after it has been written.
    """
    level = LogLevel(level)
    if level > _logger.level:
        return None

    if file is None or line is None:
        frame = sys._getframe(1)
        if file is None:
            file = frame.f_code.co_filename
        if line is None:
            line = frame.f_lineno

    name = level_string(level)
    color = _LEVEL_COLORS.get(level) if os.name != "nt" else None
    tag = f"[\033[{color}m{name}\033[0m]" if color else f"[{name}]"
    text = f"[{time_now()}]{tag}[{file_name(file, True)}:{line}]:{message}"[:_BUFFER_LIMIT]

    stream = sys.stderr if level <= LogLevel.ERROR else sys.stdout
    print(text, file=stream)

    if _logger.directory:
        _logger.write(remove_color_text(text) if os.name != "nt" else text)
        if level == LogLevel.FATAL:
            _logger.flush()

    if level == LogLevel.FATAL:
        sys.stdout.flush()
        raise FatalError(message)
    return text