# logger_utils.py - logging messages and timing metrics with timestamps

import os
import sys
import time
from datetime import datetime
from typing import Optional

LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


class Log:
    """Lightweight logger writing to the console and, optionally, a log file."""
    COLORS = {
        "DEBUG": "\033[90m",   # gray
        "INFO": "\033[94m",    # blue
        "WARNING": "\033[93m", # yellow
        "ERROR": "\033[91m",   # red
        "RESET": "\033[0m",
    }

    def __init__(self, path: Optional[str] = None, use_color: bool = True, level: str = "INFO"):
        self.path = path
        self.use_color = use_color
        self.set_level(level)

    def set_level(self, level: str) -> None:
        level = level.upper()
        if level not in LEVELS:
            raise ValueError(f"unknown log level: {level}")
        self.level = level

    def enabled(self, level: str) -> bool:
        return LEVELS[level] >= LEVELS[self.level]

    def write(self, level: str, msg: str):
        """
        Emit one log line if `level` passes the threshold.
        Each entry is written as: [YYYY-MM-DD HH:MM:SS] LEVEL   | message
        """
        if not self.enabled(level):
            return
        ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        line = f"[{ts}] {level:<7} | {msg}"

        if self.path:
            self._append(self.path, line)

        # log lines go to stderr, the console output belongs to the cli
        if self.use_color and level in self.COLORS:
            print(f"{self.COLORS[level]}{line}{self.COLORS['RESET']}", file=sys.stderr)
        else:
            print(line, file=sys.stderr)

    @staticmethod
    def _append(path: str, line: str) -> None:
        folder = os.path.dirname(path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(line + "\n")

    # Public logging methods
    def debug(self, msg: str):
        self.write("DEBUG", msg)

    def info(self, msg: str):
        self.write("INFO", msg)

    def warning(self, msg: str):
        self.write("WARNING", msg)

    def error(self, msg: str):
        self.write("ERROR", msg)

    def metric(self, tag, value, unit=""):
        """
        Record a metric (timing, counts) at DEBUG level.
        Example: [12:45:02] generate latency: 0.123s
        """
        self.debug(f"{tag}: {value}{unit}")

    def time_block(self, label):
        """
        Helper for measuring execution time of a code block.
        To use:
            with log.time_block("replay"):
                do_some_work()
        The duration is logged as a metric when the block exits.
        """
        return _Timer(self, label)


class _Timer:
    """Context manager used internally to measure time for a code block."""
    def __init__(self, logger: Log, label):
        self.logger = logger
        self.label = label
        self.start = time.perf_counter()
        self.elapsed = 0.0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self.start
        self.logger.metric(f"{self.label} done", round(self.elapsed, 3), "s")


# shared package logger
log = Log()
