# logger_utils.py - logging messages and timing metrics, with timestamps

import os
import sys
import time
from datetime import datetime
from typing import Optional

from colorama import Fore, Style, init

init()

LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


class Log:
    """
    Lightweight process-wide logger.
    Every entry is written as: [YYYY-MM-DD HH:MM:SS] LEVEL   | message
    - appended to the log file once configure(path=...) has been called
    - echoed to stderr when at or above the console level
    """

    COLORS = {
        "DEBUG": Style.DIM,
        "INFO": Fore.BLUE,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
    }

    path: Optional[str] = None
    console_level: str = "WARNING"
    use_color: bool = True

    @classmethod
    def configure(cls, path: Optional[str] = None, console_level: str = "WARNING", use_color: bool = True):
        if console_level not in LEVELS:
            raise ValueError(f"unknown log level: {console_level}")
        if path:
            folder = os.path.dirname(path)
            if folder:
                os.makedirs(folder, exist_ok=True)
        cls.path = path
        cls.console_level = console_level
        cls.use_color = use_color

    @classmethod
    def write(cls, level: str, msg: str) -> None:
        ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        line = f"[{ts}] {level:<7} | {msg}"

        if cls.path:
            with open(cls.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")

        if LEVELS.get(level, 0) >= LEVELS[cls.console_level]:
            if cls.use_color and level in cls.COLORS:
                print(f"{cls.COLORS[level]}{line}{Style.RESET_ALL}", file=sys.stderr)
            else:
                print(line, file=sys.stderr)

    # public logging methods
    @classmethod
    def debug(cls, msg: str) -> None:
        cls.write("DEBUG", msg)

    @classmethod
    def info(cls, msg: str) -> None:
        cls.write("INFO", msg)

    @classmethod
    def warning(cls, msg: str) -> None:
        cls.write("WARNING", msg)

    @classmethod
    def error(cls, msg: str) -> None:
        cls.write("ERROR", msg)

    @classmethod
    def metric(cls, tag: str, value, unit: str = "") -> None:
        """
        Record a metric line (timing, counts).
        Example: dataset load done: 0.012s
        """
        cls.write("INFO", f"{tag}: {value}{unit}")

    @staticmethod
    def time_block(label: str) -> "_Timer":
        """
        Measure a code block:
            with Log.time_block("dataset load"):
                load()
        Logs how long the block took once it exits.
        """
        return _Timer(label)


class _Timer:
    """Context manager used by Log.time_block."""

    def __init__(self, label: str):
        self.label = label
        self.start = time.perf_counter()
        self.elapsed = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self.start
        Log.metric(f"{self.label} done", round(self.elapsed, 3), "s")
