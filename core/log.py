################################################################################################

'''

Copyright 2025 Aaron Vose (avose@aaronvose.net)

Licensed under the LGPL v2.1; see the file 'LICENSE' for details.

This file holds the code for the info / debug logger.

'''

################################################################################################

import inspect
import threading
from datetime import datetime

################################################################################################

MAX_ENTRIES = 5000

def _now() -> str:
    return datetime.now().strftime("%m/%d/%Y %H:%M:%S")

class LogManager():
    __log = None
    __lock = threading.Lock()

    def __init__(self, verbosity: int = 0, max_entries: int = MAX_ENTRIES):
        with LogManager.__lock:
            if LogManager.__log is None:
                LogManager.__log = [(_now(), "Begin MenuPad Log")]
        self.verbosity = verbosity
        self.max_entries = max_entries

    def add(self, text: str):
        with LogManager.__lock:
            LogManager.__log.append((_now(), text))
            # Oldest entries go first once the cap is reached.
            overflow = len(LogManager.__log) - self.max_entries
            if overflow > 0:
                del LogManager.__log[:overflow]

    @staticmethod
    def _caller() -> str:
        # Two frames up: the caller of debug() / warn().
        stack = inspect.stack(0)
        if len(stack) > 2:
            return stack[2].filename.replace('\\', '/').split('/')[-1]
        return "unknown"

    def debug(self, text: str, level: int = 0):
        if self.verbosity >= level:
            self.add(f"[{self._caller()}] {text}")

    def warn(self, text: str):
        """Warnings are recorded regardless of verbosity."""
        self.add(f"[{self._caller()}] WARNING: {text}")

    def get(self, index: int = None):
        with LogManager.__lock:
            if index is not None:
                return LogManager.__log[index]
            return LogManager.__log.copy()

    def last(self):
        with LogManager.__lock:
            return LogManager.__log[-1] if LogManager.__log else None

    def count(self):
        with LogManager.__lock:
            return len(LogManager.__log)

    def set_verbosity(self, verbosity: int = 0):
        self.verbosity = verbosity

    def clear(self):
        """Clear all log entries."""
        with LogManager.__lock:
            LogManager.__log.clear()
            LogManager.__log.append((_now(), "Log cleared"))

    def write_to_file(self, filepath: str):
        """Write all log entries to a file."""
        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                for timestamp, message in self.get():
                    f.write(f"[{timestamp}] {message}\n")
            self.add(f"Log written to file: {filepath}")
        except OSError as e:
            self.add(f"Failed to write log to file '{filepath}': {e}")

################################################################################################

Log = LogManager()

################################################################################################
