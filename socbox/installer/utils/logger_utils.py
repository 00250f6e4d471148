#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

import sys
from datetime import datetime
from typing import Optional

from colorama import init as ColoramaInit, Fore, Style

from socbox.installer.configs.constants.enums import ComponentOutcome

ColoramaInit()


class SkipReasons:
    """Centralized skip reason strings for consistent observability."""

    DISABLED = "disabled by {flag}"


class InstallerLogger:
    """A static logger for provisioning steps with color-coded console output.

    Every line reads ``[YYYY-mm-dd HH:MM:SS] (LEVEL) message``. When a run log
    file is set (live runs only) each line is also appended to it.
    """

    _console_output_enabled = True
    _main_log_file: Optional[str] = None
    _debug_enabled = False

    def __init__(self):
        """Constructor disabled - use static methods only."""
        raise NotImplementedError("InstallerLogger is entirely static. Use static methods directly.")

    @classmethod
    def set_console_output(cls, enabled: bool):
        cls._console_output_enabled = enabled

    @classmethod
    def set_log_file(cls, main_log_file: Optional[str]):
        """Set the run log file appended to alongside console output."""
        cls._main_log_file = main_log_file

    @classmethod
    def set_debug_enabled(cls, enabled: bool):
        """Enable or disable debug-level logging."""
        cls._debug_enabled = enabled

    @staticmethod
    def _log(label: str, color: str, message: str, file: object = None):
        """Log a message to the console and, when configured, the run log."""
        timestamp = f"[{InstallerLogger._timestamp()}]"

        if InstallerLogger._main_log_file:
            formatted_message = f"{timestamp} ({label}) {message}\n"
            try:
                with open(InstallerLogger._main_log_file, "a", encoding="utf-8") as f:
                    f.write(formatted_message)
            except OSError:
                # the run log is best-effort; console output still carries the line
                pass

        if InstallerLogger._console_output_enabled:
            print(
                f"{timestamp} {color}({label}){Style.RESET_ALL} {message}",
                file=file if file is not None else sys.stdout,
            )

    @staticmethod
    def start(label: str):
        """Log the start of a component."""
        InstallerLogger._log("STEP", Fore.BLUE, f"[{label}]")

    @staticmethod
    def end(
        label: str,
        status: ComponentOutcome,
        message: Optional[str] = None,
    ):
        """Log the end of a component."""
        log_message = f"[{label}]"
        if message:
            log_message += f": {message}"

        if status == ComponentOutcome.SUCCEEDED:
            InstallerLogger._log("INFO", Fore.GREEN, f"{log_message} succeeded")
        elif status == ComponentOutcome.SKIPPED:
            InstallerLogger._log("INFO", Fore.MAGENTA, f"{log_message} skipped")
        elif status == ComponentOutcome.FAILED_NON_FATAL:
            InstallerLogger._log("WARN", Fore.YELLOW, f"{log_message} completed with warnings", file=sys.stderr)
        else:
            InstallerLogger._log("ERROR", Fore.RED, f"{log_message} failed", file=sys.stderr)

    @staticmethod
    def _timestamp() -> str:
        return datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    @staticmethod
    def info(message: str):
        """Log a simple info message."""
        InstallerLogger._log("INFO", Fore.GREEN, message)

    @staticmethod
    def step(message: str):
        """Log a high-level step heading."""
        InstallerLogger._log("STEP", Fore.BLUE, message)

    @staticmethod
    def warning(message: str):
        """Log a simple warning message."""
        InstallerLogger._log("WARN", Fore.YELLOW, message, file=sys.stderr)

    @staticmethod
    def error(message: str):
        """Log a simple error message."""
        InstallerLogger._log("ERROR", Fore.RED, message, file=sys.stderr)

    @staticmethod
    def debug(message: str):
        """Log a debug message - only shown when debug is enabled."""
        if InstallerLogger._debug_enabled:
            InstallerLogger._log("DEBUG", Fore.CYAN, message)
