# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2024-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
This module contains helper functions related to logging.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import sys
import logging
import traceback
from typing import NoReturn, Any, IO, cast
import colorama

# Log levels.
#   * INFO: No prefixes, just the message. Goes to the info stream (standard output by default).
#   * DEBUG, WARNING, ERROR, CRITICAL: Have the prefix. Go to the error stream.
#   * ERRINFO: An ERROR message, but without a prefix.
INFO = logging.INFO
DEBUG = logging.DEBUG
WARNING = logging.WARNING
ERROR = logging.ERROR
ERRINFO = logging.ERROR + 1
CRITICAL = logging.CRITICAL

# Name of the main logger instance. Other project loggers are supposed to be children of this one.
MAIN_LOGGER_NAME = "main"

# The default prefix for debug messages.
_DEFAULT_DBG_PREFIX = "[%(created)f] [%(asctime)s] [%(module)s,%(lineno)d]"

class _MyFormatter(logging.Formatter):
    """
    A custom formatter for logging messages. Provides different message formats for different log
    levels.
    """

    def __init__(self, prefix: str | None = None, colors: dict[int, str] | None = None):
        """
        Initialize the custom logging formatter.

        Args:
            prefix: Prefix for non-info and non-debug messages. Info messages go without any
                    formatting. By default, the prefix is just the log level name.
            colors: A dictionary containing colorama color codes for the prefixes.
        """

        logging.Formatter.__init__(self, "%(levelname)s: %(message)s", "%H:%M:%S")

        if not colors:
            colors = {}

        self._colors = colors
        self._myfmt: dict[int, str] = {}

        def _start(level: int) -> str:
            """Return the "start color output" code for the given log level."""
            return self._colors.get(level, "")

        def _end(level: int) -> str:
            """Return the "end color output" code for the given log level."""

            if level in self._colors:
                return str(colorama.Style.RESET_ALL)
            return ""

        if prefix:
            prefix += ": "
        else:
            prefix = ""

        for lvl, pfx in ((WARNING, "warning"), (ERROR, "error"), (CRITICAL, "critical error")):
            if not prefix:
                pfx = pfx.title()
            self._myfmt[lvl] = _start(lvl) + prefix + pfx + _end(lvl) + ": %(message)s"

        lvl = DEBUG
        self._myfmt[lvl] = _DEFAULT_DBG_PREFIX + ": %(message)s"
        self._myfmt[lvl] = self._myfmt[lvl].replace("[", "[" + _start(lvl))
        self._myfmt[lvl] = self._myfmt[lvl].replace("]", _end(lvl) + "]")

        # Leave the info messages without any formatting.
        self._myfmt[ERRINFO] = self._myfmt[INFO] = "%(message)s"

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record. Prefix debugging messages with a timestamp and keep info messages
        unchanged.

        Args:
            record: The log record to format.

        Returns:
            str: The formatted log record.
        """

        # pylint: disable=protected-access
        self._style._fmt = self._myfmt[record.levelno]
        return logging.Formatter.format(self, record)

class _MyFilter(logging.Filter):
    """A custom filter which allows only certain log levels to go through."""

    def __init__(self, let_go: list[int]):
        """
        Initialize the logging filter.

        Args:
            let_go: A list of logging levels to let go through the filter.
        """

        logging.Filter.__init__(self)
        self._let_go = let_go

    def filter(self, record: logging.LogRecord) -> bool:
        """Let only the log levels specified in 'let_go' through."""

        return record.levelno in self._let_go

class _MyStreamHandler(logging.StreamHandler):
    """
    A stream handler which, unless given a stream, writes to the 'sys' module stream that is
    current at the time a message is emitted. Keeps working after 'sys.stdout' or 'sys.stderr' get
    replaced, e.g., when the output is captured.
    """

    def __init__(self, stream: IO[str] | None, sys_name: str):
        """
        Initialize the stream handler.

        Args:
            stream: The stream to write to. If 'None', write to 'sys.<sys_name>'.
            sys_name: Name of the 'sys' module stream attribute to use ("stdout" or "stderr").
        """

        self._sys_name = sys_name
        super().__init__(stream)
        # The base class substitutes 'sys.stderr' for 'None'.
        self._stream = stream

    @property
    def stream(self) -> IO[str]: # type: ignore[override]
        """The stream to write to."""

        if self._stream is not None:
            return self._stream
        return getattr(sys, self._sys_name)

    @stream.setter
    def stream(self, stream: IO[str] | None):
        """Set the stream to write to. 'None' means 'sys.<sys_name>'."""

        self._stream = stream

class Logger(logging.Logger):
    """
    A custom logger class that provides the following functionality on top of the standard logger:
      * Message coloring.
      * Different prefixes for different log levels.
      * Debug messages with timestamps and file line numbers.
      * Info messages go to standard output, the rest goes to standard error.
      * The 'error_out()' method.
    """

    def __init__(self, name: str | None = None):
        """
        Initialize the logger.

        Args:
            name: The name of the logger (same as in 'logging.Logger()').
        """

        self.prefix = ""
        self.colored = False

        self._colors: dict[int, str] = {}

        if not name:
            name = "default"

        super().__init__(name)

    def _init_colors(self):
        """Initialize the log level to colorama color codes map."""

        self._colors[DEBUG] = colorama.Fore.GREEN
        self._colors[WARNING] = colorama.Fore.YELLOW + colorama.Style.BRIGHT
        self._colors[ERROR] = self._colors[CRITICAL] = colorama.Fore.RED + colorama.Style.BRIGHT

    def configure(self,
                  prefix: str | None = None,
                  level: int = INFO,
                  colored: bool | None = None,
                  info_stream: IO[str] | None = None,
                  error_stream: IO[str] | None = None) -> Logger:
        """
        Configure the logger. Can be called more than once, the previous configuration is replaced.

        Args:
            prefix: The prefix for log messages, used for all levels except 'INFO' and 'ERRINFO'.
            level: The log level.
            colored: Whether to use colored output. By default, colored output is used only if both
                     streams are TTYs.
            info_stream: The stream for 'INFO' level messages. Default is the current 'sys.stdout'
                         at the time a message is emitted.
            error_stream: The stream for messages of all levels except 'INFO'. Default is the
                          current 'sys.stderr' at the time a message is emitted.

        Returns:
            Logger: The configured logger instance.
        """

        self.prefix = prefix if prefix else ""
        self.setLevel(level)

        if colored is None:
            colored = (info_stream or sys.stdout).isatty() and \
                      (error_stream or sys.stderr).isatty()

        self.colored = colored
        self._colors = {}
        if colored:
            self._init_colors()

        # Remove existing handlers.
        self.handlers = []

        formatter = _MyFormatter(prefix=self.prefix, colors=self._colors)

        stream_handler = _MyStreamHandler(info_stream, "stdout")
        stream_handler.setFormatter(formatter)
        stream_handler.addFilter(_MyFilter([INFO]))
        self.addHandler(stream_handler)

        stream_handler = _MyStreamHandler(error_stream, "stderr")
        stream_handler.setFormatter(formatter)
        stream_handler.addFilter(_MyFilter([DEBUG, WARNING, ERROR, ERRINFO, CRITICAL]))
        self.addHandler(stream_handler)

        return self

    def _print_traceback(self, level: int = ERROR):
        """
        Print an exception or stack traceback.

        Args:
            level: The logging level at which to log the traceback. Defaults to ERROR.
        """

        if sys.exc_info()[0]:
            lines = traceback.format_exc().splitlines()
        else:
            lines = [line.strip() for line in traceback.format_stack()]

        if not lines:
            return

        if self.colored:
            dim = colorama.Style.RESET_ALL + colorama.Style.DIM
            undim = colorama.Style.RESET_ALL
        else:
            dim = undim = ""

        self.log(level, "--- Debug trace starts here ---")
        self.log(level, "%sAn error occurred, here is the traceback:\n%s%s", dim,
                 "\n".join(lines), undim)
        self.log(level, "--- Debug trace ends here ---\n")

    def error_out(self, fmt: Any, *args: Any, print_tb: bool = False) -> NoReturn:
        """
        Print an error message and terminate program execution.

        Args:
            fmt: The error message format string (or an exception object).
            *args: The arguments to format the error message.
            print_tb: If True, print the stack trace. Defaults to False.

        Notes:
            If debugging is enabled, the stack trace is printed regardless of the 'print_tb' value.

        Raises:
            SystemExit: Terminates the program with exit code 1.
        """

        if args:
            errmsg = fmt % args
        else:
            errmsg = str(fmt)

        if print_tb or self.getEffectiveLevel() == DEBUG:
            self._print_traceback(level=ERRINFO)

        self.error(errmsg)

        raise SystemExit(1)

logging.setLoggerClass(Logger)

def getLogger(name: str | None = None) -> Logger:
    """
    Get a logger by name (similar to 'logging.getLogger()').

    Args:
        name: The name of the logger.

    Returns:
        Logger: The logger instance.
    """

    # Because of 'setLoggerClass()', this returns a 'Logger' instance (except for the root logger).
    return cast(Logger, logging.getLogger(name=name))
