# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2024-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Exception types used in this project.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

from typing import Any, Match
import re

class Error(Exception):
    """The base class for all exceptions raised by this project."""

    def __init__(self, msg: str, *args: Any):
        """
        Initialize the exception object.

        Args:
            msg: The exception message.
            *args: Positional arguments for the message.
        """

        msg = str(msg)
        super().__init__(msg)

        if args:
            self.msg = msg % tuple(args)
        else:
            self.msg = msg

    def indent(self, indent: int | str, capitalize: bool = True) -> str:
        """
        Indent/prefix each line in the error message.

        Args:
            indent: Can be an integer or a string. If an integer, each line of the error message is
                    prefixed with the specified number of white spaces. If a string, each line is
                    prefixed with the specified string.
            capitalize: If True, ensures the message starts with a capital letter.

        Returns:
            str: The modified error message.
        """

        def capitalize_mobj(mobj: Match[str]):
            """Capitalize the first non-white-space character of the matched message."""

            return mobj.group(1) + mobj.group(2).capitalize()

        if isinstance(indent, int):
            pfx = " " * indent
        else:
            pfx = indent

        msg = pfx + self.msg.replace("\n", f"\n{pfx}")
        if capitalize:
            msg = re.sub(r"^(\s*)(\S)", capitalize_mobj, msg)

        return msg

    def __str__(self):
        """The string representation of the exception."""
        return self.msg

class ErrorNotFound(Error):
    """Something was not found."""

class ErrorPermissionDenied(Error):
    """Permission to access something was denied."""

class ErrorBadFormat(Error):
    """Bad format of something, e.g., file contents."""

class ErrorNoData(Error):
    """There is no data to operate on, e.g., nothing to write."""
