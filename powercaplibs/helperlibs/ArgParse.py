# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2024-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Helpful classes extending 'argparse.ArgumentParser' class functionality.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing
import argparse
import argcomplete
from powercaplibs.helperlibs.Exceptions import Error

if typing.TYPE_CHECKING:
    from typing import TypedDict, Iterable, Any

    class ArgKwargsTypedDict(TypedDict, total=False):
        """
        The type of the "kwargs" sub-dictionary of the 'ArgTypedDict' dictionary type. It defines
        the supported keyword arguments that are ultimately passed to the 'argparse.add_argument()'
        method.

        Attributes:
            dest: The 'argparse' attribute name where the command line argument will be stored.
            default: The default value for the argument.
            const: The constant value for the 'store_const' action.
            metavar: The name of the argument in the help text.
            type: The type to convert the argument to.
            action: The 'argparse' action to use for the argument.
            help: A brief description of the argument.
        """

        dest: str
        default: Any
        const: Any
        metavar: str
        type: Any
        action: str
        help: str

    class ArgTypedDict(TypedDict, total=False):
        """
        A dictionary type for the options definitions dictionary.

        Attributes:
            short: The short option name.
            long: The long option name.
            argcomplete: The 'argcomplete' completer class name to use for tab completion of the
                         option.
            kwargs: Additional keyword arguments for 'argparse.add_argument()'.
        """

        short: str | None
        long: str
        argcomplete: str | None
        kwargs: ArgKwargsTypedDict

    class CommonArgsTypedDict(TypedDict, total=False):
        """
        The common command-line arguments.

        Attributes:
            quiet: Suppress non-essential output (-q option). False by default.
            force_color: Force colorized output even if the output stream is not a terminal
                         (--force-color option). False by default.
            debug: Enable debugging output (-d option). False by default.
        """

        quiet: bool
        force_color: bool
        debug: bool

def add_options(parser: argparse.ArgumentParser | argparse._ArgumentGroup,
                options: Iterable[ArgTypedDict]):
    """
    Add command line options to the given parser or argument group.

    Args:
        parser: The argument parser or argument group object to which options will be added.
        options: An iterable collection of option definition dictionaries.
    """

    for opt in options:
        args: tuple[str, ...]

        if opt["short"] is None:
            args = (opt["long"], )
        else:
            args = (opt["short"], opt["long"])

        arg = parser.add_argument(*args, **opt["kwargs"])
        if opt["argcomplete"]:
            setattr(arg, "completer", getattr(argcomplete.completers, opt["argcomplete"]))

def format_common_args(args: argparse.Namespace) -> CommonArgsTypedDict:
    """
    Verify common command-line arguments and return them as a dictionary.

    Args:
        args: Parsed command-line arguments.

    Returns:
        A dictionary containing the common options.
    """

    cmdl: CommonArgsTypedDict = {}

    cmdl["quiet"] = getattr(args, "quiet", False)
    cmdl["debug"] = getattr(args, "debug", False)
    if cmdl["quiet"] and cmdl["debug"]:
        raise Error("The '-q' and '-d' options cannot be used together")

    cmdl["force_color"] = getattr(args, "force_color", False)
    return cmdl

class ArgsParser(argparse.ArgumentParser):
    """
    Enhance 'argparse.ArgumentParser' with standard options and improved usability.
      - Add standard options, such as '-h', '-q' and '-d'. Use 'format_common_args()' to validate
        them.
      - Override 'error()' to always suggest using '-h' for help and raise instead of exiting.
    """

    def __init__(self, *args: Any, **kwargs: Any):
        """
        We assume all tools using this module support the '-q' and '-d' options. Add them, as well
        as the '-h', '--force-color' and, if the 'ver' keyword argument is provided, '--version'
        options.
        """

        version = kwargs.pop("ver", None)

        kwargs["add_help"] = False
        super().__init__(*args, **kwargs)

        text = "Show this help message and exit."
        self.add_argument("-h", "--help", dest="help", action="help", help=text)

        text = "Be quiet (print only important messages like warnings)."
        self.add_argument("-q", "--quiet", dest="quiet", action="store_true", help=text)

        text = """Force colorized output even if the output stream is not a terminal (adds ANSI
                  escape codes)."""
        self.add_argument("--force-color", action="store_true", help=text)

        text = "Print debugging information."
        self.add_argument("-d", "--debug", dest="debug", action="store_true", help=text)

        if version:
            text = "Print the version number and exit."
            self.add_argument("--version", action="version", help=text, version=version)

    def error(self, message: str): # type: ignore[override]
        """
        Improve error messages from 'argparse.ArgumentParser'.

        Args:
            message: The original error message.
        """

        message += "\nUse -h for help."

        # Raise an error instead of calling the superclass method, because it exits the program.
        raise Error(message)
