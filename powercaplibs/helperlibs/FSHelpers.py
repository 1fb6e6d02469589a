# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2024-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
This module contains misc. helper functions related to file-system operations.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import os
import typing
from pathlib import Path
from powercaplibs.helperlibs import Logging
from powercaplibs.helperlibs.Exceptions import Error, ErrorNotFound, ErrorPermissionDenied

if typing.TYPE_CHECKING:
    from typing import IO, TypedDict, Generator

    class LsdirTypedDict(TypedDict):
        """
        A directory entry information dictionary.

        Attributes:
            name: The name of the directory entry (a file, a directory, etc).
            path: The full path to the directory entry.
            is_dir: Whether the entry is a directory or a symlink to a directory.
        """

        name: str
        path: Path
        is_dir: bool

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.powercap.{__name__}")

def lsdir(path: str | Path) -> Generator[LsdirTypedDict, None, None]:
    """
    Yield information about entries of a directory.

    Args:
        path: Path to the directory to list.

    Yields:
        Instances of 'LsdirTypedDict' for each directory entry. The entries are yielded in the
        order the operating system lists them, without sorting.

    Raises:
        ErrorNotFound: If the directory does not exist.
        ErrorPermissionDenied: If there is no permission to list the directory.
        Error: If listing the directory failed for another reason, e.g., 'path' is not a directory.
    """

    path = Path(path)

    try:
        entries = os.listdir(path)
    except FileNotFoundError:
        raise ErrorNotFound(f"Directory '{path}' does not exist") from None
    except PermissionError as err:
        msg = Error(str(err)).indent(2)
        raise ErrorPermissionDenied(f"No permission to list files in '{path}':\n{msg}") from None
    except OSError as err:
        msg = Error(str(err)).indent(2)
        raise Error(f"Failed to get list of files in '{path}':\n{msg}") from None

    for entry in entries:
        entry_path = path / entry
        try:
            is_dir = entry_path.is_dir()
        except OSError as err:
            msg = Error(str(err)).indent(2)
            raise Error(f"Failed to check if '{entry_path}' is a directory:\n{msg}") from None

        yield {"name": entry, "path": entry_path, "is_dir": is_dir}

def open(path: str | Path, mode: str) -> IO[str]: # pylint: disable=redefined-builtin
    """
    Open a text file.

    Args:
        path: Path to the file to open.
        mode: The mode to open the file with, same as in the built-in 'open()'.

    Returns:
        The file object.

    Raises:
        ErrorPermissionDenied: If there is no permission to open the file.
        ErrorNotFound: If the file does not exist.
        Error: If opening the file failed for another reason.
    """

    errmsg = f"Failed to open file '{path}' with mode '{mode}'"
    _LOG.debug("Opening '%s' with mode '%s'", path, mode)

    try:
        return Path(path).open(mode, encoding="utf-8")
    except PermissionError as err:
        msg = Error(str(err)).indent(2)
        raise ErrorPermissionDenied(f"{errmsg}:\n{msg}") from None
    except FileNotFoundError as err:
        msg = Error(str(err)).indent(2)
        raise ErrorNotFound(f"{errmsg}:\n{msg}") from None
    except OSError as err:
        msg = Error(str(err)).indent(2)
        raise Error(f"{errmsg}:\n{msg}") from None
