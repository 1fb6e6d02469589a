# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2024-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
This module provides API for setting the GPU power cap via the hwmon sysfs interface.

The hwmon directory of a GPU exposes the power cap limits in microwatts:
  * power1_cap_min - the minimum allowed power cap.
  * power1_cap_max - the maximum allowed power cap.
  * power1_cap_default - the driver default power cap.
  * power1_cap - the power cap control file.

Setting the power cap is copying one of the limit files to the control file.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import enum
import typing
from pathlib import Path
from types import MappingProxyType
from powercaplibs.helperlibs import Logging, FSHelpers, Trivial
from powercaplibs.helperlibs.Exceptions import Error, ErrorNoData, ErrorPermissionDenied

if typing.TYPE_CHECKING:
    from typing import Final, Mapping, TypedDict

    class ActionInfoTypedDict(TypedDict):
        """
        Information about a power cap action.

        Attributes:
            name: Human-readable name of the power cap the action sets.
            source: Name of the hwmon file to read the power cap value from.
            control: Name of the hwmon file to write the power cap value to.
        """

        name: str
        source: str
        control: str

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.powercap.{__name__}")

# The power cap control file name.
CONTROL_FILE_NAME: Final[str] = "power1_cap"

class Action(enum.Enum):
    """The power cap to set."""

    RESTORE_DEFAULT = "default"
    SET_TO_MIN = "min"
    SET_TO_MAX = "max"

ACTIONS: Final[Mapping[Action, ActionInfoTypedDict]] = MappingProxyType({
    Action.RESTORE_DEFAULT: {
        "name": "default",
        "source": "power1_cap_default",
        "control": CONTROL_FILE_NAME,
    },
    Action.SET_TO_MIN: {
        "name": "minimal",
        "source": "power1_cap_min",
        "control": CONTROL_FILE_NAME,
    },
    Action.SET_TO_MAX: {
        "name": "maximal",
        "source": "power1_cap_max",
        "control": CONTROL_FILE_NAME,
    },
})

def get_source_path(hwmon: Path, action: Action) -> Path:
    """Return path to the hwmon file to read the power cap value for 'action' from."""

    return Path(hwmon) / ACTIONS[action]["source"]

def get_control_path(hwmon: Path, action: Action) -> Path:
    """Return path to the hwmon power cap control file for 'action' (same for all actions)."""

    return Path(hwmon) / ACTIONS[action]["control"]

def read_value(path: Path) -> int | None:
    """
    Read a power cap value from a sysfs file.

    Args:
        path: Path to the file to read. Only the first line is read, and it should contain an
              unsigned decimal 64-bit integer.

    Returns:
        The power cap value in microwatts, or 'None' if the file cannot be read or its contents
        cannot be parsed. Errors are reported, but not raised.
    """

    try:
        with FSHelpers.open(path, "r") as fobj:
            line = fobj.readline()
    except Error as err:
        _LOG.error("Unable to read '%s':\n%s", path, err.indent(2))
        return None
    except OSError as err:
        _LOG.error("Unable to read '%s':\n%s", path, Error(str(err)).indent(2))
        return None
    except UnicodeDecodeError as err:
        _LOG.error("Unable to convert contents of '%s' to unsigned value:\n%s", path,
                   Error(str(err)).indent(2))
        return None

    line = line.rstrip("\n")
    try:
        return Trivial.str_to_uint(line, bits=64, what=f"contents of '{path}'")
    except Error as err:
        _LOG.error("Unable to convert '%s' to unsigned value:\n%s", line, err.indent(2))
        return None

def write_value(path: Path, value: int | None):
    """
    Write a power cap value to a sysfs file.

    Args:
        path: Path to the file to write to. The file is truncated.
        value: The power cap value in microwatts. 'None' means that there is no value.

    Raises:
        ErrorNoData: If 'value' is 'None'.
        ErrorPermissionDenied: If the file cannot be opened for writing.
        Error: If writing the value failed. Note, sysfs files report invalid values on write.
    """

    if value is None:
        raise ErrorNoData(f"No data available to write to '{path}'")

    _LOG.info("Trying to write %d to '%s'...", value // 1000, path)

    try:
        fobj = FSHelpers.open(path, "w")
    except Error as err:
        raise ErrorPermissionDenied(f"Cannot open '{path}' for writing:\n{err.indent(2)}") \
              from err

    try:
        with fobj:
            fobj.write(str(value))
    except OSError as err:
        msg = Error(str(err)).indent(2)
        raise Error(f"Failed to write '{value}' to '{path}':\n{msg}") from err

def set_power_cap(hwmon: Path, action: Action) -> int:
    """
    Set the power cap of a GPU.

    Args:
        hwmon: The GPU hwmon directory path.
        action: The power cap to set.

    Returns:
        The power cap value written, in microwatts.

    Raises:
        ErrorNoData: If the power cap value for 'action' could not be read.
        ErrorPermissionDenied: If the control file cannot be opened for writing.
        Error: If writing the value failed.
    """

    value = read_value(get_source_path(hwmon, action))
    write_value(get_control_path(hwmon, action), value)

    # 'write_value()' raises 'ErrorNoData' for 'None'.
    return typing.cast(int, value)
