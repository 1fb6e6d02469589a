# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2024-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Locate the GPU device and its hardware monitoring (hwmon) sysfs directories.

The lookup is "first found wins": the directory entries are examined in the order the kernel lists
them, and the first matching one is used. On systems with multiple GPUs or multiple hwmon instances
per GPU, only the first one is handled.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from pathlib import Path
from powercaplibs.helperlibs import Logging, FSHelpers
from powercaplibs.helperlibs.Exceptions import Error

if typing.TYPE_CHECKING:
    from typing import Final

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.powercap.{__name__}")

# The sysfs directory listing the DRM (graphics) devices.
DRM_SYSFS_ROOT: Final[Path] = Path("/sys/class/drm")
# GPU device directory names start with this prefix (e.g., 'card0'). Connector directories like
# 'card0-DP-1' match it too.
CARD_PREFIX: Final[str] = "card"
# The hwmon directories sub-path relative to the GPU device directory.
HWMON_SUBPATH: Final[Path] = Path("device/hwmon")

def _first_dir(path: Path, prefix: str = "") -> Path | None:
    """
    Return the first directory in 'path' with name starting with 'prefix'.

    Args:
        path: The directory to look in.
        prefix: The required directory name prefix. Any name matches by default.

    Returns:
        The path to the first matching directory or 'None' if 'path' does not exist, cannot be
        listed, or has no matching directories.
    """

    try:
        for entry in FSHelpers.lsdir(path):
            if not entry["is_dir"]:
                _LOG.debug("Skipping '%s': not a directory", entry["path"])
                continue
            if not entry["name"].startswith(prefix):
                _LOG.debug("Skipping '%s': name does not start with '%s'", entry["path"], prefix)
                continue
            return entry["path"]
    except Error as err:
        _LOG.debug("Cannot look for directories in '%s':\n%s", path, err.indent(2))

    return None

def find_device_base_path(sysfs_root: Path = DRM_SYSFS_ROOT) -> Path | None:
    """
    Find the first GPU device directory.

    Args:
        sysfs_root: The DRM devices sysfs directory to look in.

    Returns:
        The path to the first '<sysfs_root>/card*' directory, or 'None' if there are no GPU devices
        or 'sysfs_root' cannot be listed.
    """

    devpath = _first_dir(Path(sysfs_root), prefix=CARD_PREFIX)
    if devpath:
        _LOG.debug("Found GPU device '%s'", devpath)
    else:
        _LOG.debug("No '%s*' directories found in '%s'", CARD_PREFIX, sysfs_root)

    return devpath

def find_hwmon_base_path(devpath: Path) -> Path | None:
    """
    Find the first hwmon directory of a GPU device.

    Args:
        devpath: The GPU device directory path, as returned by 'find_device_base_path()'.

    Returns:
        The path to the first directory in '<devpath>/device/hwmon', or 'None' if that path does
        not exist, is not a directory, or has no sub-directories.
    """

    hwmon_root = Path(devpath) / HWMON_SUBPATH
    hwmon = _first_dir(hwmon_root)
    if hwmon:
        _LOG.debug("Found hwmon directory '%s'", hwmon)
    else:
        _LOG.debug("No hwmon directories found in '%s'", hwmon_root)

    return hwmon
