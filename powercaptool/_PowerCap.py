# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2024-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
powercap - set power limits on AMD GPUs.

Copy the minimum, maximum, or driver default power cap of the first GPU to its power cap control
file. The same can be done in the shell:

  HWMON=/sys/class/drm/card1/device/hwmon/hwmon3
  cat $HWMON/power1_cap_min > $HWMON/power1_cap
"""

import sys
from pathlib import Path
import argcomplete
from powercaplibs.helperlibs import ArgParse, Logging
from powercaplibs.helperlibs.Exceptions import Error, ErrorNotFound
from powercaplibs import GPULocator, PowerCap

_VERSION = "1.0.0"
TOOLNAME = "powercap"

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.powercap").configure(prefix=TOOLNAME)

_ACTION_OPTIONS = [
    {
        "short": None,
        "long": "--min",
        "argcomplete": None,
        "kwargs": {
            "dest": "action",
            "action": "store_const",
            "const": PowerCap.Action.SET_TO_MIN,
            "help": "Set the power cap to the minimum (default).",
        },
    },
    {
        "short": None,
        "long": "--max",
        "argcomplete": None,
        "kwargs": {
            "dest": "action",
            "action": "store_const",
            "const": PowerCap.Action.SET_TO_MAX,
            "help": "Set the power cap to the maximum.",
        },
    },
    {
        "short": None,
        "long": "--default",
        "argcomplete": None,
        "kwargs": {
            "dest": "action",
            "action": "store_const",
            "const": PowerCap.Action.RESTORE_DEFAULT,
            "help": "Restore the driver default power cap.",
        },
    },
]

_VERBOSE_OPTION = {
    "short": "-v",
    "long": "--verbose",
    "argcomplete": None,
    "kwargs": {
        "dest": "verbose",
        "action": "store_true",
        "help": "Print extra messages.",
    },
}

_SYSFS_ROOT_OPTION = {
    "short": None,
    "long": "--sysfs-root",
    "argcomplete": "DirectoriesCompleter",
    "kwargs": {
        "dest": "sysfs_root",
        "metavar": "PATH",
        "type": Path,
        "default": GPULocator.DRM_SYSFS_ROOT,
        "help": f"""This option is for debugging and testing. Look for GPU devices in PATH instead
                    of '{GPULocator.DRM_SYSFS_ROOT}'.""",
    },
}

def build_arguments_parser():
    """Build and return the command-line arguments parser object."""

    text = f"{TOOLNAME} - set power limits on AMD GPUs."
    parser = ArgParse.ArgsParser(description=text, prog=TOOLNAME, ver=_VERSION)

    group = parser.add_mutually_exclusive_group()
    ArgParse.add_options(group, _ACTION_OPTIONS)
    parser.set_defaults(action=PowerCap.Action.SET_TO_MIN)

    ArgParse.add_options(parser, (_VERBOSE_OPTION, _SYSFS_ROOT_OPTION))

    argcomplete.autocomplete(parser)

    return parser

def parse_arguments(argv=None):
    """
    Parse and validate command-line arguments. Use 'sys.argv' if 'argv' is not provided. Return a
    tuple of the arguments namespace and the common options dictionary.
    """

    parser = build_arguments_parser()
    args = parser.parse_args(argv)

    cmdl = ArgParse.format_common_args(args)
    if cmdl["quiet"] and args.verbose:
        raise Error("The '-q' and '-v' options cannot be used together")

    return args, cmdl

def _configure_logging(cmdl):
    """Configure the log level and coloring according to the common command-line options."""

    if cmdl["debug"]:
        level = Logging.DEBUG
    elif cmdl["quiet"]:
        level = Logging.WARNING
    else:
        level = Logging.INFO

    colored = True if cmdl["force_color"] else None
    _LOG.configure(prefix=TOOLNAME, level=level, colored=colored)

def powercap_command(args):
    """Implement the power cap setting flow."""

    ainfo = PowerCap.ACTIONS[args.action]
    if args.verbose:
        _LOG.info("Setting power-target to %s...", ainfo["name"])

    devpath = GPULocator.find_device_base_path(args.sysfs_root)
    if not devpath:
        raise ErrorNotFound("Unable to find gpu")

    hwmon = GPULocator.find_hwmon_base_path(devpath)
    if not hwmon:
        raise ErrorNotFound(f"Unable to find hwmon entries for '{devpath}'")

    if args.verbose:
        _LOG.info("Using GPU '%s', hwmon directory '%s'", devpath, hwmon)

    try:
        value = PowerCap.set_power_cap(hwmon, args.action)
    except Error as err:
        # The exit code does not reflect write failures, they are only reported.
        _LOG.error("Could not write the power cap:\n%s", err.indent(2))
        return

    if args.verbose:
        _LOG.info("Power cap set to %d mW", value // 1000)

def main(argv=None):
    """Script entry point."""

    _LOG.configure(prefix=TOOLNAME)

    try:
        args, cmdl = parse_arguments(argv)
        _configure_logging(cmdl)
        powercap_command(args)
    except KeyboardInterrupt:
        _LOG.info("\nInterrupted, exiting")
        return -1
    except Error as err:
        _LOG.error_out(err)

    return 0

if __name__ == "__main__":
    sys.exit(main())
