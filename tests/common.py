#!/usr/bin/env python3
#
# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2024-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""Common functions for powercap tests."""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from pathlib import Path
import yaml
from powercaptool import _PowerCap

if typing.TYPE_CHECKING:
    from typing import Any, Generator, Union

    # A sysfs tree description: file names map to file contents, directory names map to
    # sub-trees.
    SysfsTreeType = dict[str, Union[str, int, "SysfsTreeType"]]

def get_dataset_path(dataset: str) -> Path:
    """Return path to the YAML file describing the 'dataset' synthetic sysfs tree."""

    return Path(__file__).parent.resolve() / "data" / f"{dataset}.yaml"

def get_datasets() -> Generator[str, None, None]:
    """Yield names of all the datasets in the 'data' sub-directory."""

    for path in sorted((Path(__file__).parent.resolve() / "data").glob("*.yaml")):
        yield path.stem

def load_dataset(dataset: str) -> dict[str, Any]:
    """
    Load a dataset.

    Args:
        dataset: Name of the dataset to load.

    Returns:
        The dataset dictionary. The 'tree' key contains the sysfs tree description, relative to
        the DRM sysfs directory.
    """

    with get_dataset_path(dataset).open("r", encoding="utf-8") as fobj:
        return yaml.safe_load(fobj)

def build_sysfs(basedir: Path, tree: SysfsTreeType) -> Path:
    """
    Create a synthetic sysfs tree.

    Args:
        basedir: The directory to create the tree in. Created if it does not exist.
        tree: The tree description.

    Returns:
        The 'basedir' path.
    """

    basedir.mkdir(parents=True, exist_ok=True)

    for name, value in tree.items():
        path = basedir / name
        if isinstance(value, dict):
            build_sysfs(path, value)
        else:
            path.write_text(str(value), encoding="utf-8")

    return basedir

def build_hwmon(hwmon: Path, cap_min="75000000", cap_max="300000000", cap_default="250000000",
                cap="250000000") -> Path:
    """
    Create a synthetic hwmon directory with the power cap files. The value of 'None' means that the
    corresponding file is not created.
    """

    files = {"power1_cap_min": cap_min, "power1_cap_max": cap_max,
             "power1_cap_default": cap_default, "power1_cap": cap}
    return build_sysfs(hwmon, {name: val for name, val in files.items() if val is not None})

def run_powercap(arguments: str, sysfs_root: Path | None = None) -> int:
    """
    Run the 'powercap' tool and return its exit code.

    Args:
        arguments: The command-line arguments to run the tool with, e.g., '--max -v'.
        sysfs_root: The synthetic DRM sysfs directory to run the tool against.

    Returns:
        The exit code.
    """

    argv = arguments.split()
    if sysfs_root is not None:
        argv += ["--sysfs-root", str(sysfs_root)]

    try:
        return _PowerCap.main(argv)
    except SystemExit as err:
        if err.code is None:
            return 0
        return int(err.code)
