#!/usr/bin/env python
#
# Copyright (C) 2024-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si

"""This configuration file adds the custom '--dataset' option for the tests."""

import pytest
import common
from powercaplibs.helperlibs import Logging

def pytest_addoption(parser):
    """Add custom pytest options."""

    text = """This option specifies the dataset to use for the tests that run on a synthetic sysfs
              tree. By default, all datasets are used. Please, find the available datasets in the
              "data" subdirectory."""
    parser.addoption("-D", "--dataset", dest="dataset", default="all", help=text)

def pytest_generate_tests(metafunc):
    """Parametrize the tests requesting the 'dataset' fixture with dataset names."""

    if "dataset" not in metafunc.fixturenames:
        return

    dataset = metafunc.config.getoption("dataset")
    if dataset == "all":
        params = list(common.get_datasets())
    else:
        params = [dataset]

    metafunc.parametrize("dataset", params)

def pytest_configure(config):
    """Verify the existence of requested dataset."""

    dataset = config.getoption("dataset")
    if dataset != "all" and not common.get_dataset_path(dataset).exists():
        raise pytest.exit(f"Did not find dataset '{dataset}'.")

@pytest.fixture(autouse=True)
def configure_logging():
    """Reset the tool logger configuration, other tests may have changed it."""

    Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.powercap").configure(prefix="powercap")
