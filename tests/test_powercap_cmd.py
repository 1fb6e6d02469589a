#!/usr/bin/env python3
#
# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2024-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""Test module for the 'powercap' tool."""

from pathlib import Path
import pytest
import common
from powercaplibs import GPULocator

@pytest.fixture(name="sysfs")
def get_sysfs(tmp_path):
    """
    Create a synthetic DRM sysfs directory with a single GPU and yield a dictionary with the paths
    we need for testing.
    """

    root = tmp_path / "drm"
    hwmon = common.build_hwmon(root / "card0" / "device" / "hwmon" / "hwmon3")
    common.build_sysfs(root, {"renderD128": {}, "version": "drm 1.1.0 20060810"})

    yield {"root": root, "hwmon": hwmon, "control": hwmon / "power1_cap"}

def _read(path):
    """Return contents of file 'path'."""
    return Path(path).read_text(encoding="utf-8")

def test_set_min(sysfs, capsys):
    """Test setting the minimum power cap, which is also the default action."""

    assert common.run_powercap("--min", sysfs["root"]) == 0
    assert _read(sysfs["control"]) == "75000000"

    stdout = capsys.readouterr().out
    assert f"Trying to write 75000 to '{sysfs['control']}'..." in stdout

    (sysfs["control"]).write_text("1", encoding="utf-8")
    assert common.run_powercap("", sysfs["root"]) == 0
    assert _read(sysfs["control"]) == "75000000"

def test_set_max_and_default(sysfs):
    """Test setting the maximum and the default power caps."""

    assert common.run_powercap("--max", sysfs["root"]) == 0
    assert _read(sysfs["control"]) == "300000000"

    assert common.run_powercap("--default", sysfs["root"]) == 0
    assert _read(sysfs["control"]) == "250000000"

def test_verbose(sysfs, capsys):
    """Test the '--verbose' option."""

    assert common.run_powercap("--max -v", sysfs["root"]) == 0

    stdout = capsys.readouterr().out
    assert "Setting power-target to maximal..." in stdout
    assert f"hwmon directory '{sysfs['hwmon']}'" in stdout
    assert "Power cap set to 300000 mW" in stdout

def test_quiet(sysfs, capsys):
    """Test the '--quiet' option."""

    assert common.run_powercap("--max -q", sysfs["root"]) == 0
    assert _read(sysfs["control"]) == "300000000"
    assert capsys.readouterr().out == ""

def test_debug(sysfs, capsys):
    """Test the '--debug' option."""

    assert common.run_powercap("--max -d", sysfs["root"]) == 0
    assert _read(sysfs["control"]) == "300000000"

    captured = capsys.readouterr()
    assert f"Found hwmon directory '{sysfs['hwmon']}'" in captured.err
    assert "Trying to write 300000" in captured.out

def test_scenario_hwmon3(tmp_path, capsys):
    """Test setting the minimum on 'card0' with 'hwmon3' having '75000000' as the minimum."""

    root = tmp_path / "drm"
    hwmon = common.build_hwmon(root / "card0" / "device" / "hwmon" / "hwmon3",
                               cap_min="75000000")

    assert common.run_powercap("--min", root) == 0
    assert _read(hwmon / "power1_cap") == "75000000"
    assert capsys.readouterr().err == ""

def test_no_gpu(tmp_path, capsys):
    """Test that all actions fail with exit code 1 when there are no GPUs."""

    root = common.build_sysfs(tmp_path / "drm", {"renderD128": {}, "version": "drm 1.1.0"})

    for opt in ("--min", "--max", "--default", ""):
        assert common.run_powercap(opt, root) == 1
        assert "Unable to find gpu" in capsys.readouterr().err

    # Non-existing DRM directory.
    assert common.run_powercap("--min", tmp_path / "nonexistent") == 1
    assert "Unable to find gpu" in capsys.readouterr().err

def test_no_hwmon(tmp_path, capsys):
    """Test that all actions fail with exit code 1 when the GPU has no hwmon directories."""

    root = common.build_sysfs(tmp_path / "drm", {"card0": {"device": {"hwmon": {}}}})

    for opt in ("--min", "--max", "--default"):
        assert common.run_powercap(opt, root) == 1
        assert f"Unable to find hwmon entries for '{root / 'card0'}'" in capsys.readouterr().err

def test_bad_source_value(sysfs, capsys):
    """Test a power cap limit file with non-numeric contents."""

    (sysfs["hwmon"] / "power1_cap_max").write_text("N/A\n", encoding="utf-8")

    assert common.run_powercap("--max", sysfs["root"]) == 0
    assert _read(sysfs["control"]) == "250000000"

    stderr = capsys.readouterr().err
    assert "Unable to convert 'N/A' to unsigned value" in stderr
    assert "Could not write the power cap" in stderr
    assert "No data available" in stderr
    assert stderr.index("Unable to convert") < stderr.index("No data available")

def test_binary_source_value(sysfs, capsys):
    """Test a power cap limit file with contents that are not valid text."""

    (sysfs["hwmon"] / "power1_cap_max").write_bytes(b"\xff\n")

    assert common.run_powercap("--max", sysfs["root"]) == 0
    assert _read(sysfs["control"]) == "250000000"

    stderr = capsys.readouterr().err
    assert "Unable to convert" in stderr
    assert "No data available" in stderr

def test_missing_source(sysfs, capsys):
    """Test a missing power cap limit file."""

    (sysfs["hwmon"] / "power1_cap_default").unlink()

    assert common.run_powercap("--default", sysfs["root"]) == 0
    assert _read(sysfs["control"]) == "250000000"

    stderr = capsys.readouterr().err
    assert "Unable to read" in stderr
    assert "No data available" in stderr

def test_permission_denied(sysfs, capsys, monkeypatch):
    """Test that a non-writable control file is reported, but the exit code is still 0."""

    orig_open = Path.open

    def _open(self, mode="r", *args, **kwargs):
        """Deny opening the control file for writing."""

        if self.name == "power1_cap" and "w" in mode:
            raise PermissionError(13, "Permission denied", str(self))
        return orig_open(self, mode, *args, **kwargs)

    monkeypatch.setattr(Path, "open", _open)

    for opt in ("--min", "--max", "--default"):
        assert common.run_powercap(opt, sysfs["root"]) == 0

        captured = capsys.readouterr()
        assert "Trying to write" in captured.out
        assert "Could not write the power cap" in captured.err
        assert "Permission denied" in captured.err

    assert _read(sysfs["control"]) == "250000000"

def test_help(tmp_path, capsys, monkeypatch):
    """Test that '--help' prints the options and does not touch the file-system."""

    def _fail(*args, **kwargs):
        """Fail the test if called."""
        raise AssertionError("the file-system should not be accessed")

    monkeypatch.setattr(GPULocator, "find_device_base_path", _fail)

    assert common.run_powercap("--help", tmp_path) == 0

    stdout = capsys.readouterr().out
    for opt in ("--min", "--max", "--default", "--verbose", "--help"):
        assert opt in stdout

def test_version(capsys):
    """Test the '--version' option."""

    assert common.run_powercap("--version") == 0
    assert capsys.readouterr().out.strip() == "1.0.0"

def test_bad_options(sysfs, capsys):
    """Test bad command-line options."""

    for opts in ("--min --max", "--max --default", "--min --default", "--bad-option",
                 "-q -v", "-q -d"):
        assert common.run_powercap(opts, sysfs["root"]) == 1
        assert "error:" in capsys.readouterr().err

    assert _read(sysfs["control"]) == "250000000"

def test_idempotence(dataset, tmp_path):
    """Test that running the flows twice gives the same result."""

    root = common.build_sysfs(tmp_path / "drm", common.load_dataset(dataset)["tree"])

    devpath = GPULocator.find_device_base_path(root)
    assert devpath is not None
    hwmon = GPULocator.find_hwmon_base_path(devpath)
    assert hwmon is not None

    for opt, fname in (("--min", "power1_cap_min"), ("--max", "power1_cap_max"),
                       ("--default", "power1_cap_default")):
        results = []
        for _ in range(2):
            assert common.run_powercap(opt, root) == 0
            results.append(_read(hwmon / "power1_cap"))

        assert results[0] == results[1]
        assert results[0] == _read(hwmon / fname).strip()
