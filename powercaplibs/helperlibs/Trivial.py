# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2024-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Common trivial helpers.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import re
from powercaplibs.helperlibs.Exceptions import Error, ErrorBadFormat

# Unsigned decimal number: digits only, no sign, no underscores, no base prefix.
_UDEC_REGEX = re.compile(r"[0-9]+")

def str_to_int(snum: str | int, base: int = 10, what: str = "") -> int:
    """
    Convert a string to an integer value.

    Args:
        snum: The value to convert to 'int'.
        base: Base of 'snum', in the '[2, 36]' range.
        what: A string describing the value to convert, for the possible error message.

    Returns:
        int: The converted integer value.

    Raises:
        ErrorBadFormat: If 'snum' cannot be converted to an integer.
    """

    if base < 2 or base > 36:
        raise Error(f"BUG: Bad base value {base} when converting '{snum}': must be in the [2, 36] "
                    f"range")

    try:
        num = int(str(snum), base)
    except (ValueError, TypeError):
        if not what:
            what = "value"
        raise ErrorBadFormat(f"Bad {what} '{snum}': should be a base {base} integer") from None

    return num

def str_to_uint(snum: str, bits: int = 64, what: str = "") -> int:
    """
    Convert a string with an unsigned decimal number to an integer. Surrounding white-spaces are
    ignored.

    Args:
        snum: The string to convert.
        bits: Width of the unsigned integer in bits. The result has to fit.
        what: A string describing the value to convert, for the possible error message.

    Returns:
        int: The converted integer value in the '[0, 2^bits - 1]' range.

    Raises:
        ErrorBadFormat: If 'snum' is not an unsigned decimal number, or if it does not fit.
    """

    if not what:
        what = "value"

    sval = str(snum).strip()
    if not _UDEC_REGEX.fullmatch(sval):
        raise ErrorBadFormat(f"Bad {what} '{snum}': should be an unsigned decimal integer")

    num = str_to_int(sval, base=10, what=what)

    maxval = (1 << bits) - 1
    if num > maxval:
        raise ErrorBadFormat(f"Bad {what} '{snum}': should not be greater than {maxval}")

    return num
