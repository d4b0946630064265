# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Errors raised on malformed input.

Singular matrices and inconsistent systems are NOT errors; they are
reported through the step records of the engines.
"""


class RowReductionError(Exception):
    """Base class for all row_reduction errors."""


class ShapeError(RowReductionError, ValueError):
    """Ragged or otherwise invalid matrix / vector shape."""


class RangeError(RowReductionError, IndexError):
    """Row or column index outside the matrix."""
