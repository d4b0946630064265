# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from typing import Optional

import numpy as np

# Shared by every zero / one test in the package.
EPS: float = 1e-10


def is_zero(x: float) -> bool:
    return abs(x) < EPS


def is_nonzero(x: float) -> bool:
    return abs(x) > EPS


def is_one(x: float) -> bool:
    return abs(x - 1) < EPS


def is_negative_one(x: float) -> bool:
    return abs(x + 1) < EPS


def freeze(a) -> Optional[np.ndarray]:
    """
    Return a read-only float64 copy of `a` (or None).

    Step records keep these snapshots, so later row operations on the
    working matrix can never show up in an already emitted step.
    """
    if a is None:
        return None
    out = np.array(a, dtype=float, copy=True)
    out.setflags(write=False)
    return out
