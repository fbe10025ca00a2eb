# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from typing import Sequence

import numpy as np

# One value followed by a single space, one row per line.
PRINT_FORMAT: str = "%.2f "
# Enough digits for a float64 to survive a save / from_file cycle.
EXPORT_FORMAT: str = "%.18g"


def spread_tol(x: np.ndarray) -> float:
    """
    Largest standard deviation that rounding alone can produce for the
    values in x: n * machine epsilon * max |x|. Anything at or below it
    is indistinguishable from a constant.
    """
    x = np.asarray(x, dtype=float)
    if x.size == 0:
        return 0.0
    return x.size * float(np.finfo(float).eps) * float(np.max(np.abs(x)))


def permutation_sign(perm: Sequence[int]) -> float:
    """Return +1 or –1 depending on permutation parity."""
    visited = [False] * len(perm)
    cycles = 0
    for i in range(len(perm)):
        if not visited[i]:
            cycles += 1
            j = i
            while not visited[j]:
                visited[j] = True
                j = perm[j]
    swaps = len(perm) - cycles  # n − #cycles
    return -1.0 if swaps & 1 else 1.0


def pivots_to_permutation(piv: Sequence[int]) -> list[int]:
    """
    Turn LAPACK style pivot indices (row i was swapped with row piv[i],
    applied in order) into the final row order.
    """
    perm = list(range(len(piv)))
    for i, p in enumerate(piv):
        p = int(p)
        if p != i:
            perm[i], perm[p] = perm[p], perm[i]
    return perm
