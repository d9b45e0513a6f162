"""Fraction-free Gaussian elimination over the integers.

row_reduce() brings a conservation matrix to row-echelon form in place and
returns its rank. Rows are never divided: to cancel entry `cur` against
pivot `p` (g = gcd(|p|, |cur|)) the current row is replaced by

    (p/g) * row - (cur/g) * pivot_row

which keeps every entry an exact integer. The pivot in each column is the
nonzero entry of least absolute value, which keeps coefficient growth small.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from .utils import StructuralError, as_exact, lcm_div, to_int_array

log = logging.getLogger(__name__)


def _check_shape(mat: NDArray[np.int64]) -> tuple[int, int]:
    if mat.ndim != 2:
        raise StructuralError(f"expected a 2-D matrix, got shape {mat.shape}")
    n_rows, n_cols = mat.shape
    if n_rows == 0 or n_cols == 0:
        raise StructuralError(f"cannot reduce an empty {n_rows}x{n_cols} matrix")
    return n_rows, n_cols


def row_mul_sub(dest: NDArray[np.int64], dest_m: int, src: NDArray[np.int64], src_m: int) -> NDArray[np.int64]:
    """Return dest * dest_m - src * src_m, computed exactly."""
    return to_int_array(as_exact(dest) * dest_m - as_exact(src) * src_m)


def row_reduce(mat: NDArray[np.int64]) -> int:
    """Reduce `mat` to row-echelon form in place and return its rank.

    Raises:
        StructuralError: if the matrix has no rows or no columns.
        ArithmeticOverflow: if an eliminated entry leaves the int64 range.
    """
    n_rows, n_cols = _check_shape(mat)

    row_i = 0
    col_i = 0
    while row_i < n_rows and col_i < n_cols:
        col = mat[row_i:, col_i]
        nonzero = np.flatnonzero(col)
        if nonzero.size == 0:
            # Dependent column: no pivot here.
            col_i += 1
            continue

        pivot_i = row_i + int(nonzero[np.argmin(np.abs(col[nonzero]))])
        if pivot_i != row_i:
            mat[[row_i, pivot_i]] = mat[[pivot_i, row_i]]
        pivot = int(mat[row_i, col_i])

        for cur_i in range(row_i + 1, n_rows):
            cur = int(mat[cur_i, col_i])
            if cur == 0:
                continue
            cur_m, pivot_m = lcm_div(cur, pivot)
            mat[cur_i] = row_mul_sub(mat[cur_i], cur_m, mat[row_i], pivot_m)

        row_i += 1
        col_i += 1

    log.debug("row_reduce: rank %d of %dx%d", row_i, n_rows, n_cols)
    return row_i


def pivot_columns(mat: NDArray[np.int64], rank: int) -> list[int]:
    """Column index of the leading entry of each of the first `rank` rows."""
    cols = []
    for i in range(rank):
        nonzero = np.flatnonzero(mat[i])
        if nonzero.size == 0:
            raise StructuralError(f"row {i} has no pivot; matrix is not reduced to rank {rank}")
        cols.append(int(nonzero[0]))
    return cols
