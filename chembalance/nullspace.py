"""Null-space solving for reduced conservation matrices.

Given a matrix in row-echelon form with rank r and u columns (terms):
  u - r == 0  -> only the zero vector conserves everything (no solution)
  u - r == 1  -> one solution up to scale, found by back-substitution
  u - r  > 1  -> a family of dimension u - r, spanned by an integer basis

All arithmetic stays in the integers. Every returned vector is normalized:
majority of nonzero entries positive, entries coprime.

We also provide:
- rational_nullspace(): exact rational basis via sympy, used as a cross-check
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction

import numpy as np
from numpy.typing import NDArray

from .echelon import pivot_columns
from .utils import StructuralError, as_exact, lcm_div, normalize_vector, to_int_array

log = logging.getLogger(__name__)


class SolutionKind(Enum):
    NONE = "none"
    UNIQUE = "unique"
    INFINITE = "infinite"


@dataclass(frozen=True)
class Solution:
    """Outcome of solving a conservation system.

    kind=NONE:      basis is empty
    kind=UNIQUE:    basis holds exactly one vector
    kind=INFINITE:  basis holds u - r linearly independent vectors
    """

    kind: SolutionKind
    basis: tuple[NDArray[np.int64], ...] = ()

    @classmethod
    def none(cls) -> Solution:
        return cls(SolutionKind.NONE)

    @classmethod
    def unique(cls, vector: NDArray[np.int64]) -> Solution:
        return cls(SolutionKind.UNIQUE, (vector,))

    @classmethod
    def infinite(cls, basis) -> Solution:
        return cls(SolutionKind.INFINITE, tuple(basis))

    @property
    def dimension(self) -> int:
        return len(self.basis)

    @property
    def vector(self) -> NDArray[np.int64]:
        if self.kind is not SolutionKind.UNIQUE:
            raise ValueError(f"a {self.kind.value} solution has no single vector")
        return self.basis[0]


def solve(mat: NDArray[np.int64], rank: int) -> Solution:
    """Classify and solve the null space of a row-reduced matrix.

    Args:
        mat: (n_rows, n_cols) matrix in row-echelon form, as left by row_reduce()
        rank: its rank

    Raises:
        StructuralError: if the matrix is empty or rank is out of range.
    """
    mat = np.asarray(mat)
    if mat.ndim != 2 or mat.shape[0] == 0 or mat.shape[1] == 0:
        raise StructuralError(f"cannot solve an empty matrix of shape {mat.shape}")
    n_rows, n_cols = mat.shape
    if not 0 <= rank <= min(n_rows, n_cols):
        raise StructuralError(f"rank {rank} is impossible for a {n_rows}x{n_cols} matrix")

    nullity = n_cols - rank
    if nullity == 0:
        out = Solution.none()
    elif nullity == 1:
        out = Solution.unique(solve_unique(mat, rank))
    else:
        out = Solution.infinite(solve_infinite(mat, rank))

    log.debug("solve: %s solution of dimension %d", out.kind.value, out.dimension)
    return out


def solve_unique(mat: NDArray[np.int64], rank: int) -> NDArray[np.int64]:
    """Back-substitute the single free variable of a nullity-1 system.

    The free column is fixed at 1. For each pivot row, bottom-up, the partial
    sum s over already-known entries and the pivot p give the new entry
    -s/g while every known entry is rescaled by p/g (g = gcd(|s|, |p|)), so
    the vector stays integral.
    """
    n_cols = mat.shape[1]
    pivots = pivot_columns(mat, rank)
    pivot_set = set(pivots)
    free = [j for j in range(n_cols) if j not in pivot_set]
    if len(free) != 1:
        raise StructuralError(f"expected one free column, found {len(free)}")

    sol = [0] * n_cols
    sol[free[0]] = 1

    for i in reversed(range(rank)):
        p = pivots[i]
        row = as_exact(mat[i])
        s = sum(row[j] * sol[j] for j in range(p + 1, n_cols))
        scale, value = lcm_div(s, row[p])
        value = -value
        if scale < 0:
            scale, value = -scale, -value

        sol = [x * scale for x in sol]
        sol[p] = value
        to_int_array(sol)  # raises on overflow

    return normalize_vector(to_int_array(sol))


def column_reduce_upper(mat: NDArray[np.int64], upper_rank: int) -> None:
    """Column-reduce the first `upper_rank` rows of `mat` in place.

    Column operations act on whole columns, so any rows below (the identity
    block in solve_infinite) record the combinations applied. Afterwards row
    i is zero to the right of column i for every i < upper_rank.
    """
    n_cols = mat.shape[1]

    for i in range(upper_rank):
        row = mat[i, i:]
        nonzero = np.flatnonzero(row)
        if nonzero.size == 0:
            raise StructuralError(f"row {i} has no pivot; rows are not independent")

        pivot_i = i + int(nonzero[np.argmin(np.abs(row[nonzero]))])
        if pivot_i != i:
            mat[:, [i, pivot_i]] = mat[:, [pivot_i, i]]
        pivot = int(mat[i, i])

        for cur_i in range(i + 1, n_cols):
            cur = int(mat[i, cur_i])
            if cur == 0:
                continue
            cur_m, pivot_m = lcm_div(cur, pivot)
            mat[:, cur_i] = to_int_array(as_exact(mat[:, cur_i]) * cur_m - as_exact(mat[:, i]) * pivot_m)


def solve_infinite(mat: NDArray[np.int64], rank: int) -> list[NDArray[np.int64]]:
    """Integer basis of the null space when it has dimension > 1.

    The pivot rows are stacked over an identity block and column-reduced.
    The last u - r columns then vanish on the pivot rows, and their identity
    part (transposed into rows) is the basis.
    """
    n_cols = mat.shape[1]
    nullity = n_cols - rank

    aug = np.vstack([np.asarray(mat[:rank], dtype=np.int64), np.eye(n_cols, dtype=np.int64)])
    column_reduce_upper(aug, rank)

    basis = aug[rank:, rank:].T.copy()
    assert basis.shape == (nullity, n_cols)
    return [normalize_vector(v) for v in basis]


def rational_nullspace(A: NDArray[np.int64]) -> list[list[Fraction]]:
    """Compute an exact rational basis for the (right) null space of A.

    Uses sympy; meant as an independent reference for small matrices.
    """
    import sympy as sp

    S = sp.Matrix(np.asarray(A).tolist())
    out: list[list[Fraction]] = []
    for v in S.nullspace():
        out.append([Fraction(int(x.p), int(x.q)) for x in v])
    return out


def rational_rank(A: NDArray[np.int64]) -> int:
    """Rank of A over the rationals (sympy)."""
    import sympy as sp

    return int(sp.Matrix(np.asarray(A).tolist()).rank())
