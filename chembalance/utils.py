"""Shared exact-integer utilities for the balancing engine.

This module provides common functions used across the package:
- Exception types for contract breaches and overflow
- Overflow-checked conversion into int64 arrays
- GCD helpers for fraction-free elimination
- Vector normalization (majority sign, primitive form)
"""

from __future__ import annotations

from functools import reduce
from math import gcd
from typing import Iterable

import numpy as np
from numpy.typing import NDArray


# =============================================================================
# Integer range of the stored matrices
# =============================================================================
INT64_MAX = int(np.iinfo(np.int64).max)
INT64_MIN = int(np.iinfo(np.int64).min)


# =============================================================================
# Exceptions
# =============================================================================
class StructuralError(ValueError):
    """The caller broke a structural precondition (empty matrix, bad split, ...)."""


class ArithmeticOverflow(OverflowError):
    """An exact intermediate value does not fit into a signed 64-bit integer."""


# =============================================================================
# Helper functions for integer operations
# =============================================================================
def gcd_list(xs: Iterable[int]) -> int:
    """Compute GCD of a list of integers (0 if all entries are zero)."""
    return reduce(gcd, (abs(int(x)) for x in xs), 0)


def lcm_div(a: int, b: int) -> tuple[int, int]:
    """Return (b/g, a/g) with g = gcd(|a|, |b|).

    Multiplying a by the first and b by the second gives the same value,
    so subtracting the scaled rows cancels the entry exactly.
    """
    g = gcd(abs(int(a)), abs(int(b)))
    return int(b) // g, int(a) // g


def to_int_array(values) -> NDArray[np.int64]:
    """Convert exact Python integers to int64, refusing to wrap.

    Raises:
        ArithmeticOverflow: if any value is outside the int64 range.
    """
    arr = np.asarray(values, dtype=object)
    for x in arr.flat:
        if not INT64_MIN <= int(x) <= INT64_MAX:
            raise ArithmeticOverflow(f"value {int(x)} does not fit in int64")
    return arr.astype(np.int64)


def as_exact(values) -> NDArray[np.object_]:
    """View an integer array as Python ints so products never wrap."""
    return np.asarray(values).astype(object)


# =============================================================================
# Vector canonicalization
# =============================================================================
def normalize_vector(v: NDArray[np.int64]) -> NDArray[np.int64]:
    """Bring an integer vector to its canonical minimal form.

    The sign is chosen so that most nonzero entries are positive; on a tie
    the first nonzero entry decides. The vector is then divided by the GCD
    of its entries.

    Returns:
        Normalized vector (copy). An all-zero vector is returned unchanged.
    """
    v = as_exact(v).copy()
    nonzero = [int(x) for x in v if x != 0]
    if not nonzero:
        return to_int_array(v)

    pos = sum(1 for x in nonzero if x > 0)
    neg = len(nonzero) - pos
    if neg > pos or (neg == pos and nonzero[0] < 0):
        v = -v

    g = gcd_list(nonzero)
    if g > 1:
        v = v // g
    return to_int_array(v)


def is_conserved(matrix: NDArray[np.int64], vector: NDArray[np.int64]) -> bool:
    """Check that every row of the matrix dotted with the vector is zero."""
    m = as_exact(matrix)
    x = as_exact(vector)
    if m.ndim != 2 or m.shape[1] != x.shape[0]:
        raise StructuralError(f"cannot apply vector of length {x.shape[0]} to matrix of shape {m.shape}")
    return all(int(row @ x) == 0 for row in m)
