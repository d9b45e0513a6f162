"""Exact-integer helpers."""

from __future__ import annotations

import numpy as np
import pytest

from chembalance.utils import (
    INT64_MAX,
    ArithmeticOverflow,
    StructuralError,
    gcd_list,
    is_conserved,
    lcm_div,
    normalize_vector,
    to_int_array,
)


def test_gcd_list():
    assert gcd_list([4, -6, 0, 10]) == 2
    assert gcd_list([0, 0]) == 0
    assert gcd_list([-7]) == 7


def test_lcm_div_cancels():
    for a, b in [(4, 6), (-3, 9), (5, -7), (0, 3)]:
        a_m, b_m = lcm_div(a, b)
        assert a * a_m - b * b_m == 0


@pytest.mark.parametrize(
    "v, expected",
    [
        ([2, -4, 0, 6], [1, -2, 0, 3]),
        ([-2, -4, 6], [1, 2, -3]),
        ([-1, 1], [1, -1]),          # tie: first nonzero decides
        ([0, -3, 3], [0, 1, -1]),
        ([4, 6, 8], [2, 3, 4]),
        ([0, 0], [0, 0]),
    ],
)
def test_normalize_vector(v, expected):
    out = normalize_vector(np.array(v, dtype=np.int64))
    assert out.tolist() == expected
    assert np.array_equal(normalize_vector(out), out)


def test_to_int_array_overflow():
    assert to_int_array([INT64_MAX, -INT64_MAX]).dtype == np.int64
    with pytest.raises(ArithmeticOverflow):
        to_int_array([INT64_MAX + 1])


def test_is_conserved():
    A = np.array([[2, 0, -2], [0, 2, -1]])
    assert is_conserved(A, np.array([2, 1, 2]))
    assert not is_conserved(A, np.array([1, 1, 1]))
    with pytest.raises(StructuralError):
        is_conserved(A, np.array([1, 1]))
