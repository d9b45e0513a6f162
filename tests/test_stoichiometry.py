"""Conservation matrix construction."""

from __future__ import annotations

import numpy as np
import pytest

from chembalance.stoichiometry import ConservationMatrix, build_matrix
from chembalance.terms import CHARGE_SYMBOL, ChemEq, Electron, Element, Group
from chembalance.utils import ArithmeticOverflow, StructuralError


def _eq(left, right):
    return ChemEq(list(left) + list(right), len(left))


def test_water_matrix():
    eq = _eq(
        [Group([Element("H", 2)]), Group([Element("O", 2)])],
        [Group([Element("H", 2), Element("O")])],
    )
    m = build_matrix(eq)

    assert m.symbols == ("H", "O")
    assert m.A.dtype == np.int64
    assert m.A.shape == (2, 3)
    assert m.n_symbols == 2 and m.n_terms == 3
    assert m.A.tolist() == [[2, 0, -2], [0, 2, -1]]


def test_charge_row():
    # Fe(3+) + e(-) -> Fe(2+)
    eq = _eq(
        [Group([Element("Fe")], 1, 3), Group([Electron()], 1, -1)],
        [Group([Element("Fe")], 1, 2)],
    )
    m = build_matrix(eq)

    rows = dict(zip(m.symbols, m.A.tolist()))
    assert rows["Fe"] == [1, 0, -1]
    assert rows[CHARGE_SYMBOL] == [3, -1, -2]


def test_right_side_sign_flipped():
    eq = _eq([Group([Element("C")])], [Group([Element("C", 3)]), Group([Element("C", 2)])])
    m = build_matrix(eq)
    assert m.A.tolist() == [[1, -3, -2]]


def test_no_symbols_gives_empty_rows():
    eq = _eq([Group([Electron()])], [Group([Electron()])])
    m = build_matrix(eq)
    assert m.A.shape == (0, 2)


def test_collapse_overflow_detected():
    big = 2 ** 40
    eq = _eq([Group([Group([Element("C", big)], big)])], [Group([Element("C")])])
    with pytest.raises(ArithmeticOverflow):
        build_matrix(eq)


def test_container_validates_shape():
    with pytest.raises(StructuralError):
        ConservationMatrix(A=np.array([1, 2, 3]))
    with pytest.raises(StructuralError):
        ConservationMatrix(A=np.zeros((2, 2), dtype=np.int64), symbols=("H",))
