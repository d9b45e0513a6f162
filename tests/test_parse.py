"""Equation text parsing."""

from __future__ import annotations

import pytest

from chembalance.parse import ParseError, parse_equation
from chembalance.terms import Electron, Element, Group


def test_simple_equation():
    eq = parse_equation("H2 + O2 -> H2O")
    assert eq.left_len == 2
    assert eq.terms == [
        Group([Element("H", 2)]),
        Group([Element("O", 2)]),
        Group([Element("H", 2), Element("O", 1)]),
    ]


@pytest.mark.parametrize("arrow", ["->", "-->", "=", "==", "=>", "→"])
def test_arrows(arrow):
    eq = parse_equation(f"H2 + O2 {arrow} H2O")
    assert eq.left_len == 2 and len(eq.terms) == 3


def test_no_spaces():
    eq = parse_equation("H2+O2->H2O")
    assert eq.left_len == 2 and len(eq.terms) == 3


def test_leading_coefficients_are_dropped():
    eq = parse_equation("2H2 + O2 -> 2 H2O")
    assert eq.coefficients() == [1, 1, 1]


def test_nested_groups():
    eq = parse_equation("Ca(OH)2 -> K4[Fe(CN)6]")
    assert eq.terms[0] == Group([Element("Ca"), Group([Element("O"), Element("H")], 2)])
    assert eq.terms[1] == Group([
        Element("K", 4),
        Group([Element("Fe"), Group([Element("C"), Element("N")], 6)], 1),
    ])


@pytest.mark.parametrize("sep", ["·", ".", "*"])
def test_hydrate(sep):
    eq = parse_equation(f"CuSO4{sep}5H2O -> CuSO4 + H2O")
    assert eq.terms[0] == Group([
        Element("Cu"), Element("S"), Element("O", 4),
        Group([Element("H", 2), Element("O")], 5),
    ])


def test_charges_and_electrons():
    eq = parse_equation("Fe(3+) + e(-) -> Fe(2+)")
    assert eq.terms[0] == Group([Element("Fe")], 1, 3)
    assert eq.terms[1] == Group([Electron()], 1, -1)
    assert eq.terms[2] == Group([Element("Fe")], 1, 2)


def test_unit_charges_and_short_electron():
    eq = parse_equation("H(+) + e- -> H")
    assert eq.terms[0].charge == 1
    assert eq.terms[1] == Group([Electron()], 1, -1)


def test_polyatomic_ion_charge():
    eq = parse_equation("SO4(2-) + Ba(2+) -> BaSO4")
    assert eq.terms[0] == Group([Element("S"), Element("O", 4)], 1, -2)


@pytest.mark.parametrize(
    "text, position",
    [
        ("h2 -> H2", 0),
        ("H0 -> H", 1),
        ("H2 O2", 3),
        ("H2 + -> H2", 5),
        ("H2 ->", 5),
        ("(H2 -> H2", 3),
        ("H2 -> H2 )", 9),
    ],
)
def test_errors_report_position(text, position):
    with pytest.raises(ParseError) as info:
        parse_equation(text)
    assert info.value.position == position


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        parse_equation("")
