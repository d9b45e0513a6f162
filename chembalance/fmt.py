"""Human-readable rendering of terms, equations and matrices.

Top-level coefficients are plain digits; counts inside a term are
subscripts; charges are superscripts followed by a sign.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .stoichiometry import ConservationMatrix
from .terms import ChemEq, Electron, Element, Group, Term

SUBSCRIPTS = str.maketrans("0123456789-", "₀₁₂₃₄₅₆₇₈₉₋")
SUPERSCRIPTS = str.maketrans("0123456789", "⁰¹²³⁴⁵⁶⁷⁸⁹")


def _sub(n: int) -> str:
    return "" if n == 1 else str(n).translate(SUBSCRIPTS)


def _charge(charge: int) -> str:
    if charge == 0:
        return ""
    mag = abs(charge)
    digits = "" if mag == 1 else str(mag).translate(SUPERSCRIPTS)
    return digits + ("⁻" if charge < 0 else "⁺")


def _fmt(term: Term, nested: bool) -> str:
    if isinstance(term, Element):
        return term.name + _sub(term.count)
    if isinstance(term, Electron):
        return "e"
    body = "".join(_fmt(t, True) for t in term.members)
    if nested:
        body = f"({body}){_sub(term.multiplier)}"
    return body + _charge(term.charge)


def format_term(term: Term, *, keep_ones: bool = False) -> str:
    """Format one term; a top-level group gets its multiplier as a prefix."""
    if not isinstance(term, Group):
        return _fmt(term, True)
    n = term.multiplier
    prefix = str(n) if (n != 1 or keep_ones) else ""
    return prefix + _fmt(term, False)


def format_equation(eq: ChemEq, *, keep_ones: bool = False) -> str:
    left = " + ".join(format_term(t, keep_ones=keep_ones) for t in eq.left)
    right = " + ".join(format_term(t, keep_ones=keep_ones) for t in eq.right)
    return f"{left} -> {right}"


def format_matrix(A: np.ndarray, symbols: Sequence[str] = ()) -> str:
    """Right-aligned grid, one line per row, optionally labelled."""
    A = np.asarray(A)
    if A.size == 0:
        return "[]"
    width = max(len(str(int(x))) for x in A.flat)
    label_w = max((len(s) for s in symbols), default=0)
    lines = []
    for i, row in enumerate(A):
        cells = " ".join(str(int(x)).rjust(width) for x in row)
        label = f"{symbols[i]:>{label_w}} | " if symbols else ""
        lines.append(f"{label}[{cells}]")
    return "\n".join(lines)


def format_conservation_matrix(matrix: ConservationMatrix) -> str:
    return format_matrix(matrix.A, matrix.symbols)
