from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .terms import ChemEq, collapse
from .utils import StructuralError, to_int_array

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConservationMatrix:
    """Conservation matrix of an equation.

    Layout:
      A[s, t] = signed count of symbol s contributed by term t
      (positive on the left side, negative on the right side)

    Shapes:
      A: (n_symbols, n_terms)
      symbols: (n_symbols,) row labels, in order of first encounter

    A coefficient vector x balances the equation iff A @ x == 0.
    """

    A: np.ndarray
    symbols: tuple[str, ...] = ()

    def __post_init__(self):
        A = to_int_array(self.A)
        if A.ndim != 2:
            raise StructuralError(f"conservation matrix must be 2-D, got shape {A.shape}")
        object.__setattr__(self, "A", A)
        symbols = tuple(self.symbols)
        if symbols and len(symbols) != A.shape[0]:
            raise StructuralError(f"{len(symbols)} symbols for {A.shape[0]} rows")
        object.__setattr__(self, "symbols", symbols)

    @property
    def n_symbols(self) -> int:
        return int(self.A.shape[0])

    @property
    def n_terms(self) -> int:
        return int(self.A.shape[1])

    def copy_array(self) -> np.ndarray:
        return self.A.copy()


def build_matrix(eq: ChemEq) -> ConservationMatrix:
    """Build the conservation matrix of `eq`.

    One column per top-level term, one row per distinct symbol (elements and
    the charge pseudo-symbol). Rows are created on first encounter.
    """
    n_terms = len(eq.terms)
    rows: dict[str, list[int]] = {}

    for i, term in enumerate(eq.terms):
        tally = collapse(term)
        sign = 1 if eq.is_left(i) else -1
        for symbol, n in tally.items():
            row = rows.setdefault(symbol, [0] * n_terms)
            row[i] = sign * n

    if rows:
        A = to_int_array(list(rows.values()))
    else:
        A = np.zeros((0, n_terms), dtype=np.int64)

    out = ConservationMatrix(A=A, symbols=tuple(rows))
    log.debug("built %dx%d conservation matrix over %s", out.n_symbols, out.n_terms, out.symbols)
    return out
