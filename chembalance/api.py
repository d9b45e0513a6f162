"""Public API for the balancing pipeline.

Standardized input:
- ChemEq term tree with its left/right split (from parse_equation() or built directly)

Pipeline:
  collapse terms -> conservation matrix -> fraction-free row reduction
  -> null-space solution -> coefficient assignment

This module defines:
- BalanceResult dataclass (keeps the intermediate matrices for diagnostics)
- balance() entrypoint
- balance_text() convenience wrapper around parse_equation()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .echelon import row_reduce
from .nullspace import Solution, SolutionKind, rational_rank, solve
from .parse import parse_equation
from .stoichiometry import ConservationMatrix, build_matrix
from .terms import ChemEq
from .utils import is_conserved

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceResult:
    eq: ChemEq                      # coefficients assigned when the solution is unique
    matrix: ConservationMatrix      # as built, before reduction
    reduced: NDArray[np.int64]      # row-echelon form
    rank: int
    solution: Solution
    ill_coefficients: bool = False  # some assigned coefficient is <= 0

    @property
    def balanced(self) -> bool:
        return self.solution.kind is SolutionKind.UNIQUE


def balance(eq: ChemEq, *, verify: bool = False) -> BalanceResult:
    """Balance `eq` in place and report every intermediate step.

    1) build the conservation matrix
    2) reduce it to row-echelon form (rank)
    3) solve the null space
    4) assign the unique solution, if any, onto eq

    Infinite families are not assigned; the caller picks a basis vector
    (or a combination) and calls eq.set_coefficients() itself.

    Args:
      verify: cross-check rank against sympy and conservation of every
        returned vector against the unreduced matrix

    Raises:
      StructuralError: the equation has no symbols at all
      ArithmeticOverflow: coefficients grow beyond int64
    """
    matrix = build_matrix(eq)
    log.debug("conservation matrix:\n%s", matrix.A)

    reduced = matrix.copy_array()
    rank = row_reduce(reduced)
    log.debug("reduced (rank %d):\n%s", rank, reduced)

    solution = solve(reduced, rank)

    if verify:
        _verify(matrix, rank, solution)

    ill = False
    if solution.kind is SolutionKind.UNIQUE:
        ill = eq.set_coefficients(solution.vector.tolist())
        if ill:
            log.warning("non-positive coefficient in %s", solution.vector.tolist())

    log.info("%s solution, rank %d over %d terms", solution.kind.value, rank, matrix.n_terms)
    return BalanceResult(
        eq=eq,
        matrix=matrix,
        reduced=reduced,
        rank=rank,
        solution=solution,
        ill_coefficients=ill,
    )


def balance_text(text: str, *, verify: bool = False) -> BalanceResult:
    """Parse `text` and balance it."""
    return balance(parse_equation(text), verify=verify)


def _verify(matrix: ConservationMatrix, rank: int, solution: Solution) -> None:
    expected = rational_rank(matrix.A)
    if rank != expected:
        raise RuntimeError(f"row_reduce found rank {rank}, sympy finds {expected}")
    if solution.dimension != matrix.n_terms - rank:
        raise RuntimeError(f"solution dimension {solution.dimension} for rank {rank}")
    for v in solution.basis:
        if not is_conserved(matrix.A, v):
            raise RuntimeError(f"vector {v.tolist()} does not conserve every symbol")
