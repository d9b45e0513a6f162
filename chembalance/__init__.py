"""Chemical equation balancing in exact integer arithmetic.

Core contract:
- input: term tree (ChemEq) split into left / right sides
- workflow: collapse terms -> conservation matrix -> fraction-free row
  reduction -> null space -> coefficients written back onto the terms

A coefficient vector x balances the equation iff A @ x == 0 for the
conservation matrix A (one row per element, plus one for charge).
"""

from .terms import CHARGE_SYMBOL, ChemEq, Electron, Element, Group, collapse
from .stoichiometry import ConservationMatrix, build_matrix
from .echelon import row_reduce
from .nullspace import Solution, SolutionKind, solve
from .parse import ParseError, parse_equation
from .api import BalanceResult, balance, balance_text
from .utils import ArithmeticOverflow, StructuralError
