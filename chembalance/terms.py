"""Term model of a chemical equation.

A term is a tree:
  Element  - symbol with an atom count inside its parent group
  Electron - a bare e-, charged through its enclosing group
  Group    - ordered members with a multiplier and a net charge

A ChemEq is an ordered list of top-level Groups; the first `left_len`
belong to the reactant side, the rest to the product side.

collapse() flattens one term into per-symbol signed counts. Electric
charge is tallied under CHARGE_SYMBOL, which is lowercase so it never
collides with an element symbol.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Union

from .utils import StructuralError

CHARGE_SYMBOL = "c"


@dataclass(frozen=True)
class Element:
    name: str
    count: int = 1


@dataclass(frozen=True)
class Electron:
    pass


@dataclass
class Group:
    members: list[Term] = field(default_factory=list)
    multiplier: int = 1
    charge: int = 0


Term = Union[Element, Electron, Group]


def collapse(term: Term, tally: dict[str, int] | None = None, m: int = 1) -> dict[str, int]:
    """Accumulate the signed symbol counts of `term` scaled by `m` into `tally`.

    Returns the tally (a new dict when none is given).
    """
    if tally is None:
        tally = {}

    if isinstance(term, Element):
        tally[term.name] = tally.get(term.name, 0) + m * term.count
    elif isinstance(term, Group):
        for member in term.members:
            collapse(member, tally, m * term.multiplier)
        if term.charge != 0:
            tally[CHARGE_SYMBOL] = tally.get(CHARGE_SYMBOL, 0) + m * term.charge
    elif not isinstance(term, Electron):
        raise StructuralError(f"not a term: {term!r}")

    return tally


@dataclass
class ChemEq:
    """A chemical equation: top-level groups split into left and right sides."""

    terms: list[Group]
    left_len: int

    def __post_init__(self):
        n = len(self.terms)
        if not 1 <= self.left_len < n:
            raise StructuralError(f"left_len={self.left_len} must satisfy 1 <= left_len < {n}")
        for i, term in enumerate(self.terms):
            if not isinstance(term, Group):
                raise StructuralError(f"top-level term {i} is {type(term).__name__}, expected Group")

    @property
    def left(self) -> list[Group]:
        return self.terms[: self.left_len]

    @property
    def right(self) -> list[Group]:
        return self.terms[self.left_len:]

    def is_left(self, i: int) -> bool:
        return i < self.left_len

    def coefficients(self) -> list[int]:
        return [t.multiplier for t in self.terms]

    def set_coefficients(self, coefs: Sequence[int]) -> bool:
        """Write `coefs` onto the top-level multipliers, in column order.

        Returns:
            True if any coefficient is non-positive. The assignment is still
            made; such an equation is conserved but not chemically meaningful.
        """
        if len(coefs) != len(self.terms):
            raise StructuralError(f"got {len(coefs)} coefficients for {len(self.terms)} terms")

        ill_coef = False
        for i, (term, coef) in enumerate(zip(self.terms, coefs)):
            if not isinstance(term, Group):
                raise StructuralError(f"top-level term {i} is {type(term).__name__}, expected Group")
            term.multiplier = int(coef)
            if coef <= 0:
                ill_coef = True
        return ill_coef
