"""Command line front end.

Usage:
    chembalance "Fe + O2 -> Fe2O3"
    chembalance --steps "KMnO4 + HCl -> KCl + MnCl2 + H2O + Cl2"
    chembalance            # read equations from stdin, one per line
"""

from __future__ import annotations

import argparse
import logging
import sys

from .api import BalanceResult, balance
from .fmt import format_conservation_matrix, format_equation, format_matrix
from .nullspace import SolutionKind
from .parse import ParseError, parse_equation
from .utils import ArithmeticOverflow, StructuralError


def print_steps(res: BalanceResult) -> None:
    print("\n----- CONSERVATION MATRIX -----")
    print(format_conservation_matrix(res.matrix))
    print("\n----- ROW REDUCTION -----")
    print(format_matrix(res.reduced))
    print(f"rank = {res.rank}")
    print()


def report(res: BalanceResult, *, keep_ones: bool = False) -> None:
    sol = res.solution
    if sol.kind is SolutionKind.NONE:
        print("This equation has no solution.")
    elif sol.kind is SolutionKind.UNIQUE:
        print(format_equation(res.eq, keep_ones=keep_ones))
        if res.ill_coefficients:
            print("warning: non-positive coefficient; conserved, but not a real reaction")
    else:
        print(f"Infinitely many solutions: a combination of {sol.dimension} independent ones.")
        print("One possible basis:")
        for v in sol.basis:
            res.eq.set_coefficients(v.tolist())
            print("  " + format_equation(res.eq, keep_ones=keep_ones))


def run_one(text: str, args: argparse.Namespace) -> bool:
    """Balance and print one equation; False if it could not be handled."""
    try:
        eq = parse_equation(text)
    except ParseError as e:
        src = text.strip()
        print(f"error: {e.message}")
        print(f"  {src}")
        print("  " + " " * e.position + "^")
        return False

    if args.steps:
        print(f"\nInput: {format_equation(eq)}")

    try:
        res = balance(eq, verify=args.verify)
    except (StructuralError, ArithmeticOverflow) as e:
        print(f"error: {e}")
        return False

    if args.steps:
        print_steps(res)
    report(res, keep_ones=args.keep_ones)
    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="chembalance", description="Balance chemical equations")
    parser.add_argument("equation", nargs="?", help="equation to balance; read stdin lines if omitted")
    parser.add_argument("--steps", action="store_true", help="show the matrix, its reduction and rank")
    parser.add_argument("--keep-ones", action="store_true", help="print coefficients equal to 1")
    parser.add_argument("--verify", action="store_true", help="cross-check against exact sympy rank")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    args = parser.parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if args.equation is not None:
        return 0 if run_one(args.equation, args) else 1

    for line in sys.stdin:
        if not line.strip():
            continue
        run_one(line, args)
        print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
