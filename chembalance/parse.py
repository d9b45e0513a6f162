"""Equation text -> ChemEq.

Accepted syntax:
  2H2 + O2 -> H2O             sides split by '->', '=', '==>', '→'
  Ca(OH)2, K4[Fe(CN)6]        nested groups with counts
  CuSO4·5H2O, CuSO4.5H2O      hydrate separators '·', '.', '*'
  Fe(3+), SO4(2-), H(+)       charge suffix on a term
  e(-), e-                    free electron

Leading coefficients are accepted and dropped, since balancing recomputes them.
"""

from __future__ import annotations

from .terms import ChemEq, Electron, Element, Group, Term

HYDRATE_SEPARATORS = "·.*"
OPENERS = {"(": ")", "[": "]"}


class ParseError(ValueError):
    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} (at column {position + 1})")
        self.message = message
        self.position = position


class Parser:
    def __init__(self, src: str) -> None:
        self._src = src.strip()
        self._cursor = 0
        self._N = len(self._src)

    @property
    def src(self) -> str:
        return self._src

    def inc(self) -> None:
        self._cursor += 1

    def eof(self) -> bool:
        return self._cursor >= self._N

    def curr(self) -> str:
        if self.eof():
            return '\0'
        return self._src[self._cursor]

    def peek(self, offset: int = 1) -> str:
        i = self._cursor + offset
        return self._src[i] if i < self._N else '\0'

    def eat(self, c: str) -> bool:
        if self.curr() != c:
            return False
        self.inc()
        return True

    def expect(self, c: str) -> None:
        if not self.eat(c):
            raise self.error(f"expected '{c}'")

    def skip_ws(self) -> None:
        while self.curr().isspace():
            self.inc()

    def error(self, message: str) -> ParseError:
        found = "end of input" if self.eof() else repr(self.curr())
        return ParseError(f"{message}, found {found}", self._cursor)

    def parse_int(self) -> int:
        begin = self._cursor
        while self.curr().isdigit():
            self.inc()
        if begin == self._cursor:
            return 1
        n = int(self._src[begin:self._cursor])
        if n == 0:
            raise ParseError("zero coefficient", begin)
        return n

    def parse_element(self) -> Element:
        if not ('A' <= self.curr() <= 'Z'):
            raise self.error("element name must start with a capital letter")
        begin = self._cursor
        self.inc()
        while 'a' <= self.curr() <= 'z':
            self.inc()
        name = self._src[begin:self._cursor]
        return Element(name, self.parse_int())

    def at_charge(self) -> bool:
        if self.curr() != '(':
            return False
        i = 1
        while self.peek(i).isdigit():
            i += 1
        return self.peek(i) in '+-' and self.peek(i + 1) == ')'

    def parse_sub_term(self) -> Term:
        opener = self.curr()
        if opener in OPENERS:
            self.inc()
            members = self.parse_sub_terms()
            self.expect(OPENERS[opener])
            return Group(members, self.parse_int())
        return self.parse_element()

    def parse_sub_terms(self) -> list[Term]:
        members = [self.parse_sub_term()]
        while self.curr() in OPENERS or 'A' <= self.curr() <= 'Z':
            if self.at_charge():
                break
            members.append(self.parse_sub_term())
        return members

    def parse_charge(self) -> int:
        if not self.at_charge():
            return 0
        self.expect('(')
        n = self.parse_int()
        sign = -1 if self.curr() == '-' else 1
        self.inc()
        self.expect(')')
        return sign * n

    def at_electron(self) -> bool:
        if self.curr() != 'e':
            return False
        if self._src.startswith('(-)', self._cursor + 1):
            return True
        return self.peek() == '-' and self.peek(2) not in '->'

    def parse_term(self) -> Group:
        if self.curr().isdigit():
            self.parse_int()
            self.skip_ws()

        if self.at_electron():
            self.inc()
            if not self.eat('-'):
                self._cursor += 3
            return Group([Electron()], 1, -1)

        members = self.parse_sub_terms()
        while self.curr() in HYDRATE_SEPARATORS:
            self.inc()
            n = self.parse_int()
            members.append(Group(self.parse_sub_terms(), n))
        return Group(members, 1, self.parse_charge())

    def parse_side(self) -> list[Group]:
        terms = [self.parse_term()]
        self.skip_ws()
        while self.eat('+'):
            self.skip_ws()
            terms.append(self.parse_term())
            self.skip_ws()
        return terms

    def parse_arrow(self) -> None:
        if self.eat('→'):
            return
        if self.curr() == '=':
            while self.eat('='):
                pass
            self.eat('>')
            return
        if self.curr() == '-':
            while self.eat('-'):
                pass
            self.expect('>')
            return
        raise self.error("expected '->', '=' or '→'")

    def parse_equation(self) -> ChemEq:
        left = self.parse_side()
        self.skip_ws()
        self.parse_arrow()
        self.skip_ws()
        right = self.parse_side()
        if not self.eof():
            raise self.error("unexpected character")
        return ChemEq(terms=left + right, left_len=len(left))


def parse_equation(text: str) -> ChemEq:
    """Parse an equation such as 'Fe + O2 -> Fe2O3'.

    Raises:
        ParseError: with the 0-based position of the offending character.
    """
    return Parser(text).parse_equation()
