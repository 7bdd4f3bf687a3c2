import logging
import re
import operator
from typing import Callable, Literal, NamedTuple, Optional

import calc_config
from calc_errors import (
    InvalidCharacter,
    InvalidNumber,
    TooDeep,
    TrailingTokens,
    UnexpectedToken,
    UnmatchedParen,
)

logger = logging.getLogger(__name__)

NUM = "num"
EOF = "eof"


class Token(NamedTuple):
    kind: str  # NUM, EOF, or the operator/paren symbol itself
    text: str
    pos: int
    value: Optional[int] = None

    def __repr__(self):
        return f"tok({self.text or self.kind}@{self.pos})"


TOKEN_REX = re.compile(r"(?P<num>[0-9]+)|(?P<sym>[-+*/()])|(?P<ws>\s+)|(?P<bad>.)", re.S)


def parse_num(text, pos):
    try:
        return int(text)
    except ValueError:  # longer than the interpreter will convert
        raise InvalidNumber(f"number literal of {len(text)} digits", pos) from None


def lex(s):
    """Yield the tokens of `s`, always ending with a single EOF token.

    Signs are not attached to numbers; whether a `+`/`-` is unary or binary
    is left to the parser.

    >>> [t.text for t in lex(" 12*(3 - -4) ")]
    ['12', '*', '(', '3', '-', '-', '4', ')', '']
    """
    for m in TOKEN_REX.finditer(s):
        kind, text, pos = m.lastgroup, m.group(), m.start()
        if kind == "num":
            yield Token(NUM, text, pos, parse_num(text, pos))
        elif kind == "sym":
            yield Token(text, text, pos)
        elif kind == "bad":
            raise InvalidCharacter(text, pos)
    yield Token(EOF, "", len(s))


def tokenize(s):
    return list(lex(s))


class Op(NamedTuple):
    op: str
    prec: int
    assoc: Literal["l", "r", "u"]  # left-associative, right-associative, unary
    fun: Callable

    def __call__(self, *args):
        return self.fun(*args)

    def __repr__(self):
        return f"op({self.op!r:})"

    def arity(self):
        return 1 if self.assoc == "u" else 2


def truncdiv(a, b):
    """Integer division rounding toward zero.

    >>> truncdiv(-7, 2), truncdiv(7, -2), truncdiv(7, 2)
    (-3, -3, 3)
    """
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


# One precedence group per line, lowest first.
OP_GROUPS = """
add+l sub-l
truncdiv/l mul*l
neg-u pos+u
""".strip()
_FUNS = {"truncdiv": truncdiv}
_ALL_OPS = [
    Op(o, prec, assoc, _FUNS.get(fun) or getattr(operator, fun))
    for prec, op_groups in enumerate(OP_GROUPS.split("\n"), start=1)
    for [(fun, o, assoc)] in map(
        re.compile(r"^(\w+)(\W+)(\w+)$").findall, op_groups.split()
    )
]
BINARY_OPS = {o.op: o for o in _ALL_OPS if o.assoc != "u"}
UNARY_OPS = {o.op: o for o in _ALL_OPS if o.assoc == "u"}

assert min(o.prec for o in UNARY_OPS.values()) > max(
    o.prec for o in BINARY_OPS.values()
), "prefix operators must bind tighter than any infix operator"


def binary_info(token, table=BINARY_OPS):
    return table.get(token.kind)


def unary_info(token, table=UNARY_OPS):
    return table.get(token.kind)


def is_unary_prefix_capable(token, table=UNARY_OPS):
    return token.kind in table


def describe(token):
    return "end of input" if token.kind == EOF else repr(token.text)


class Parser:
    """Precedence-climbing parser over a token list ending in EOF.

    Produces a tree of tuples: an int leaf, `(op, operand)` for prefix
    operators and `(op, lhs, rhs)` for infix ones. A parser instance parses
    exactly once.
    """

    def __init__(self, tokens, binary_ops=BINARY_OPS, unary_ops=UNARY_OPS, max_depth=None):
        if not tokens or tokens[-1].kind != EOF:
            raise ValueError("token list must end with an EOF token")
        self.tokens = tokens
        self.binary_ops = binary_ops
        self.unary_ops = unary_ops
        self.max_depth = calc_config.MAX_DEPTH if max_depth is None else max_depth
        self.pos = 0
        self.depth = 0
        self.deepest = 0

    @property
    def token(self):
        return self.tokens[self.pos]

    def advance(self):
        token = self.tokens[self.pos]
        if token.kind != EOF:
            self.pos += 1
        return token

    def parse(self):
        try:
            tree = self.parse_expr(0)
        except RecursionError:
            # max_depth set beyond what the interpreter stack can hold
            raise TooDeep(
                "expression nested deeper than the interpreter allows",
                self.token.pos,
                self.token,
            ) from None
        if self.token.kind != EOF:
            raise TrailingTokens(
                f"unexpected {describe(self.token)} after a complete expression",
                self.token.pos,
                self.token,
            )
        logger.debug("parsed %d tokens, nesting %d deep", len(self.tokens), self.deepest)
        return tree

    def parse_expr(self, min_prec):
        self.depth += 1
        self.deepest = max(self.deepest, self.depth)
        try:
            if self.depth > self.max_depth:
                raise TooDeep(
                    f"expression nested deeper than {self.max_depth} levels",
                    self.token.pos,
                    self.token,
                )
            lhs = self.parse_atom()
            while (op := binary_info(self.token, self.binary_ops)) and op.prec >= min_prec:
                self.advance()
                rhs = self.parse_expr(op.prec + 1 if op.assoc == "l" else op.prec)
                lhs = (op, lhs, rhs)
            return lhs
        finally:
            self.depth -= 1

    def parse_atom(self):
        token = self.token
        if op := unary_info(token, self.unary_ops):
            self.advance()
            return (op, self.parse_expr(op.prec))
        if token.kind == "(":
            self.advance()
            inner = self.parse_expr(0)
            if self.token.kind != ")":
                raise UnmatchedParen(
                    f"expected ')' to close '(' at {token.pos}, got {describe(self.token)}",
                    self.token.pos,
                    self.token,
                )
            self.advance()
            return inner
        if token.kind == NUM:
            self.advance()
            return token.value
        raise UnexpectedToken(
            f"expected a number, '(' or a sign, got {describe(token)}", token.pos, token
        )


def to_ast(s, **kwargs):
    """Parse `s` into a syntax tree without evaluating it.

    >>> to_ast("1 + 2 * 3")
    (op('+'), 1, (op('*'), 2, 3))
    >>> to_ast("-2 * 3")
    (op('*'), (op('-'), 2), 3)
    """
    return Parser(tokenize(s), **kwargs).parse()
