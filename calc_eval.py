"""Evaluation of arithmetic expressions over fixed-width signed integers.

`evaluate` is the one entry point: it tokenizes, parses and runs an
expression, returning an int or raising a `calc_errors.EvaluationError`.
Every call works on its own tokens and parser, so concurrent calls share
nothing but the read-only operator tables.
"""
import logging

import calc_config
from calc_config import int_range
from calc_errors import DivisionByZero, Overflow
from calc_parser import Op, Parser, tokenize, truncdiv

logger = logging.getLogger(__name__)


def show(op, args):
    return f"{op.op}{args[0]}" if op.arity() == 1 else f"{args[0]} {op.op} {args[1]}"


def apply(op, *args, bits=None):
    """Apply `op` to `args`, refusing results outside the `bits`-wide range.

    >>> from calc_parser import BINARY_OPS
    >>> apply(BINARY_OPS["-"], 2, 5)
    -3
    >>> apply(BINARY_OPS["+"], 127, 1, bits=8)
    Traceback (most recent call last):
    ...
    calc_errors.Overflow: 127 + 1 = 128 does not fit in 8 bits
    """
    bits = calc_config.INT_BITS if bits is None else bits
    if op.fun is truncdiv and args[1] == 0:
        raise DivisionByZero(f"{show(op, args)}: division by zero")
    lo, hi = int_range(bits)
    if not lo <= (ans := op(*args)) <= hi:
        raise Overflow(f"{show(op, args)} = {ans} does not fit in {bits} bits")
    return ans


def run(tree, bits=None):
    """Evaluate a tree built by `calc_parser.Parser`.

    Works off an explicit stack: a left-associative chain like `1+1+...+1`
    yields a tree as deep as the chain is long.

    >>> from calc_parser import to_ast
    >>> run(to_ast("7 - -2 * 3"))
    13
    """
    bits = calc_config.INT_BITS if bits is None else bits
    lo, hi = int_range(bits)
    todo, values = [tree], []
    while todo:
        node = todo.pop()
        if isinstance(node, Op):
            n = node.arity()
            values[-n:] = [apply(node, *values[-n:], bits=bits)]
        elif isinstance(node, tuple):
            op, *args = node
            todo.append(op)
            todo.extend(reversed(args))
        elif lo <= node <= hi:
            values.append(node)
        else:
            raise Overflow(f"literal {node} does not fit in {bits} bits")
    (ans,) = values
    return ans


def evaluate(expression, max_depth=None, int_bits=None):
    """Evaluate the infix integer expression `expression`.

    >>> evaluate("2+3*4"), evaluate("(2+3)*4"), evaluate("-2-3")
    (14, 20, -5)
    >>> evaluate("5/0")
    Traceback (most recent call last):
    ...
    calc_errors.DivisionByZero: 5 / 0: division by zero
    """
    tokens = tokenize(expression)
    logger.debug("lexed %r into %d tokens", expression, len(tokens))
    tree = Parser(tokens, max_depth=max_depth).parse()
    ans = run(tree, bits=int_bits)
    logger.debug("%r = %d", expression, ans)
    return ans
