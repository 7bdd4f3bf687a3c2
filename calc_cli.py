"""Evaluate expressions given on the command line, or one per line of stdin.

Expressions starting with a sign need a `--` in front of them so they are
not taken for options: `calc -- -2*3`.
"""
import argparse
import logging
import sys

import calc_config
from calc_errors import EvaluationError, format_error
from calc_eval import evaluate

logger = logging.getLogger(__name__)


def positive_int(text):
    n = int(text)
    if n < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {n}")
    return n


def build_parser():
    parser = argparse.ArgumentParser(description="Integer arithmetic expression evaluator")
    parser.add_argument(
        "expression", nargs="*", help="expression to evaluate (default: read lines from stdin)"
    )
    parser.add_argument(
        "--max-depth",
        type=positive_int,
        default=calc_config.MAX_DEPTH,
        help="deepest nesting of parens and signs accepted",
    )
    parser.add_argument(
        "--int-bits",
        type=positive_int,
        default=calc_config.INT_BITS,
        help="width of the signed integers to evaluate in",
    )
    parser.add_argument("--debug", action="store_true", default=calc_config.DEBUG)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if args.expression:
        lines = [" ".join(args.expression)]
    else:
        lines = (line.rstrip("\r\n") for line in sys.stdin if line.strip())

    failures = 0
    for line in lines:
        try:
            ans = evaluate(line, max_depth=args.max_depth, int_bits=args.int_bits)
        except EvaluationError as err:
            failures += 1
            logger.debug("%s while evaluating %r", err.kind, line)
            print(format_error(err, line), file=sys.stderr)
        else:
            print(ans, flush=True)
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
