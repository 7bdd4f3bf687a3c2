"""Runtime knobs, read once from the environment at import."""
import os

DEBUG = bool(os.getenv("DEBUG", False))

# Deepest chain of nested sub-expressions (parens and unary operators) the
# parser will recurse into before giving up with TooDeep.
MAX_DEPTH = int(os.getenv("CALC_MAX_DEPTH", 256))

# Width of the signed integers expressions are evaluated in.
INT_BITS = int(os.getenv("CALC_INT_BITS", 64))


def int_range(bits):
    """Return the inclusive (min, max) range of a signed `bits`-wide integer.

    >>> int_range(8)
    (-128, 127)
    """
    if bits < 1:
        raise ValueError(f"integer width must be a positive number of bits, got {bits}")
    return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


int_range(INT_BITS)  # reject a bad CALC_INT_BITS up front
