"""Everything `calc_eval.evaluate` can raise, plus a caret renderer for it."""


class EvaluationError(Exception):
    category = "Evaluation"

    def __init__(self, message, pos=None, token=None):
        super().__init__(message)
        self.pos = pos
        self.token = token

    @property
    def kind(self):
        return type(self).__name__


class LexError(EvaluationError):
    category = "Lexical"


class InvalidCharacter(LexError):
    def __init__(self, char, pos):
        super().__init__(f"invalid character {char!r}", pos)
        self.char = char


class InvalidNumber(LexError):
    pass


class ParseError(EvaluationError):
    category = "Syntax"


class UnexpectedToken(ParseError):
    pass


class UnmatchedParen(ParseError):
    pass


class TrailingTokens(ParseError):
    pass


class TooDeep(ParseError):
    pass


class EvalError(EvaluationError):
    category = "Arithmetic"


class DivisionByZero(EvalError):
    pass


class Overflow(EvalError):
    pass


def format_error(err, source):
    """Render `err` with `source` and a caret line under the offending token.

    >>> print(format_error(InvalidCharacter("x", 4), "1 + x"))
    Lexical error: invalid character 'x'
    1 + x
        ^
    """
    message = f"{err.category} error: {err}"
    if err.pos is None:
        return f"{message}\n{source}"
    width = len(err.token.text) if err.token is not None and err.token.text else 1
    return f"{message}\n{source}\n{' ' * err.pos}{'^' * width}"
