"""Errors raised by the literal parser."""

from enum import Enum


class ParseErrorKind(Enum):
    """Kinds of syntax errors in a table literal."""
    UNBALANCED_BRACE = "UnbalancedBrace"
    UNTERMINATED_STRING = "UnterminatedString"
    INVALID_NUMBER = "InvalidNumber"
    UNEXPECTED_TOKEN = "UnexpectedToken"
    TOO_DEEP = "TooDeep"


class ParseError(ValueError):
    """
    Malformed literal syntax.

    Attributes:
        kind: What went wrong
        offset: Character offset into the source text (0-based)
        line: Line number (1-based)
        column: Column number (1-based)
        detail: Description without the location prefix
    """

    def __init__(self, kind: ParseErrorKind, detail: str, offset: int, line: int, column: int):
        self.kind = kind
        self.detail = detail
        self.offset = offset
        self.line = line
        self.column = column
        super().__init__(f"{kind.value} at line {line}, column {column}: {detail}")
