"""Tokenizer for the Lua table-literal subset used by shape files."""

import math
import string
from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Tuple, Union

from .errors import ParseError, ParseErrorKind


class TokType(Enum):
    """Token types."""
    LBRACE = auto()     # {
    RBRACE = auto()     # }
    LBRACKET = auto()   # [
    RBRACKET = auto()   # ]
    COMMA = auto()      # ,
    SEMICOLON = auto()  # ;
    EQUALS = auto()     # =
    NUMBER = auto()
    STRING = auto()
    IDENTIFIER = auto()
    COMMENT = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    type: TokType
    text: str
    offset: int
    line: int
    column: int
    value: Union[float, str, None] = None


PUNCTUATION = {
    "{": TokType.LBRACE,
    "}": TokType.RBRACE,
    "[": TokType.LBRACKET,
    "]": TokType.RBRACKET,
    ",": TokType.COMMA,
    ";": TokType.SEMICOLON,
    "=": TokType.EQUALS,
}

WHITESPACE = " \t\r\n\f\v"
LINE_ENDS = "\r\n"
IDENT_START = frozenset(string.ascii_letters + "_")
IDENT_CHARS = frozenset(string.ascii_letters + string.digits + "_")
DIGITS = frozenset(string.digits)
HEX_DIGITS = frozenset(string.hexdigits)
# Characters that may not directly follow a number
NUMBER_TAIL = IDENT_CHARS | {"."}

ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "\\": "\\",
    '"': '"',
    "'": "'",
    "\n": "\n",
}


class Tokenizer:
    """Splits literal source text into tokens, comments included."""

    def __init__(self, text: str):
        self.text = text
        self._pos = 0
        self._line_starts = [0]
        for i, ch in enumerate(text):
            # \n, \r\n and a lone \r all end a line
            if ch == "\n" or (ch == "\r" and text[i + 1:i + 2] != "\n"):
                self._line_starts.append(i + 1)

    def location(self, offset: int) -> Tuple[int, int]:
        """Get the (line, column) of a character offset, both 1-based."""
        line_idx = bisect_right(self._line_starts, offset) - 1
        return line_idx + 1, offset - self._line_starts[line_idx] + 1

    def error(self, kind: ParseErrorKind, detail: str, offset: int) -> ParseError:
        line, column = self.location(offset)
        return ParseError(kind, detail, offset, line, column)

    def tokenize(self) -> List[Token]:
        """
        Tokenize the whole text.

        Returns:
            The token list, always terminated by an EOF token

        Raises:
            ParseError: On unterminated strings, malformed numbers or
                characters that cannot start any token
        """
        tokens: List[Token] = []
        text = self.text
        n = len(text)

        # Editors on Windows like to prepend a byte order mark
        if text.startswith("\ufeff"):
            self._pos = 1

        while self._pos < n:
            ch = text[self._pos]

            if ch in WHITESPACE:
                self._pos += 1
                continue

            if text.startswith("--", self._pos):
                tokens.append(self._read_comment())
                continue

            if ch in PUNCTUATION:
                tokens.append(self._make(PUNCTUATION[ch], self._pos, self._pos + 1))
                self._pos += 1
                continue

            if ch == '"' or ch == "'":
                tokens.append(self._read_string())
                continue

            if ch in DIGITS or ch == "-" or (ch == "." and self._peek_char(1) in DIGITS):
                tokens.append(self._read_number())
                continue

            if ch in IDENT_START:
                tokens.append(self._read_identifier())
                continue

            raise self.error(
                ParseErrorKind.UNEXPECTED_TOKEN, f"unexpected character {ch!r}", self._pos
            )

        tokens.append(self._make(TokType.EOF, n, n))
        return tokens

    def _peek_char(self, ahead: int = 0) -> str:
        idx = self._pos + ahead
        return self.text[idx] if idx < len(self.text) else ""

    def _make(self, tok_type: TokType, start: int, end: int, value=None) -> Token:
        line, column = self.location(start)
        return Token(tok_type, self.text[start:end], start, line, column, value)

    def _read_comment(self) -> Token:
        start = self._pos
        end = start
        while end < len(self.text) and self.text[end] not in LINE_ENDS:
            end += 1
        self._pos = end
        body = self.text[start + 2:end].strip()
        return self._make(TokType.COMMENT, start, end, body)

    def _read_identifier(self) -> Token:
        start = self._pos
        while self._pos < len(self.text) and self.text[self._pos] in IDENT_CHARS:
            self._pos += 1
        return self._make(TokType.IDENTIFIER, start, self._pos, self.text[start:self._pos])

    def _read_number(self) -> Token:
        text = self.text
        start = self._pos
        pos = start
        if text[pos] == "-":
            pos += 1

        if text.startswith(("0x", "0X"), pos):
            digits_start = pos + 2
            pos = self._skip(digits_start, HEX_DIGITS)
            if pos == digits_start:
                raise self._invalid_number(start, pos)
            self._check_number_end(start, pos)
            try:
                value = float(int(text[digits_start:pos], 16))
            except OverflowError:
                value = math.inf
            if text[start] == "-":
                value = -value
        else:
            int_start = pos
            pos = self._skip(pos, DIGITS)
            digits = pos - int_start
            if text.startswith(".", pos):
                frac_start = pos + 1
                pos = self._skip(frac_start, DIGITS)
                digits += pos - frac_start
            if digits == 0:
                raise self._invalid_number(start, pos)
            if pos < len(text) and text[pos] in "eE":
                pos += 1
                if pos < len(text) and text[pos] in "+-":
                    pos += 1
                exp_start = pos
                pos = self._skip(pos, DIGITS)
                if pos == exp_start:
                    raise self._invalid_number(start, pos)
            self._check_number_end(start, pos)
            value = float(text[start:pos])

        if not math.isfinite(value):
            raise self.error(
                ParseErrorKind.INVALID_NUMBER,
                f"number out of range: {text[start:pos]}",
                start,
            )

        self._pos = pos
        return self._make(TokType.NUMBER, start, pos, value)

    def _skip(self, pos: int, allowed: frozenset) -> int:
        while pos < len(self.text) and self.text[pos] in allowed:
            pos += 1
        return pos

    def _check_number_end(self, start: int, pos: int) -> None:
        if pos < len(self.text) and self.text[pos] in NUMBER_TAIL:
            raise self._invalid_number(start, self._skip(pos, NUMBER_TAIL))

    def _invalid_number(self, start: int, end: int) -> ParseError:
        spelled = self.text[start:max(end, start + 1)]
        return self.error(ParseErrorKind.INVALID_NUMBER, f"malformed number {spelled!r}", start)

    def _read_string(self) -> Token:
        text = self.text
        start = self._pos
        quote = text[start]
        pos = start + 1
        chars: List[str] = []

        while True:
            if pos >= len(text) or text[pos] in LINE_ENDS:
                raise self.error(
                    ParseErrorKind.UNTERMINATED_STRING, "unfinished string", start
                )
            ch = text[pos]
            if ch == quote:
                pos += 1
                break
            if ch != "\\":
                chars.append(ch)
                pos += 1
                continue

            # Escape sequence
            pos += 1
            if pos >= len(text):
                raise self.error(
                    ParseErrorKind.UNTERMINATED_STRING, "unfinished string", start
                )
            esc = text[pos]
            if esc in ESCAPES:
                chars.append(ESCAPES[esc])
                pos += 1
            elif esc in DIGITS:
                end = pos
                while end < len(text) and end - pos < 3 and text[end] in DIGITS:
                    end += 1
                code = int(text[pos:end])
                if code > 255:
                    raise self.error(
                        ParseErrorKind.UNEXPECTED_TOKEN, "decimal escape too large", pos - 1
                    )
                chars.append(chr(code))
                pos = end
            elif esc == "x" and self._skip(pos + 1, HEX_DIGITS) >= pos + 3:
                chars.append(chr(int(text[pos + 1:pos + 3], 16)))
                pos += 3
            else:
                raise self.error(
                    ParseErrorKind.UNEXPECTED_TOKEN, f"invalid escape sequence '\\{esc}'", pos - 1
                )

        self._pos = pos
        return self._make(TokType.STRING, start, pos, "".join(chars))
