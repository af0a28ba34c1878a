"""Recursive descent parser for Lua table literals."""

import logging
from typing import List, Optional, Tuple

from ..config import DEFAULT_CONFIG
from .errors import ParseError, ParseErrorKind
from .tokenizer import Token, Tokenizer, TokType
from .values import Identifier, Key, Number, String, Table, TableEntry, Value

logger = logging.getLogger(__name__)

# Entries of the tables one level inside the document (the shape entries).
# Older editor exports put the scale table and launcher_radial on their own
# line without a comma, so a line break separates entries at this depth.
LOOSE_SEPARATOR_DEPTH = 2

ENTRY_START = frozenset({
    TokType.LBRACE,
    TokType.LBRACKET,
    TokType.NUMBER,
    TokType.STRING,
    TokType.IDENTIFIER,
})


class LiteralParser:
    """
    Parser for the restricted Lua literal subset used by shape files.

    Grammar:
        document := table
        table    := '{' [entry (sep entry)* [sep]] '}'
        sep      := ',' | ';'
        entry    := [key '='] value
        key      := NAME | '[' (NUMBER | STRING) ']'
        value    := NUMBER | STRING | NAME | table

    Line comments are kept and attached to table entries: a comment on the
    line where the previous entry ended trails that entry, any other comment
    leads the next entry of the same table.

    Inside shape entries a line break may stand in for the separator, so
    files written by older exporters (``{1  --Name`` followed by the scale
    table on the next line) still load.
    """

    def __init__(self, text: str, max_depth: Optional[int] = None):
        self._tokenizer = Tokenizer(text)
        self._tokens: List[Token] = []
        self._pos = 0
        self._pending: List[Token] = []
        self._last: Optional[Token] = None
        self._missing_separators = 0
        self.max_depth = max_depth if max_depth is not None else DEFAULT_CONFIG.max_parse_depth

    @classmethod
    def parse(cls, text: str, max_depth: Optional[int] = None) -> Table:
        """
        Parse literal text into a value tree.

        Args:
            text: The source text
            max_depth: Deepest table nesting accepted

        Returns:
            The document's top-level table

        Raises:
            ParseError: If the text is not a well-formed table literal
        """
        return cls(text, max_depth)._parse_document()

    @classmethod
    def validate(cls, text: str, max_depth: Optional[int] = None) -> Tuple[bool, Optional[str]]:
        """
        Check the syntax of a literal without keeping the result.

        Returns:
            A tuple of (is_valid, error_message)
        """
        try:
            cls.parse(text, max_depth)
            return True, None
        except ParseError as e:
            return False, str(e)

    # -- token stream --------------------------------------------------

    def _peek(self) -> Token:
        """Get the next significant token, moving comments to the pending list."""
        while self._tokens[self._pos].type is TokType.COMMENT:
            self._pending.append(self._tokens[self._pos])
            self._pos += 1
        return self._tokens[self._pos]

    def _lookahead(self) -> Token:
        """Get the significant token after the one returned by _peek."""
        idx = self._pos + 1
        while self._tokens[idx].type is TokType.COMMENT:
            idx += 1
        return self._tokens[idx]

    def _next(self) -> Token:
        tok = self._peek()
        if tok.type is not TokType.EOF:
            self._pos += 1
        self._last = tok
        return tok

    def _expect(self, tok_type: TokType, what: str) -> Token:
        tok = self._peek()
        if tok.type is not tok_type:
            raise self._unexpected(tok, f"expected {what}")
        return self._next()

    def _error(self, kind: ParseErrorKind, detail: str, tok: Token) -> ParseError:
        return ParseError(kind, detail, tok.offset, tok.line, tok.column)

    def _unexpected(self, tok: Token, expected: str) -> ParseError:
        if tok.type is TokType.EOF:
            return self._error(
                ParseErrorKind.UNBALANCED_BRACE, f"unexpected end of input, {expected}", tok
            )
        return self._error(
            ParseErrorKind.UNEXPECTED_TOKEN, f"{expected}, found {tok.text!r}", tok
        )

    # -- grammar -------------------------------------------------------

    def _parse_document(self) -> Table:
        self._tokens = self._tokenizer.tokenize()

        tok = self._peek()
        if tok.type is TokType.RBRACE:
            raise self._error(ParseErrorKind.UNBALANCED_BRACE, "unmatched '}'", tok)
        if tok.type is not TokType.LBRACE:
            if tok.type is TokType.EOF:
                raise self._error(
                    ParseErrorKind.UNEXPECTED_TOKEN, "empty document, expected '{'", tok
                )
            raise self._unexpected(tok, "expected '{' to start the document")
        # File header comments belong to no entry
        self._pending.clear()

        table = self._parse_table(depth=1)

        tok = self._peek()
        if self._pending:
            logger.debug(f"Dropping {len(self._pending)} comment(s) after the document")
            self._pending.clear()
        if tok.type is TokType.RBRACE:
            raise self._error(ParseErrorKind.UNBALANCED_BRACE, "unmatched '}'", tok)
        if tok.type is not TokType.EOF:
            raise self._unexpected(tok, "expected end of input after the document")

        if self._missing_separators:
            logger.debug(
                f"Accepted {self._missing_separators} line break(s) in place of ',' "
                f"inside shape entries"
            )
        logger.debug(f"Parsed literal with {len(table)} top-level entries")
        return table

    def _parse_table(self, depth: int) -> Table:
        open_tok = self._expect(TokType.LBRACE, "'{'")
        if depth > self.max_depth:
            raise self._error(
                ParseErrorKind.TOO_DEEP,
                f"tables nested deeper than {self.max_depth} levels",
                open_tok,
            )

        table = Table(line=open_tok.line, column=open_tok.column)
        leading: List[str] = []

        while True:
            tok = self._peek()
            self._attach_comments(table, leading)
            if tok.type is TokType.RBRACE:
                break
            if tok.type is TokType.EOF:
                raise self._error(ParseErrorKind.UNBALANCED_BRACE, "unclosed '{'", open_tok)

            entry = self._parse_entry(depth)
            for text in leading:
                entry.add_comment(text)
            leading.clear()
            table.entries.append(entry)

            tok = self._peek()
            self._attach_comments(table, leading)
            if tok.type in (TokType.COMMA, TokType.SEMICOLON):
                self._next()
                continue
            if tok.type is TokType.RBRACE:
                break
            if tok.type is TokType.EOF:
                raise self._error(ParseErrorKind.UNBALANCED_BRACE, "unclosed '{'", open_tok)
            if (
                depth == LOOSE_SEPARATOR_DEPTH
                and tok.type in ENTRY_START
                and tok.line > entry.end_line
            ):
                self._missing_separators += 1
                continue
            raise self._unexpected(tok, "expected ',' or '}'")

        self._next()  # closing brace
        if leading:
            logger.debug(
                f"Dropping {len(leading)} comment(s) with no entry to attach to "
                f"(table at line {table.line})"
            )
        return table

    def _attach_comments(self, table: Table, leading: List[str]) -> None:
        """Distribute pending comments between the previous and the next entry."""
        for comment in self._pending:
            previous = table.entries[-1] if table.entries else None
            if previous is not None and not leading and previous.end_line == comment.line:
                previous.add_comment(comment.value)
            else:
                leading.append(comment.value)
        self._pending.clear()

    def _parse_entry(self, depth: int) -> TableEntry:
        start = self._peek()
        key: Optional[Key] = None

        if start.type is TokType.IDENTIFIER and self._lookahead().type is TokType.EQUALS:
            key = self._next().value
            self._next()
        elif start.type is TokType.LBRACKET:
            self._next()
            key_tok = self._peek()
            if key_tok.type not in (TokType.NUMBER, TokType.STRING):
                raise self._unexpected(key_tok, "expected a number or string key")
            key = self._next().value
            self._expect(TokType.RBRACKET, "']'")
            self._expect(TokType.EQUALS, "'='")

        value = self._parse_value(depth)
        return TableEntry(
            value=value,
            key=key,
            line=start.line,
            column=start.column,
            end_line=self._last.line,
        )

    def _parse_value(self, depth: int) -> Value:
        tok = self._peek()
        if tok.type is TokType.LBRACE:
            return self._parse_table(depth + 1)
        if tok.type is TokType.NUMBER:
            self._next()
            return Number(tok.value, tok.text)
        if tok.type is TokType.STRING:
            self._next()
            return String(tok.value)
        if tok.type is TokType.IDENTIFIER:
            self._next()
            return Identifier(tok.value)
        raise self._unexpected(tok, "expected a value")


def parse(text: str, max_depth: Optional[int] = None) -> Table:
    """Parse a table literal. See LiteralParser.parse."""
    return LiteralParser.parse(text, max_depth)
