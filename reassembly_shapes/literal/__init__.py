"""Lua table-literal parsing module."""

from .values import Identifier, Number, String, Table, TableEntry, Value, ValueKind
from .errors import ParseError, ParseErrorKind
from .parser import LiteralParser, parse

__all__ = [
    "Identifier",
    "Number",
    "String",
    "Table",
    "TableEntry",
    "Value",
    "ValueKind",
    "ParseError",
    "ParseErrorKind",
    "LiteralParser",
    "parse",
]
