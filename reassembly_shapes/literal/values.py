"""Value tree produced by the literal parser."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, List, Optional, Union


class ValueKind(Enum):
    """Kinds of literal values."""
    NUMBER = auto()
    STRING = auto()
    IDENTIFIER = auto()
    TABLE = auto()


@dataclass(frozen=True)
class Number:
    """A numeric literal. ``text`` is the source spelling, kept for messages."""
    value: float
    text: str = field(default="", compare=False)

    kind = ValueKind.NUMBER

    def is_integral(self) -> bool:
        """Check if the number has no fractional part."""
        return float(self.value).is_integer()


@dataclass(frozen=True)
class String:
    """A quoted string literal with escapes already decoded."""
    value: str

    kind = ValueKind.STRING


@dataclass(frozen=True)
class Identifier:
    """A bare name such as ``THRUSTER_IN`` or ``true``. Never evaluated."""
    name: str

    kind = ValueKind.IDENTIFIER


Key = Union[str, float]


@dataclass
class TableEntry:
    """
    One entry of a table.

    Attributes:
        value: The entry's value
        key: Name or bracketed key, None for positional entries
        comment: Line comment(s) attached to this entry
        line: Source line where the entry starts (1-based)
        column: Source column where the entry starts (1-based)
        end_line: Source line where the entry's value ends
    """
    value: "Value"
    key: Optional[Key] = None
    comment: Optional[str] = None
    line: int = 0
    column: int = 0
    end_line: int = 0

    @property
    def is_positional(self) -> bool:
        return self.key is None

    def add_comment(self, text: str) -> None:
        """Attach another comment line to this entry."""
        if self.comment is None:
            self.comment = text
        else:
            self.comment = f"{self.comment}\n{text}"


@dataclass
class Table:
    """An ordered table literal."""
    entries: List[TableEntry] = field(default_factory=list)
    line: int = 0
    column: int = 0

    kind = ValueKind.TABLE

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[TableEntry]:
        return iter(self.entries)

    def positional(self) -> List[TableEntry]:
        """Get the entries without a key, in order."""
        return [entry for entry in self.entries if entry.is_positional]

    def keyed(self) -> List[TableEntry]:
        """Get the entries with a key, in order."""
        return [entry for entry in self.entries if not entry.is_positional]

    def get_entry(self, key: Key) -> Optional[TableEntry]:
        """Get the last entry with the given key (later keys win, as in Lua)."""
        found = None
        for entry in self.entries:
            if entry.key == key:
                found = entry
        return found

    def get(self, key: Key) -> Optional["Value"]:
        """Get the value stored under a key."""
        entry = self.get_entry(key)
        return entry.value if entry is not None else None

    def values(self) -> List["Value"]:
        """Get the positional values, in order."""
        return [entry.value for entry in self.positional()]


Value = Union[Number, String, Identifier, Table]


def describe(value: Value) -> str:
    """Short human-readable description of a value for error messages."""
    if value.kind is ValueKind.NUMBER:
        return f"number {value.text or value.value}"
    if value.kind is ValueKind.STRING:
        return f"string {value.value!r}"
    if value.kind is ValueKind.IDENTIFIER:
        return f"identifier {value.name}"
    return f"table with {len(value)} entries"
