"""Editor configuration.

Central place for the limits and formatting knobs shared by the parser,
builder, serializer and edit history.
"""

from dataclasses import dataclass, replace
from typing import Optional

# Each nesting level costs a few interpreter frames in the recursive parser
MAX_SUPPORTED_PARSE_DEPTH = 200


@dataclass(frozen=True)
class EditorConfig:
    """
    Tunable settings for a shape editing session.

    Attributes:
        max_parse_depth: Deepest table nesting the literal parser accepts.
            Shape files nest six levels deep, so the default leaves plenty
            of room while staying far below the interpreter's recursion limit.
        max_undo_history: Number of commands kept for undo (None = unbounded).
        default_name_template: Name given to shapes whose source carries no
            name comment. Formatted with ``id``.
        indent: Indentation unit used by the serializer.
        grid_size: Snap step for coordinates coming from the canvas.
    """
    max_parse_depth: int = 64
    max_undo_history: Optional[int] = 100
    default_name_template: str = "Shape_{id}"
    indent: str = "  "
    grid_size: float = 10.0

    def __post_init__(self):
        if not 1 <= self.max_parse_depth <= MAX_SUPPORTED_PARSE_DEPTH:
            raise ValueError(
                f"max_parse_depth must be between 1 and {MAX_SUPPORTED_PARSE_DEPTH}: "
                f"{self.max_parse_depth}"
            )
        if self.max_undo_history is not None and self.max_undo_history < 1:
            raise ValueError(f"max_undo_history must be positive: {self.max_undo_history}")
        if self.indent.strip():
            raise ValueError("indent must only contain whitespace")

    def default_name(self, shape_id: int) -> str:
        """Get the placeholder name for a shape without a name comment."""
        return self.default_name_template.format(id=shape_id)

    def with_overrides(self, **changes) -> "EditorConfig":
        """Create a copy with some settings replaced (None values are skipped)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


DEFAULT_CONFIG = EditorConfig()
