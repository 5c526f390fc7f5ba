"""
Position tracking for lexed source text.

Lines and columns are one-indexed, matching what editors display.

© 2024 Intel Corporation
SPDX-License-Identifier: Apache-2.0 and MIT
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """A one-indexed position in a piece of source text."""
    line: int
    column: int

    def __post_init__(self):
        if self.line < 1 or self.column < 1:
            raise ValueError(f"Invalid position: line={self.line}, column={self.column}")

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass
class Cursor:
    """Mutable line/column counter owned by a single lexer run."""
    line: int = 1
    column: int = 1

    def increment_line(self, increment: int) -> None:
        """Move down ``increment`` lines, resetting the column when it moves."""
        self.line += increment
        if increment:
            self.column = 1

    def increment_column(self, increment: int) -> None:
        self.column += increment

    def position(self) -> Position:
        """Snapshot of the current location."""
        return Position(max(self.line, 1), max(self.column, 1))
