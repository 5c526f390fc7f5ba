"""
Character-level scanner that tracks brackets, strings and comments.

Used by the lexer to find the bracket closing an attribute list and to decide
whether a partially read value is still inside a string or a nested bracket.
Regular expression literals are not modelled.

© 2024 Intel Corporation
SPDX-License-Identifier: Apache-2.0 and MIT
"""

from typing import List, Optional
from dataclasses import dataclass, field

from ..errors import BracketError, NestingError
from ..span import Position

BRACKETS = {
    '(': ')',
    '[': ']',
    '{': '}',
}
CLOSING_BRACKETS = {close: open_ for open_, close in BRACKETS.items()}
QUOTES = ("'", '"', '`')

PUNCTUATORS = frozenset('.();,{}[]:?~%&*+-/<>^|!=')


@dataclass
class CharState:
    """Scanner state after consuming some prefix of a string."""
    stack: List[str] = field(default_factory=list)
    line_comment: bool = False
    block_comment: bool = False
    quote: Optional[str] = None
    escaped: bool = False
    last_char: str = ''

    def is_nesting(self) -> bool:
        return bool(self.stack)

    def is_string(self) -> bool:
        return self.quote is not None

    def is_comment(self) -> bool:
        return self.line_comment or self.block_comment


@dataclass(frozen=True)
class BracketRange:
    """Span between an opening bracket and its matching close."""
    start: int
    end: int
    src: str


def is_punctuator(char: str) -> bool:
    """Whether ``char`` is a JavaScript punctuator. An empty char counts as one."""
    return not char or char in PUNCTUATORS


def parse_char(char: str, state: CharState) -> CharState:
    """Advance ``state`` by one character, in place."""
    if len(char) != 1:
        raise ValueError("parse_char expects a single character")

    if state.line_comment:
        if char == '\n':
            state.line_comment = False
    elif state.block_comment:
        if state.last_char == '*' and char == '/':
            state.block_comment = False
            state.last_char = ''
            return state
    elif state.quote is not None:
        if char == state.quote and not state.escaped:
            state.quote = None
        elif char == '\\' and not state.escaped:
            state.escaped = True
        else:
            state.escaped = False
    elif state.last_char == '/' and char == '/':
        state.line_comment = True
    elif state.last_char == '/' and char == '*':
        state.block_comment = True
    elif char in QUOTES:
        state.quote = char
    elif char in BRACKETS:
        state.stack.append(char)
    elif char in CLOSING_BRACKETS:
        if not state.stack or state.stack[-1] != CLOSING_BRACKETS[char]:
            raise NestingError(f"Mismatched bracket: {char}")
        state.stack.pop()

    state.last_char = char
    return state


def parse(src: str, state: Optional[CharState] = None) -> CharState:
    """Scan all of ``src``; mismatched brackets raise with their position."""
    state = state if state is not None else CharState()
    line, column = 1, 1
    for char in src:
        try:
            parse_char(char, state)
        except NestingError as ex:
            raise NestingError(ex.message, position=Position(line, column)) from None
        if char == '\n':
            line += 1
            column = 1
        else:
            column += 1
    return state


def parse_until(src: str, delimiter: str, start: int = 0) -> BracketRange:
    """
    Find ``delimiter`` at nesting depth zero, outside strings and comments.

    Args:
        src: Text to scan
        delimiter: Closing text to look for
        start: Index to begin scanning from

    Returns:
        BracketRange whose ``end`` is the index of the delimiter
    """
    state = CharState()
    index = start
    while index < len(src):
        if (not state.is_nesting() and not state.is_string() and not state.is_comment()
                and src.startswith(delimiter, index)):
            return BracketRange(start=start, end=index, src=src[start:index])
        parse_char(src[index], state)
        index += 1
    raise BracketError(f"End of source reached before finding `{delimiter}`")
