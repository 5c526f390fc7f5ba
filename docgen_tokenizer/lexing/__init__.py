"""
Language-agnostic lexer.

Splits a line of source code into a flat list of guessed tokens: tags
(identifier-like runs), code (``=``/``!=``/``-`` expressions), parenthesized
attribute lists, free text and colons. The recognizers borrow the shape of a
template-language lexer, which happens to split most C-family declarations
into pieces a small state machine can classify.

© 2024 Intel Corporation
SPDX-License-Identifier: Apache-2.0 and MIT
"""

import re
import logging
from typing import Any, Dict, List, Optional
from enum import Enum
from dataclasses import dataclass

from ..errors import (
    AttributeSyntaxError, BracketError, ExpressionSyntaxError, InputTypeError,
    LexError, NestingError, TokenizerError,
)
from ..span import Cursor
from .brackets import BRACKETS, CharState, is_punctuator, parse, parse_char, parse_until
from .expressions import ExpressionValidator, get_validator

logger = logging.getLogger(__name__)


class TokenType(Enum):
    """Categories of lexed tokens."""
    TAG = "tag"
    CODE = "code"
    ATTRIBUTE = "attribute"
    TEXT = "text"
    COLON = ":"
    START_ATTRIBUTES = "start-attributes"
    END_ATTRIBUTES = "end-attributes"
    EOS = "eos"


@dataclass(frozen=True)
class Token:
    """A token produced by the lexer."""
    type: TokenType
    line: int
    col: int
    val: Optional[str] = None
    name: Optional[str] = None
    buffer: Optional[bool] = None
    must_escape: Optional[bool] = None
    # Attributes only: a comma or the closing bracket follows, not just whitespace
    ends_entry: Optional[bool] = None

    @property
    def value(self) -> Optional[str]:
        """The text a parser should classify: attribute name or token value."""
        if self.type is TokenType.ATTRIBUTE:
            return self.name
        return self.val

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'type': self.type.value, 'line': self.line, 'col': self.col}
        for key in ('val', 'name', 'buffer', 'must_escape', 'ends_entry'):
            item = getattr(self, key)
            if item is not None:
                data[key] = item
        return data

    def __str__(self) -> str:
        return f"{self.type.value}({self.value!r}) at {self.line}:{self.col}"


WHITESPACE_RE = re.compile(r'[ \n\t]')
QUOTE_RE = re.compile(r'[\'"]')
KEY_TERMINATOR_RE = re.compile(r'[ ,!=\n\t]')
KEY_QUOTES_RE = re.compile(r'^[\'"]|[\'"]$')


@dataclass
class _AttributeState:
    """Scratch state for one attribute list."""
    line: int
    column_begin_attr: int
    column_begin_val: int = 0
    key: str = ''
    val: str = ''
    loc: str = 'key'
    quote: str = ''
    escaped: bool = True
    chars: Optional[CharState] = None


class Lexer:
    """Lexes one piece of source into tokens."""

    TAG_RE = re.compile(r'^([_\w<>?\[\]$](?:[_\-:\w<>?\[\]$]*[_\w<>?\[\]$])?)', re.ASCII)
    CODE_RE = re.compile(r'^(!?=|-)[ \t]*([^\n]+)')
    TEXT_RE = re.compile(r'^(?:\| ?| )([^\n]+)')
    TEXT_SPACE_RE = re.compile(r'^\|?( )')
    COLON_RE = re.compile(r'^: +')

    def __init__(self, code: str, validator: Optional[ExpressionValidator] = None,
                 space_separates_values: bool = True):
        if not isinstance(code, str):
            raise InputTypeError(
                f"Expected source code to be a string but got {type(code).__name__}"
            )
        # Strip any UTF-8 BOM and normalise line endings
        code = re.sub(r'^\ufeff', '', code)
        self.input = re.sub(r'\r\n|\r', '\n', code)
        self.source = self.input
        self.validator = validator if validator is not None else get_validator("javascript")
        # Whether whitespace may end an attribute value, as in `(a=1 b=2)`
        self.space_separates_values = space_separates_values
        self.cursor = Cursor()
        self.tokens: List[Token] = []
        self.consumed: List[str] = []
        self.ended = False

    def get_tokens(self) -> List[Token]:
        """Lex the whole input. Always ends with a single ``eos`` token."""
        while not self.ended:
            self._advance()
        logger.debug(f"Lexed {len(self.tokens)} tokens from {self.source!r}")
        return self.tokens

    def _advance(self) -> None:
        for recognizer in (self._eos, self._tag, self._code, self._attrs, self._text, self._colon):
            if recognizer():
                return
        self._fail()

    # Recognizers

    def _eos(self) -> bool:
        if self.input:
            return False
        self.tokens.append(self._token(TokenType.EOS))
        self.ended = True
        return True

    def _tag(self) -> bool:
        matches = self.TAG_RE.match(self.input)
        if not matches:
            return False
        length = len(matches.group(0))
        self._consume(length)
        self.tokens.append(self._token(TokenType.TAG, matches.group(1)))
        self.cursor.increment_column(length)
        return True

    def _code(self) -> bool:
        matches = self.CODE_RE.match(self.input)
        if not matches:
            return False
        flags, code = matches.group(1), matches.group(2)
        self._consume(len(matches.group(0)))
        # The token points at the expression, not at its marker
        self.cursor.increment_column(len(matches.group(0)) - len(code))
        must_escape = flags[0] == '='
        buffer = flags[0] == '=' or flags[1:2] == '='
        if buffer:
            self._check_expression(code)
        self.tokens.append(Token(TokenType.CODE, self.cursor.line, self.cursor.column,
                                 val=code, buffer=buffer, must_escape=must_escape))
        self.cursor.increment_column(len(code))
        return True

    def _attrs(self) -> bool:
        if not self.input.startswith('('):
            return False

        starting_line = self.cursor.line
        self.tokens.append(self._token(TokenType.START_ATTRIBUTES))
        index = self._bracket_expression().end
        attr_str = self.input[1:index]
        self.cursor.increment_column(1)
        self._check_nesting(attr_str)
        self._consume(index + 1)

        st = _AttributeState(line=starting_line, column_begin_attr=self.cursor.column)
        i = 0
        while i <= len(attr_str):
            if self._is_end_of_attribute(attr_str, i, st):
                self._push_attribute(st, i == len(attr_str) or attr_str[i] == ',')
            elif i < len(attr_str):
                i = self._read_attribute_char(attr_str, i, st)

            if i < len(attr_str) and attr_str[i] == '\n':
                st.line += 1
                self.cursor.column = 1
                # Attributes that have not started yet begin on the new line
                if not st.key.strip():
                    self.cursor.line = st.line
            elif i < len(attr_str):
                self.cursor.increment_column(1)
            i += 1

        self.cursor.line = starting_line + attr_str.count('\n')
        self.tokens.append(self._token(TokenType.END_ATTRIBUTES))
        self.cursor.increment_column(1)
        return True

    def _text(self) -> bool:
        matches = self.TEXT_RE.match(self.input) or self.TEXT_SPACE_RE.match(self.input)
        if not matches:
            return False
        value = matches.group(1)
        self._consume(len(matches.group(0)))
        self.cursor.increment_column(len(matches.group(0)) - len(value))
        self.tokens.append(self._token(TokenType.TEXT, value))
        self.cursor.increment_column(len(value))
        return True

    def _colon(self) -> bool:
        matches = self.COLON_RE.match(self.input)
        if not matches:
            return False
        length = len(matches.group(0))
        self.tokens.append(self._token(TokenType.COLON))
        self._consume(length)
        self.cursor.increment_column(length)
        return True

    def _fail(self) -> None:
        raise LexError(f'Unexpected text "{self.input[:5]}"', position=self.cursor.position())

    # Attribute list helpers

    def _is_end_of_attribute(self, attr_str: str, j: int, st: _AttributeState) -> bool:
        # An attribute cannot end before its key has started
        if not st.key.strip():
            st.column_begin_attr = self.cursor.column
            return False
        if j == len(attr_str):
            return True

        if st.loc == 'key':
            if WHITESPACE_RE.match(attr_str[j]):
                for x in range(j, len(attr_str)):
                    if not WHITESPACE_RE.match(attr_str[x]):
                        # `=`/`!` start a value, `,` is handled when reached
                        return attr_str[x] not in '=!,'
            return attr_str[j] == ','

        if st.loc == 'value':
            if st.chars.is_nesting() or st.chars.is_string():
                return False
            # An incomplete expression means the value continues
            if not self._check_expression(st.val, no_throw=True):
                return False
            if self.space_separates_values and WHITESPACE_RE.match(attr_str[j]):
                for x in range(j, len(attr_str)):
                    if not WHITESPACE_RE.match(attr_str[x]):
                        # A following punctuator continues the value
                        return not is_punctuator(attr_str[x]) or bool(QUOTE_RE.match(attr_str[x]))
            return attr_str[j] == ','

        return False

    def _read_attribute_char(self, attr_str: str, i: int, st: _AttributeState) -> int:
        char = attr_str[i]
        if st.loc == 'key-char':
            if char == st.quote:
                st.loc = 'key'
                if i + 1 < len(attr_str) and not KEY_TERMINATOR_RE.match(attr_str[i + 1]):
                    raise AttributeSyntaxError(
                        f'Unexpected character "{attr_str[i + 1]}" '
                        'expected ` `, `\\n`, `\\t`, `,`, `!` or `=`',
                        position=self.cursor.position()
                    )
            else:
                st.key += char
        elif st.loc == 'key':
            if st.key == '' and QUOTE_RE.match(char):
                st.loc = 'key-char'
                st.quote = char
            elif char in '!=':
                st.escaped = char != '!'
                if char == '!':
                    self.cursor.increment_column(1)
                    i += 1
                if i >= len(attr_str) or attr_str[i] != '=':
                    found = attr_str[i] if i < len(attr_str) else 'end of input'
                    raise AttributeSyntaxError(f"Unexpected character {found} expected `=`",
                                               position=self.cursor.position())
                st.loc = 'value'
                st.column_begin_val = self.cursor.column + 1
                st.chars = CharState()
            else:
                st.key += char
        else:
            parse_char(char, st.chars)
            st.val += char
        return i

    def _push_attribute(self, st: _AttributeState, ends_entry: bool) -> None:
        if st.val.strip():
            saved = self.cursor.column
            self.cursor.column = st.column_begin_val
            self._check_expression(st.val)
            self.cursor.column = saved

        key = KEY_QUOTES_RE.sub('', st.key.strip())
        self.tokens.append(Token(TokenType.ATTRIBUTE, self.cursor.line, st.column_begin_attr,
                                 val=st.val.strip(), name=key, must_escape=st.escaped,
                                 ends_entry=ends_entry))

        st.key = st.val = ''
        st.loc = 'key'
        st.escaped = True
        self.cursor.line = st.line

    def _bracket_expression(self, skip: int = 0):
        start = self.input[skip:skip + 1]
        if start not in BRACKETS:
            raise BracketError('The start character should be "(", "{" or "["',
                               position=self.cursor.position())
        try:
            return parse_until(self.input, BRACKETS[start], start=skip + 1)
        except TokenizerError as ex:
            raise BracketError(ex.message, position=self.cursor.position()) from ex

    def _check_nesting(self, expression: str) -> None:
        try:
            state = parse(expression)
        except NestingError as ex:
            raise NestingError(ex.message, position=self.cursor.position()) from ex
        if state.is_nesting() or state.is_string():
            raise NestingError(f"Nesting must match on expression `{expression}`",
                               position=self.cursor.position())

    def _check_expression(self, expression: str, no_throw: bool = False) -> bool:
        try:
            self.validator.validate(expression)
            return True
        except ExpressionSyntaxError as ex:
            if no_throw:
                return False
            if ex.position is not None:
                self.cursor.increment_line(ex.position.line - 1)
                self.cursor.increment_column(ex.position.column - 1)
            raise ExpressionSyntaxError(ex.message, position=self.cursor.position()) from ex

    # Bookkeeping

    def _consume(self, length: int) -> None:
        self.consumed.append(self.input[:length])
        self.input = self.input[length:]

    def _token(self, token_type: TokenType, val: Optional[str] = None) -> Token:
        return Token(token_type, self.cursor.line, self.cursor.column, val=val)


def lex(code: str, validator: Optional[ExpressionValidator] = None,
        space_separates_values: bool = True) -> List[Token]:
    """Convenience wrapper around ``Lexer(code).get_tokens()``."""
    return Lexer(code, validator=validator,
                 space_separates_values=space_separates_values).get_tokens()


__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "lex",
]
