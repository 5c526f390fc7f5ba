"""
Error kinds raised while lexing and parsing source lines.

Every lexing failure aborts the current tokenize call; nothing here is
recovered locally.

© 2024 Intel Corporation
SPDX-License-Identifier: Apache-2.0 and MIT
"""

from typing import Any, Dict, Optional
from enum import Enum

from .span import Position


class TokenizerErrorKind(Enum):
    """Closed set of failures the lexer can report."""
    INPUT_TYPE = "input_type"
    LEX = "lex"
    BRACKET = "bracket"
    NESTING = "nesting"
    ATTRIBUTE_SYNTAX = "attribute_syntax"
    EXPRESSION_SYNTAX = "expression_syntax"


class TokenizerError(Exception):
    """Base class for every lexing failure."""

    kind: TokenizerErrorKind = TokenizerErrorKind.LEX

    def __init__(self, message: str, position: Optional[Position] = None):
        super().__init__(message)
        self.message = message
        self.position = position

    @property
    def line(self) -> Optional[int]:
        return self.position.line if self.position else None

    @property
    def column(self) -> Optional[int]:
        return self.position.column if self.position else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary for reporting."""
        return {
            'kind': self.kind.value,
            'message': self.message,
            'line': self.line,
            'column': self.column,
        }

    def __str__(self) -> str:
        if self.position:
            return f"{self.message} ({self.position})"
        return self.message


class InputTypeError(TokenizerError, TypeError):
    """The lexer was handed something other than a string."""
    kind = TokenizerErrorKind.INPUT_TYPE


class LexError(TokenizerError):
    """Leading text matched none of the token recognizers."""
    kind = TokenizerErrorKind.LEX


class BracketError(TokenizerError):
    """An opening delimiter has no matching close."""
    kind = TokenizerErrorKind.BRACKET


class NestingError(TokenizerError):
    """Brackets or quotes inside an expression do not balance."""
    kind = TokenizerErrorKind.NESTING


class AttributeSyntaxError(TokenizerError):
    """Malformed quoted attribute key or a ``!`` not followed by ``=``."""
    kind = TokenizerErrorKind.ATTRIBUTE_SYNTAX


class ExpressionSyntaxError(TokenizerError):
    """A buffered code token or attribute value is not a valid expression."""
    kind = TokenizerErrorKind.EXPRESSION_SYNTAX


class GrammarError(ValueError):
    """A language grammar table is malformed."""


class UnsupportedLanguageError(KeyError):
    """No parser is registered for the requested language."""

    def __init__(self, language: str):
        super().__init__(language)
        self.language = language

    def __str__(self) -> str:
        return f"Unsupported language: {self.language}"
