"""
Grammar-driven declaration parser.

A parser lexes one logical line, then feeds the tokens one at a time through
four recognizers (class, function, parameters, variable). The recognizers
mutate a Symbols record and a ParserState of expectation flags until the
declaration is resolved or the tokens run out. Unrecognized tokens are
skipped.

© 2024 Intel Corporation
SPDX-License-Identifier: Apache-2.0 and MIT
"""

import re
import logging
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum

from ..config import TokenizerConfig
from ..errors import InputTypeError
from ..lexing import Lexer, Token, TokenType
from ..lexing.expressions import ExpressionValidator, get_validator
from .grammar import Grammar, GrammarCategory
from .symbols import Param, ReturnInfo, SymbolKind, Symbols

logger = logging.getLogger(__name__)


class Recognizer(Enum):
    """The recognition procedures, in the order they see each token."""
    CLASS = "class"
    FUNCTION = "function"
    PARAMETER = "parameter"
    VARIABLE = "variable"


RECOGNITION_ORDER = (
    Recognizer.CLASS,
    Recognizer.FUNCTION,
    Recognizer.PARAMETER,
    Recognizer.VARIABLE,
)

# Tokens that only carry unparsed remainder or mark the end of input
SKIPPED_TOKENS = (TokenType.TEXT, TokenType.EOS)

TRAILING_TERMINATOR_RE = re.compile(r'\s*[{;]+\s*$')


@dataclass
class ParserState:
    """Expectation flags for one top-level tokenize call."""
    done: bool = False
    expect_name: bool = False
    expect_parameter: bool = False
    expect_parameter_type: bool = False
    depth: int = 0
    previous: Optional[Token] = None
    # Words of the parameter entry read so far, for languages that group them
    pending: List[str] = field(default_factory=list)


class ParseOutcome(NamedTuple):
    """Symbols plus the final parser state."""
    symbols: Symbols
    state: ParserState


RecognizerFunc = Callable[[Token, Symbols, ParserState], bool]


class LanguageParser:
    """
    Base class for per-language parsers.

    Subclasses provide ``language``, ``extensions`` and a ``grammar`` table and
    may override any recognizer. Each recognizer returns True when it consumed
    the token, which stops the remaining recognizers from seeing it.
    Recognizers never raise.
    """

    language: str = ""
    extensions: Tuple[str, ...] = ()
    grammar: Grammar = Grammar({})
    default_validator: str = "javascript"
    space_separates_values: bool = True

    def __init__(self, config: Optional[TokenizerConfig] = None,
                 validator: Optional[ExpressionValidator] = None):
        self.config = config or TokenizerConfig()
        overrides = self.config.overrides_for(self.language)
        if overrides:
            self.grammar = type(self).grammar.extend(overrides.as_grammar_dict())
        self.validator = validator or get_validator(
            self.config.expression_validator or self.default_validator
        )
        self._recognizers: Dict[Recognizer, RecognizerFunc] = {
            Recognizer.CLASS: self.parse_class,
            Recognizer.FUNCTION: self.parse_function,
            Recognizer.PARAMETER: self.parse_parameters,
            Recognizer.VARIABLE: self.parse_variable,
        }

    def tokenize(self, code: str, next_hint: str = '', symbols: Optional[Symbols] = None) -> Symbols:
        """
        Describe the declaration found in ``code``.

        Args:
            code: One logical line of source
            next_hint: Keyword seen before ``code``, e.g. ``function`` when the
                name continues on this line
            symbols: Accumulator from a previous call to continue filling

        Returns:
            The Symbols record, possibly partially filled
        """
        return self.parse(code, next_hint, symbols).symbols

    def parse(self, code: str, next_hint: str = '', symbols: Optional[Symbols] = None) -> ParseOutcome:
        """Like tokenize() but also returns the final ParserState."""
        if not isinstance(code, str):
            raise InputTypeError(
                f"Expected source code to be a string but got {type(code).__name__}"
            )

        # Work on a copy so a lexing failure leaves the caller's record untouched
        working = symbols.copy() if symbols is not None else Symbols()
        state = ParserState()

        if next_hint:
            self._dispatch(Token(TokenType.TAG, 1, 1, val=next_hint), working, state)
            # A declaration started by an earlier line still needs its name
            if working.type is not None and not working.name and not state.done:
                state.expect_name = True

        segment = self.prepare(code)
        while True:
            tokens = self.lexer(segment).get_tokens()
            self._recognize(tokens, working, state)
            if state.done:
                break

            remainder = self._continuation(tokens)
            if remainder is None:
                break
            if state.depth >= self.config.max_continuation_depth:
                logger.warning(
                    f"Stopped after {state.depth} continuations while parsing {code!r}"
                )
                break
            state.depth += 1
            segment = remainder

        if symbols is not None:
            symbols.update_from(working)
            working = symbols
        logger.debug(f"{self.language}: {code!r} -> {working.to_dict()}")
        return ParseOutcome(working, state)

    def parse_lines(self, lines: Iterable[str]) -> Symbols:
        """
        Join the lines of one declaration and tokenize them.

        Lines are read until the parentheses balance and either a parameter
        list closed or a line ends with ``{`` or ``;``.
        """
        buffer: List[str] = []
        depth = 0
        seen_parenthesis = False
        for line in lines:
            stripped = line.strip()
            buffer.append(stripped)
            depth += stripped.count('(') - stripped.count(')')
            seen_parenthesis = seen_parenthesis or '(' in stripped
            if depth <= 0 and (seen_parenthesis or stripped.endswith(('{', ';'))):
                break
        return self.tokenize(' '.join(part for part in buffer if part))

    def lexer(self, code: str) -> Lexer:
        """A lexer configured for this language."""
        return Lexer(code, validator=self.validator,
                     space_separates_values=self.space_separates_values)

    def prepare(self, code: str) -> str:
        """Normalise a line before lexing."""
        return TRAILING_TERMINATOR_RE.sub('', code.strip())

    def is_name(self, value: Optional[str]) -> bool:
        """An identifier that is not one of the grammar's keywords."""
        return self.grammar.is_identifier(value) and not self.grammar.is_keyword(value)

    def _recognize(self, tokens: List[Token], symbols: Symbols, state: ParserState) -> None:
        for token in tokens:
            if state.done:
                return
            if token.type in SKIPPED_TOKENS:
                continue
            self._dispatch(token, symbols, state)
            state.previous = token

    def _dispatch(self, token: Token, symbols: Symbols, state: ParserState) -> None:
        for recognizer in RECOGNITION_ORDER:
            if self._recognizers[recognizer](token, symbols, state):
                logger.debug(f"{recognizer.value} recognizer accepted {token}")
                return

    def _continuation(self, tokens: List[Token]) -> Optional[str]:
        """Unconsumed trailing text worth lexing again, if any."""
        current = next((t for t in reversed(tokens) if t.type is TokenType.TEXT), None)
        eos = tokens[-1]
        if current is None or current.col >= eos.col:
            return None
        if not self.grammar.starts_identifier(current.val):
            return None
        return current.val

    # Recognizers

    def parse_class(self, token: Token, symbols: Symbols, state: ParserState) -> bool:
        if (token.type is TokenType.TAG and symbols.type is None
                and self.grammar.matches(token.value, GrammarCategory.CLASS)):
            symbols.type = SymbolKind.CLASS
            state.expect_name = True
            return True
        return False

    def parse_function(self, token: Token, symbols: Symbols, state: ParserState) -> bool:
        if token.type is TokenType.START_ATTRIBUTES:
            if state.expect_parameter:
                return False
            if symbols.type is SymbolKind.CLASS:
                return False
            if symbols.type is not SymbolKind.FUNCTION:
                if not symbols.name:
                    previous = state.previous
                    if (symbols.type is not None or previous is None
                            or previous.type is not TokenType.TAG or not self.is_name(previous.val)):
                        return False
                    symbols.name = previous.val
                symbols.type = SymbolKind.FUNCTION
                if symbols.var_type:
                    symbols.returns.type = symbols.var_type
            state.expect_name = False
            state.expect_parameter = True
            return True

        if (token.type is TokenType.TAG and symbols.type is None
                and self.grammar.matches(token.value, GrammarCategory.FUNCTION)):
            symbols.type = SymbolKind.FUNCTION
            state.expect_name = True
            return True
        return False

    def parse_parameters(self, token: Token, symbols: Symbols, state: ParserState) -> bool:
        if symbols.type is not SymbolKind.FUNCTION or not state.expect_parameter:
            return False

        if token.type is TokenType.END_ATTRIBUTES:
            state.expect_parameter = False
            state.expect_parameter_type = False
            return True
        if token.type is not TokenType.ATTRIBUTE:
            return False

        value = token.value
        last = symbols.last_parameter()
        if self.grammar.matches(value, GrammarCategory.MODIFIERS):
            return True
        if self.grammar.matches(value, GrammarCategory.TYPES):
            if state.expect_parameter_type and last is not None and not last.name:
                last.type = f"{last.type} {value}"
            else:
                symbols.add_parameter(Param(name='', type=value, val=token.val or ''))
                state.expect_parameter_type = True
            return True
        if state.expect_parameter_type and last is not None:
            last.name = value
            last.val = token.val or ''
            state.expect_parameter_type = False
            return True

        symbols.add_parameter(Param(name=value, val=token.val or ''))
        return True

    def parse_variable(self, token: Token, symbols: Symbols, state: ParserState) -> bool:
        if token.type is not TokenType.TAG:
            return False
        value = token.value

        if state.expect_name:
            if self.is_name(value):
                symbols.name = value
                state.expect_name = False
                if symbols.type is SymbolKind.CLASS:
                    state.done = True
                return True
            if symbols.type is SymbolKind.VARIABLE and self.grammar.matches(value, GrammarCategory.TYPES):
                symbols.var_type = f"{symbols.var_type} {value}"
                return True

        if symbols.type is None:
            if self.grammar.matches(value, GrammarCategory.TYPES):
                symbols.var_type = value
                symbols.type = SymbolKind.VARIABLE
                state.expect_name = True
                return True
            if self.grammar.matches(value, GrammarCategory.VARIABLES):
                symbols.type = SymbolKind.VARIABLE
                state.expect_name = True
                return True
        return False


__all__ = [
    "LanguageParser",
    "ParseOutcome",
    "ParserState",
    "Recognizer",
    "Param",
    "ReturnInfo",
    "SymbolKind",
    "Symbols",
    "Grammar",
    "GrammarCategory",
]
