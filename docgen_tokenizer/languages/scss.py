"""
SCSS declarations: ``@function``, ``@mixin`` and ``$variable:``.

Default values are written ``$name: value`` and may contain commas inside
calls or several space separated words (``1px solid red``). They are
rewritten to ``$name = value`` so the lexer reads each value as one unit, and
checked for balanced brackets only since most SCSS values are not valid
JavaScript.

© 2024 Intel Corporation
SPDX-License-Identifier: Apache-2.0 and MIT
"""

import re
import logging

from ..lexing import Token, TokenType
from ..parsing import LanguageParser, ParserState
from ..parsing.grammar import Grammar, GrammarCategory
from ..parsing.symbols import SymbolKind, Symbols

logger = logging.getLogger(__name__)

AT_RULE_RE = re.compile(r'^@')
VARIABLE_RE = re.compile(r'^(\$[\w-]+)\s*:\s*')
PARAMETER_DEFAULT_RE = re.compile(r'(\$[\w-]+)\s*:')


class ScssParser(LanguageParser):
    """Parses tokens for the SCSS language."""

    language = "scss"
    extensions = (".scss", ".sass")
    default_validator = "balanced"
    space_separates_values = False
    grammar = Grammar.from_dict({
        'class': [],
        'function': [
            'function',
            'mixin',
        ],
        'identifier': r'\$?[a-zA-Z_-][\w-]*',
        'modifiers': [
            'include',
            'return',
            'if',
            'else',
            'each',
            'for',
            'while',
        ],
        'types': [],
        'variables': [],
    })

    def prepare(self, code: str) -> str:
        code = super().prepare(code)
        # The lexer has no recognizer for `@` or for `$name:` with arbitrary values
        code = AT_RULE_RE.sub('', code)
        matches = VARIABLE_RE.match(code)
        if matches:
            return matches.group(1)

        start = code.find('(')
        if start != -1:
            code = code[:start] + PARAMETER_DEFAULT_RE.sub(r'\1 =', code[start:])
        return code

    def parse_function(self, token: Token, symbols: Symbols, state: ParserState) -> bool:
        if (token.type is TokenType.TAG and symbols.type is None
                and self.grammar.matches(token.value, GrammarCategory.MODIFIERS)):
            # `@include`, `@if` and friends use declarations rather than declare one
            logger.debug(f"Ignoring @{token.value} rule")
            state.done = True
            return True

        accepted = super().parse_function(token, symbols, state)
        if accepted and token.type is TokenType.TAG and token.value == 'mixin':
            symbols.returns.present = False
        return accepted

    def parse_variable(self, token: Token, symbols: Symbols, state: ParserState) -> bool:
        if token.type is TokenType.TAG and symbols.type is None and token.value.startswith('$'):
            symbols.type = SymbolKind.VARIABLE
            symbols.name = token.value
            state.done = True
            return True
        return super().parse_variable(token, symbols, state)
