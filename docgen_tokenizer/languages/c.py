"""
C declarations.

© 2024 Intel Corporation
SPDX-License-Identifier: Apache-2.0 and MIT
"""

import re
import logging

from ..lexing import Token, TokenType
from ..parsing import LanguageParser, ParserState
from ..parsing.grammar import Grammar, GrammarCategory
from ..parsing.symbols import Param, SymbolKind, Symbols

logger = logging.getLogger(__name__)

# Pointer and reference markers carry no information for documentation
POINTER_RE = re.compile(r'\s*[*&]+\s*')
SPACES_RE = re.compile(r'[ \t]+')

# Keywords that start a type spelled with a following tag name
TAG_KEYWORDS = ('struct', 'union', 'enum')


class CParser(LanguageParser):
    """Parses tokens for the C language."""

    language = "c"
    extensions = (".c", ".h")
    grammar = Grammar.from_dict({
        'class': [
            'struct',
            'typedef',
        ],
        'function': [],
        'identifier': r'[a-zA-Z_][a-zA-Z0-9_]*',
        'modifiers': [
            'unsigned',
            'signed',
            'struct',
            'static',
            'inline',
            'const',
            'volatile',
            'register',
            'auto',
            'extern',
            'complex',
        ],
        'types': [
            'char',
            'double',
            'float',
            'int',
            'long',
            'short',
            'void',
        ],
        'variables': [],
    })

    def prepare(self, code: str) -> str:
        code = super().prepare(code)
        code = POINTER_RE.sub(' ', code)
        return SPACES_RE.sub(' ', code).strip()

    def parse_class(self, token: Token, symbols: Symbols, state: ParserState) -> bool:
        # Every aggregate is reported as `struct`; the tag name is not needed
        if token.type is TokenType.TAG and self.grammar.matches(token.value, GrammarCategory.CLASS):
            symbols.name = 'struct'
            symbols.type = SymbolKind.CLASS
            state.done = True
            return True
        return False

    def parse_parameters(self, token: Token, symbols: Symbols, state: ParserState) -> bool:
        """
        Collect the words of each comma separated entry, then split them.

        The last word names the parameter and the words before it form its
        type, so user types such as ``size_t n`` or ``struct node n`` need no
        grammar entry.
        """
        if symbols.type is not SymbolKind.FUNCTION or not state.expect_parameter:
            return False

        if token.type is TokenType.END_ATTRIBUTES:
            self._add_pending_parameter(symbols, state)
            state.expect_parameter = False
            # `(void)` declares that there are no parameters
            if len(symbols.params) == 1:
                only = symbols.params[0]
                if only.type == 'void' and not only.name:
                    symbols.params.clear()
            return True
        if token.type is not TokenType.ATTRIBUTE:
            return False

        value = token.value
        if value in TAG_KEYWORDS or not self.grammar.matches(value, GrammarCategory.MODIFIERS):
            state.pending.append(value)
        if token.ends_entry:
            self._add_pending_parameter(symbols, state)
        return True

    def _add_pending_parameter(self, symbols: Symbols, state: ParserState) -> None:
        words, state.pending = state.pending, []
        if not words:
            return
        last = words[-1]
        unnamed = (
            last in TAG_KEYWORDS
            or self.grammar.matches(last, GrammarCategory.TYPES)
            or (len(words) > 1 and words[-2] in TAG_KEYWORDS)
        )
        if unnamed:
            symbols.add_parameter(Param(name='', type=' '.join(words)))
        else:
            symbols.add_parameter(Param(name=last, type=' '.join(words[:-1]) or None))
