"""
JavaScript declarations.

Besides ``function name(...)`` and ``class Name`` this understands the
assignment forms the lexer cannot split on its own, such as
``Foo.prototype.bar = function (...)``, ``bar: function (...)`` and
``const bar = (...) =>``. Those are rewritten to the plain
``function bar(...)`` form before lexing.

© 2024 Intel Corporation
SPDX-License-Identifier: Apache-2.0 and MIT
"""

import re
import logging

from ..parsing import LanguageParser
from ..parsing.grammar import Grammar

logger = logging.getLogger(__name__)

IDENTIFIER = r'[A-Za-z_$][\w$]*'

# `function*` and `async function*`; the lexer has no recognizer for `*`
GENERATOR_RE = re.compile(r'^((?:async\s+)?function)\s*\*\s*')

FUNCTION_ASSIGNMENT_RE = re.compile(
    rf'^(?:(?:var|let|const)\s+)?(?:{IDENTIFIER}\.)*({IDENTIFIER})\s*[:=]\s*'
    rf'(?:async\s+)?function\b\s*\*?\s*(?:{IDENTIFIER})?\s*(?=\()'
)
ARROW_ASSIGNMENT_RE = re.compile(
    rf'^(?:(?:var|let|const)\s+)?(?:{IDENTIFIER}\.)*({IDENTIFIER})\s*[:=]\s*(?:async\s*)?(?=\()'
)
CLASS_ASSIGNMENT_RE = re.compile(
    rf'^(?:(?:var|let|const)\s+)?(?:{IDENTIFIER}\.)*({IDENTIFIER})\s*=\s*class\b'
)


class JavaScriptParser(LanguageParser):
    """Parses tokens for the JavaScript language."""

    language = "javascript"
    extensions = (".js", ".jsx", ".mjs", ".cjs")
    grammar = Grammar.from_dict({
        'class': ['class'],
        'function': ['function'],
        'identifier': r'[a-zA-Z_$][a-zA-Z_$0-9]*',
        'modifiers': [
            'async',
            'static',
            'export',
            'default',
            'get',
            'set',
            'new',
            'return',
            'if',
            'for',
            'while',
            'switch',
            'catch',
        ],
        'types': [],
        'variables': [
            'var',
            'let',
            'const',
        ],
    })

    def prepare(self, code: str) -> str:
        code = super().prepare(code)
        code = GENERATOR_RE.sub(r'\1 ', code)

        matches = FUNCTION_ASSIGNMENT_RE.match(code)
        if matches:
            logger.debug(f"Rewriting function assignment {matches.group(0)!r}")
            return f"function {matches.group(1)}{code[matches.end():]}"

        matches = ARROW_ASSIGNMENT_RE.match(code)
        if matches and '=>' in code[matches.end():]:
            logger.debug(f"Rewriting arrow function {matches.group(0)!r}")
            return f"function {matches.group(1)}{code[matches.end():]}"

        matches = CLASS_ASSIGNMENT_RE.match(code)
        if matches:
            return f"class {matches.group(1)}{code[matches.end():]}"

        return code
