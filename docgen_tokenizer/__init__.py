"""
docgen-tokenizer

Language-agnostic source tokenizer and per-language declaration parser. Given
a line of source code it describes the nearest declaration (function, class
or variable) so an editor can synthesize a documentation comment skeleton
above it.

© 2024 Intel Corporation
SPDX-License-Identifier: Apache-2.0 and MIT
"""

__version__ = "0.3.1"
__author__ = "Intel Corporation"
__license__ = "Apache-2.0 OR MIT"

import logging

# Set up default logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

def version() -> str:
    """Return the version string."""
    return __version__

def internal_error(message: str, *args) -> None:
    """Log an internal error message."""
    logger = logging.getLogger(__name__)
    if args:
        logger.error(f"Internal Error: {message.format(*args)}")
    else:
        logger.error(f"Internal Error: {message}")


from .errors import TokenizerError, TokenizerErrorKind  # noqa: E402
from .lexing import Lexer, Token, TokenType, lex  # noqa: E402
from .parsing import LanguageParser  # noqa: E402
from .parsing.symbols import Param, ReturnInfo, SymbolKind, Symbols  # noqa: E402
from .languages import available_languages, get_parser  # noqa: E402

# Export commonly used types and functions
__all__ = [
    "version",
    "internal_error",
    "__version__",
    "__author__",
    "__license__",
    "TokenizerError",
    "TokenizerErrorKind",
    "Lexer",
    "Token",
    "TokenType",
    "lex",
    "LanguageParser",
    "Param",
    "ReturnInfo",
    "SymbolKind",
    "Symbols",
    "available_languages",
    "get_parser",
]
