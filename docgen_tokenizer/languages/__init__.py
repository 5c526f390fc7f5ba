"""
Registry of supported languages.

The host picks a parser by language id or file extension.

© 2024 Intel Corporation
SPDX-License-Identifier: Apache-2.0 and MIT
"""

import logging
from typing import Dict, List, Optional, Type

from ..config import TokenizerConfig
from ..errors import UnsupportedLanguageError
from ..parsing import LanguageParser
from .c import CParser
from .javascript import JavaScriptParser
from .scss import ScssParser

logger = logging.getLogger(__name__)

_LANGUAGES: Dict[str, Type[LanguageParser]] = {}
_EXTENSIONS: Dict[str, Type[LanguageParser]] = {}


def register_language(parser_cls: Type[LanguageParser]) -> Type[LanguageParser]:
    """Register a parser class under its language id and extensions."""
    if not parser_cls.language:
        raise ValueError(f"{parser_cls.__name__} does not declare a language id")
    _LANGUAGES[parser_cls.language.lower()] = parser_cls
    for extension in parser_cls.extensions:
        _EXTENSIONS[extension.lower().lstrip('.')] = parser_cls
    logger.debug(f"Registered {parser_cls.__name__} for {parser_cls.language}")
    return parser_cls


def get_parser_class(language: str) -> Type[LanguageParser]:
    """Resolve a language id, file extension or file name to a parser class."""
    key = language.lower().strip()
    if key in _LANGUAGES:
        return _LANGUAGES[key]
    extension = key.rsplit('.', 1)[-1]
    if extension in _EXTENSIONS:
        return _EXTENSIONS[extension]
    raise UnsupportedLanguageError(language)


def get_parser(language: str, config: Optional[TokenizerConfig] = None) -> LanguageParser:
    """Create a parser for ``language``."""
    return get_parser_class(language)(config=config)


def available_languages() -> List[str]:
    return sorted(_LANGUAGES)


for _parser_cls in (CParser, JavaScriptParser, ScssParser):
    register_language(_parser_cls)


__all__ = [
    "CParser",
    "JavaScriptParser",
    "ScssParser",
    "available_languages",
    "get_parser",
    "get_parser_class",
    "register_language",
]
