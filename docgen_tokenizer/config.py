"""
Configuration management for docgen-tokenizer.

© 2024 Intel Corporation
SPDX-License-Identifier: Apache-2.0 and MIT
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONTINUATION_DEPTH = 16


class LogLevel(Enum):
    """Log levels supported by the tokenizer."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"
    TRACE = "trace"


LOG_LEVEL_MAP = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.TRACE: logging.DEBUG  # Python doesn't have TRACE, use DEBUG
}


@dataclass
class LanguageOverrides:
    """Extra keywords added to one language's grammar."""
    types: List[str] = field(default_factory=list)
    modifiers: List[str] = field(default_factory=list)
    class_keywords: List[str] = field(default_factory=list)
    function_keywords: List[str] = field(default_factory=list)
    variables: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LanguageOverrides':
        """Create LanguageOverrides from dictionary."""
        return cls(
            types=list(data.get('types', [])),
            modifiers=list(data.get('modifiers', [])),
            class_keywords=list(data.get('class', [])),
            function_keywords=list(data.get('function', [])),
            variables=list(data.get('variables', []))
        )

    def as_grammar_dict(self) -> Dict[str, List[str]]:
        """Keyed by grammar category name."""
        return {
            'types': self.types,
            'modifiers': self.modifiers,
            'class': self.class_keywords,
            'function': self.function_keywords,
            'variables': self.variables,
        }


@dataclass
class TokenizerConfig:
    """Settings shared by every parser instance."""
    # None picks the language default: javascript, or balanced for SCSS
    expression_validator: Optional[str] = None
    max_continuation_depth: int = DEFAULT_MAX_CONTINUATION_DEPTH
    log_level: LogLevel = LogLevel.INFO
    languages: Dict[str, LanguageOverrides] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TokenizerConfig':
        """Create TokenizerConfig from dictionary."""
        log_level = LogLevel.INFO
        if 'log_level' in data:
            try:
                log_level = LogLevel(data['log_level'])
            except ValueError:
                logger.warning(f"Invalid log level: {data['log_level']}")

        max_depth = data.get('max_continuation_depth', DEFAULT_MAX_CONTINUATION_DEPTH)
        if not isinstance(max_depth, int) or isinstance(max_depth, bool) or max_depth < 0:
            logger.warning(f"Invalid max_continuation_depth: {max_depth!r}")
            max_depth = DEFAULT_MAX_CONTINUATION_DEPTH

        return cls(
            expression_validator=data.get('expression_validator'),
            max_continuation_depth=max_depth,
            log_level=log_level,
            languages={
                language.lower(): LanguageOverrides.from_dict(overrides)
                for language, overrides in data.get('languages', {}).items()
            }
        )

    @classmethod
    def load(cls, path: Path) -> 'TokenizerConfig':
        """
        Load configuration from a JSON file.

        The format is:
        {
          "expression_validator": "javascript" | "python" | "balanced",
          "max_continuation_depth": 16,
          "log_level": "info",
          "languages": {
            "<language id>": {"types": ["size_t"], "modifiers": [...]}
          }
        }

        Args:
            path: Path to the configuration JSON file
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            config = cls.from_dict(data)
            logger.info(f"Loaded tokenizer config from {path}")
            return config
        except Exception as e:
            logger.error(f"Failed to load tokenizer config from {path}: {e}")
            raise

    def overrides_for(self, language: str) -> Optional[LanguageOverrides]:
        return self.languages.get(language.lower())

    def apply_logging(self) -> None:
        """Apply the configured log level to the root logger."""
        logging.getLogger().setLevel(LOG_LEVEL_MAP[self.log_level])

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for serialization."""
        return {
            'expression_validator': self.expression_validator,
            'max_continuation_depth': self.max_continuation_depth,
            'log_level': self.log_level.value,
            'languages': {
                language: overrides.as_grammar_dict()
                for language, overrides in self.languages.items()
            }
        }
