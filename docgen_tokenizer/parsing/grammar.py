"""
Declarative per-language grammar tables.

© 2024 Intel Corporation
SPDX-License-Identifier: Apache-2.0 and MIT
"""

import re
import logging
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Union
from dataclasses import dataclass, field
from enum import Enum

from ..errors import GrammarError

logger = logging.getLogger(__name__)


class GrammarCategory(Enum):
    """Categories a grammar can classify a token value into."""
    CLASS = "class"
    FUNCTION = "function"
    MODIFIERS = "modifiers"
    TYPES = "types"
    VARIABLES = "variables"
    IDENTIFIER = "identifier"


KEYWORD_CATEGORIES = (
    GrammarCategory.CLASS,
    GrammarCategory.FUNCTION,
    GrammarCategory.MODIFIERS,
    GrammarCategory.TYPES,
    GrammarCategory.VARIABLES,
)


@dataclass(frozen=True)
class KeywordSet:
    """An ordered set of keywords."""
    words: tuple = ()
    case_sensitive: bool = True
    _lookup: FrozenSet[str] = field(default=frozenset(), init=False, repr=False, compare=False)

    def __post_init__(self):
        for word in self.words:
            if not isinstance(word, str) or not word:
                raise GrammarError(f"Keywords must be non-empty strings, got {word!r}")
        lookup = frozenset(self.words if self.case_sensitive else (w.lower() for w in self.words))
        object.__setattr__(self, '_lookup', lookup)

    def matches(self, value: str) -> bool:
        if not self.case_sensitive:
            value = value.lower()
        return value in self._lookup

    def union(self, extra: Iterable[str]) -> 'KeywordSet':
        words = list(self.words)
        words.extend(word for word in extra if word not in words)
        return KeywordSet(tuple(words), self.case_sensitive)


@dataclass(frozen=True)
class Pattern:
    """A regular expression a whole token value must match."""
    regex: str
    _compiled: Any = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        try:
            compiled = re.compile(self.regex)
        except re.error as e:
            raise GrammarError(f"Invalid identifier pattern {self.regex!r}: {e}") from e
        object.__setattr__(self, '_compiled', compiled)

    def matches(self, value: str) -> bool:
        return self._compiled.fullmatch(value) is not None

    def matches_start(self, text: str) -> bool:
        """Whether ``text`` begins with something the pattern accepts."""
        return self._compiled.match(text) is not None


CategoryValue = Union[KeywordSet, Pattern]


class Grammar:
    """Keyword categories and identifier pattern for one language."""

    def __init__(self, categories: Mapping[GrammarCategory, CategoryValue]):
        self._categories: Dict[GrammarCategory, CategoryValue] = {}
        for category, value in categories.items():
            if category is GrammarCategory.IDENTIFIER:
                if not isinstance(value, Pattern):
                    raise GrammarError("The identifier category must be a Pattern")
            elif not isinstance(value, KeywordSet):
                raise GrammarError(f"The {category.value} category must be a KeywordSet")
            self._categories[category] = value
        self._warn_overlaps()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], case_sensitive: bool = True) -> 'Grammar':
        """
        Build a grammar from a plain table.

        Keyword categories take lists of strings; ``identifier`` takes a
        regular expression string.
        """
        categories: Dict[GrammarCategory, CategoryValue] = {}
        for key, value in data.items():
            try:
                category = GrammarCategory(key)
            except ValueError:
                raise GrammarError(f"Unknown grammar category: {key!r}") from None

            if category is GrammarCategory.IDENTIFIER:
                if not isinstance(value, str):
                    raise GrammarError("The identifier category must be a pattern string")
                categories[category] = Pattern(value)
            elif isinstance(value, (list, tuple)):
                categories[category] = KeywordSet(tuple(value), case_sensitive)
            else:
                raise GrammarError(f"The {key} category must be a list of keywords")
        return cls(categories)

    def _warn_overlaps(self) -> None:
        types = self._categories.get(GrammarCategory.TYPES)
        modifiers = self._categories.get(GrammarCategory.MODIFIERS)
        if isinstance(types, KeywordSet) and isinstance(modifiers, KeywordSet):
            overlap = set(types.words) & set(modifiers.words)
            if overlap:
                logger.warning(f"Keywords listed as both types and modifiers: {sorted(overlap)}")

    def category(self, category: GrammarCategory) -> Optional[CategoryValue]:
        return self._categories.get(category)

    def matches(self, value: Optional[str], category: Union[GrammarCategory, str]) -> bool:
        """Membership test. Unknown or undeclared categories never match."""
        if not value:
            return False
        if isinstance(category, str):
            try:
                category = GrammarCategory(category)
            except ValueError:
                return False
        entry = self._categories.get(category)
        if entry is None:
            return False
        return entry.matches(value)

    def is_identifier(self, value: Optional[str]) -> bool:
        return self.matches(value, GrammarCategory.IDENTIFIER)

    def is_keyword(self, value: Optional[str]) -> bool:
        return any(self.matches(value, category) for category in KEYWORD_CATEGORIES)

    def starts_identifier(self, text: Optional[str]) -> bool:
        """Whether ``text`` starts with an identifier."""
        pattern = self._categories.get(GrammarCategory.IDENTIFIER)
        if not text or pattern is None:
            return False
        return pattern.matches_start(text)

    def extend(self, extra: Mapping[str, Iterable[str]]) -> 'Grammar':
        """Return a new grammar with additional keywords per category."""
        categories = dict(self._categories)
        for key, words in extra.items():
            words = list(words)
            if not words:
                continue
            try:
                category = GrammarCategory(key)
            except ValueError:
                raise GrammarError(f"Unknown grammar category: {key!r}") from None
            if category is GrammarCategory.IDENTIFIER:
                raise GrammarError("The identifier pattern cannot be extended")
            current = categories.get(category, KeywordSet())
            categories[category] = current.union(words)
        return Grammar(categories)

    def __repr__(self) -> str:
        return f"Grammar({', '.join(c.value for c in self._categories)})"
