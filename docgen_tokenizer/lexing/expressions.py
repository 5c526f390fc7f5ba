"""
Pluggable expression validators.

The lexer asks a validator whether buffered code and attribute default values
are well-formed expressions. JavaScript is the default grammar; Python and a
permissive bracket-balance check can be selected through configuration.

© 2024 Intel Corporation
SPDX-License-Identifier: Apache-2.0 and MIT
"""

import ast
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional, Type

import tree_sitter_javascript as tsjavascript
from tree_sitter import Language, Node, Parser

from ..errors import ExpressionSyntaxError, NestingError
from ..span import Position
from .brackets import parse

logger = logging.getLogger(__name__)

JS_LANGUAGE = Language(tsjavascript.language())


class ExpressionValidator(ABC):
    """Decides whether a piece of text is a well-formed value expression."""

    name: str = ""

    @abstractmethod
    def validate(self, expression: str) -> None:
        """
        Raise ExpressionSyntaxError if ``expression`` is not valid.

        The error position is relative to the start of ``expression``.
        """

    def is_valid(self, expression: str) -> bool:
        """Non-raising variant of validate()."""
        try:
            self.validate(expression)
        except ExpressionSyntaxError:
            return False
        return True


def _end_position(text: str) -> Position:
    lines = text.split('\n')
    return Position(len(lines), len(lines[-1]) + 1)


def _require_content(expression: str) -> None:
    if not expression.strip():
        raise ExpressionSyntaxError("Syntax Error: Unexpected end of input",
                                    position=_end_position(expression))


class JavaScriptExpressionValidator(ExpressionValidator):
    """Validates JavaScript expressions with tree-sitter."""

    name = "javascript"

    def __init__(self):
        self._parser = Parser(JS_LANGUAGE)

    def validate(self, expression: str) -> None:
        _require_content(expression)

        # Parenthesize so object literals are not read as blocks
        source = f"({expression})".encode("utf-8")
        root = self._parser.parse(source).root_node

        if root.has_error:
            node = _first_error(root) or root
            raise ExpressionSyntaxError(
                f"Syntax Error: Unexpected token in `{expression.strip()}`",
                position=_node_position(node)
            )

        statements = root.named_children
        if len(statements) != 1 or statements[0].type != "expression_statement":
            raise ExpressionSyntaxError("Syntax Error: Expected a single expression",
                                        position=Position(1, 1))
        inner = statements[0].named_children
        if (not inner or inner[0].type != "parenthesized_expression"
                or inner[0].start_byte != 0 or inner[0].end_byte != len(source)):
            raise ExpressionSyntaxError("Syntax Error: Expected a single expression",
                                        position=Position(1, 1))


def _first_error(root: Node) -> Optional[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        stack.extend(reversed(node.children))
    return None


def _node_position(node: Node) -> Position:
    row, column = node.start_point
    if row == 0:
        # Discount the opening parenthesis added before parsing
        column = max(column - 1, 0)
    return Position(row + 1, column + 1)


class PythonExpressionValidator(ExpressionValidator):
    """Validates Python expressions with the ``ast`` module."""

    name = "python"

    def validate(self, expression: str) -> None:
        _require_content(expression)
        try:
            ast.parse(f"({expression}\n)", mode="eval")
        except SyntaxError as ex:
            line = ex.lineno or 1
            column = ex.offset or 1
            if line == 1:
                column = max(column - 1, 1)
            raise ExpressionSyntaxError(f"Syntax Error: {ex.msg}",
                                        position=Position(line, column)) from None


class BalancedExpressionValidator(ExpressionValidator):
    """Accepts any non-empty text whose brackets and quotes balance."""

    name = "balanced"

    def validate(self, expression: str) -> None:
        _require_content(expression)
        try:
            state = parse(expression)
        except NestingError as ex:
            raise ExpressionSyntaxError(f"Syntax Error: {ex.message}",
                                        position=ex.position) from None
        if state.is_nesting() or state.is_string():
            raise ExpressionSyntaxError("Syntax Error: Unexpected end of expression",
                                        position=_end_position(expression))


VALIDATORS: Dict[str, Type[ExpressionValidator]] = {
    JavaScriptExpressionValidator.name: JavaScriptExpressionValidator,
    PythonExpressionValidator.name: PythonExpressionValidator,
    BalancedExpressionValidator.name: BalancedExpressionValidator,
}


def get_validator(name: str) -> ExpressionValidator:
    """Create the validator registered under ``name``."""
    try:
        validator_cls = VALIDATORS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown expression validator {name!r}. "
            f"Expected one of: {', '.join(sorted(VALIDATORS))}"
        ) from None
    logger.debug(f"Using {validator_cls.__name__}")
    return validator_cls()
