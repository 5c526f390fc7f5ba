"""
Tests for the language-agnostic lexer.

© 2024 Intel Corporation
SPDX-License-Identifier: Apache-2.0 and MIT
"""

import pytest

from docgen_tokenizer.errors import (
    AttributeSyntaxError, BracketError, ExpressionSyntaxError, InputTypeError, LexError,
)
from docgen_tokenizer.lexing import Lexer, Token, TokenType, lex
from docgen_tokenizer.lexing.expressions import BalancedExpressionValidator
from docgen_tokenizer.span import Position


def types_of(tokens):
    return [token.type for token in tokens]


class TestBasicTokens:
    """Test tags, text, colons and end of source."""

    def test_empty_input(self):
        """Empty input yields a single end-of-source token."""
        tokens = lex("")
        assert tokens == [Token(TokenType.EOS, 1, 1)]

    def test_single_tag(self):
        """A lone identifier is a tag."""
        tokens = lex("foo")
        assert tokens == [
            Token(TokenType.TAG, 1, 1, val="foo"),
            Token(TokenType.EOS, 1, 4),
        ]

    def test_tag_then_text(self):
        """Everything after the first space is unparsed text."""
        tokens = lex("function foo")
        assert tokens == [
            Token(TokenType.TAG, 1, 1, val="function"),
            Token(TokenType.TEXT, 1, 10, val="foo"),
            Token(TokenType.EOS, 1, 13),
        ]

    def test_colon(self):
        """A colon followed by spaces is its own token."""
        tokens = lex("foo: bar")
        assert types_of(tokens) == [TokenType.TAG, TokenType.COLON, TokenType.TAG, TokenType.EOS]
        assert tokens[1].col == 4
        assert tokens[2] == Token(TokenType.TAG, 1, 6, val="bar")

    def test_tag_with_inner_colon(self):
        """Colons inside a tag do not split it."""
        tokens = lex("a:b")
        assert tokens[0].val == "a:b"

    def test_exactly_one_eos(self):
        """The token list always ends with exactly one eos token."""
        tokens = lex("function foo(a, b) {")
        assert tokens[-1].type is TokenType.EOS
        assert types_of(tokens).count(TokenType.EOS) == 1

    def test_byte_order_mark_is_ignored(self):
        """A leading BOM does not shift columns."""
        tokens = lex("\ufefffoo")
        assert tokens[0] == Token(TokenType.TAG, 1, 1, val="foo")

    def test_token_to_dict(self):
        """Unset optional fields are left out."""
        assert lex("foo")[0].to_dict() == {'type': 'tag', 'line': 1, 'col': 1, 'val': 'foo'}


class TestCode:
    """Test code tokens."""

    def test_buffered_escaped_code(self):
        """`=` marks buffered and escaped code."""
        tokens = lex("= foo")
        assert tokens[0] == Token(TokenType.CODE, 1, 3, val="foo", buffer=True, must_escape=True)
        assert tokens[1] == Token(TokenType.EOS, 1, 6)

    def test_buffered_unescaped_code(self):
        """`!=` marks buffered code that is not escaped."""
        tokens = lex("!= x")
        assert tokens[0] == Token(TokenType.CODE, 1, 4, val="x", buffer=True, must_escape=False)

    def test_unbuffered_code_is_not_validated(self):
        """`-` code is passed through without validation."""
        tokens = lex("- foo bar")
        assert tokens[0] == Token(TokenType.CODE, 1, 3, val="foo bar", buffer=False, must_escape=False)

    def test_invalid_buffered_code(self):
        """Buffered code must be a valid expression."""
        with pytest.raises(ExpressionSyntaxError):
            lex("= 1 +")

    def test_expression_error_position(self):
        """The error position is offset by where the expression starts."""
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            lex("= [1, 2", validator=BalancedExpressionValidator())
        assert exc_info.value.position == Position(1, 8)


class TestAttributes:
    """Test attribute lists."""

    def test_attribute_names_and_columns(self):
        """Attributes carry their name and starting column."""
        tokens = lex("foo($arg1, $arg2) {")
        assert tokens == [
            Token(TokenType.TAG, 1, 1, val="foo"),
            Token(TokenType.START_ATTRIBUTES, 1, 4),
            Token(TokenType.ATTRIBUTE, 1, 5, val="", name="$arg1", must_escape=True, ends_entry=True),
            Token(TokenType.ATTRIBUTE, 1, 12, val="", name="$arg2", must_escape=True, ends_entry=True),
            Token(TokenType.END_ATTRIBUTES, 1, 17),
            Token(TokenType.TEXT, 1, 19, val="{"),
            Token(TokenType.EOS, 1, 20),
        ]

    def test_empty_attribute_list(self):
        """`()` produces only the start and end markers."""
        tokens = lex("foo()")
        assert types_of(tokens) == [
            TokenType.TAG, TokenType.START_ATTRIBUTES, TokenType.END_ATTRIBUTES, TokenType.EOS,
        ]

    def test_attribute_values(self):
        """Values follow `=` and are stripped."""
        tokens = lex("(a=1, b)")
        attributes = [t for t in tokens if t.type is TokenType.ATTRIBUTE]
        assert [(a.name, a.val, a.must_escape) for a in attributes] == [
            ("a", "1", True),
            ("b", "", True),
        ]

    def test_unescaped_attribute_resets(self):
        """`!=` only affects its own attribute."""
        tokens = lex("(a = 1, b != 'x', c)")
        attributes = [t for t in tokens if t.type is TokenType.ATTRIBUTE]
        assert [(a.name, a.val, a.must_escape) for a in attributes] == [
            ("a", "1", True),
            ("b", "'x'", False),
            ("c", "", True),
        ]

    def test_nested_value(self):
        """Commas inside brackets belong to the value."""
        tokens = lex("(a, c = {x: 1, y: [2, 3]})")
        attributes = [t for t in tokens if t.type is TokenType.ATTRIBUTE]
        assert [(a.name, a.val) for a in attributes] == [
            ("a", ""),
            ("c", "{x: 1, y: [2, 3]}"),
        ]

    def test_space_separated_attributes(self):
        """Whitespace ends a key that is not followed by a value."""
        tokens = lex("(int a, char b)")
        names = [t.name for t in tokens if t.type is TokenType.ATTRIBUTE]
        assert names == ["int", "a", "char", "b"]

    def test_entry_boundaries(self):
        """Only a comma or the closing bracket ends a list entry."""
        tokens = lex("(struct node n, int v)")
        attributes = [t for t in tokens if t.type is TokenType.ATTRIBUTE]
        assert [(a.name, a.ends_entry) for a in attributes] == [
            ("struct", False),
            ("node", False),
            ("n", True),
            ("int", False),
            ("v", True),
        ]

    def test_values_keep_spaces(self):
        """Without space separation a value runs to the next top-level comma."""
        tokens = lex("(b = 1px solid red, c = f(1, 2))",
                     validator=BalancedExpressionValidator(), space_separates_values=False)
        attributes = [t for t in tokens if t.type is TokenType.ATTRIBUTE]
        assert [(a.name, a.val, a.ends_entry) for a in attributes] == [
            ("b", "1px solid red", True),
            ("c", "f(1, 2)", True),
        ]

    def test_quoted_key(self):
        """Quotes around a key are dropped."""
        tokens = lex("('data-x' = 1)")
        attribute = [t for t in tokens if t.type is TokenType.ATTRIBUTE][0]
        assert attribute.name == "data-x"
        assert attribute.val == "1"

    def test_multiline_attributes(self):
        """Attributes on later lines report their own line and column."""
        tokens = lex("(a,\n  b)")
        assert tokens == [
            Token(TokenType.START_ATTRIBUTES, 1, 1),
            Token(TokenType.ATTRIBUTE, 1, 2, val="", name="a", must_escape=True, ends_entry=True),
            Token(TokenType.ATTRIBUTE, 2, 3, val="", name="b", must_escape=True, ends_entry=True),
            Token(TokenType.END_ATTRIBUTES, 2, 4),
            Token(TokenType.EOS, 2, 5),
        ]

    def test_crlf_is_normalised(self):
        """Windows line endings count as one line break."""
        tokens = lex("(a,\r\n b)")
        attribute = [t for t in tokens if t.type is TokenType.ATTRIBUTE][1]
        assert (attribute.line, attribute.name) == (2, "b")

    def test_invalid_attribute_value(self):
        """Attribute values must be valid expressions."""
        with pytest.raises(ExpressionSyntaxError):
            lex("(a = 1 +)")


class TestErrors:
    """Test lexing failures."""

    def test_unclosed_bracket(self):
        """An attribute list without its `)` is a bracket error."""
        with pytest.raises(BracketError) as exc_info:
            lex("foo(a, b")
        assert "End of source reached" in exc_info.value.message
        assert exc_info.value.position == Position(1, 4)

    def test_unexpected_text(self):
        """Input no recognizer accepts is a lex error."""
        with pytest.raises(LexError) as exc_info:
            lex("#include")
        assert exc_info.value.message == 'Unexpected text "#incl"'
        assert exc_info.value.position == Position(1, 1)

    def test_bang_without_equals(self):
        """`!` in a key must be followed by `=`."""
        with pytest.raises(AttributeSyntaxError):
            lex("(a ! b)")

    def test_character_after_quoted_key(self):
        """A quoted key must be followed by a separator."""
        with pytest.raises(AttributeSyntaxError):
            lex("('a'b)")

    def test_non_string_input(self):
        """Only strings can be lexed."""
        with pytest.raises(InputTypeError):
            Lexer(42)
        with pytest.raises(TypeError):
            lex(None)


class TestLexerProperties:
    """Test properties that hold for any input."""

    @pytest.mark.parametrize("source", [
        "",
        "function foo(a, b = 1) {",
        "(a,\n  b) tail",
        "foo: bar",
        "= foo",
    ])
    def test_consumed_text_round_trips(self, source):
        """The consumed pieces concatenate back to the input."""
        lexer = Lexer(source)
        lexer.get_tokens()
        assert "".join(lexer.consumed) == source

    def test_lexing_is_idempotent(self):
        """Lexing the same input twice yields equal tokens."""
        source = "function foo(a, b = {x: 1}) {"
        assert lex(source) == lex(source)

    def test_lexer_ends_once(self):
        """get_tokens() stops after eos."""
        lexer = Lexer("foo")
        first = list(lexer.get_tokens())
        assert lexer.ended
        assert lexer.get_tokens() == first
