"""
Tests for configuration loading.

© 2024 Intel Corporation
SPDX-License-Identifier: Apache-2.0 and MIT
"""

import json
import logging

import pytest

from docgen_tokenizer.config import (
    DEFAULT_MAX_CONTINUATION_DEPTH, LanguageOverrides, LogLevel, TokenizerConfig,
)


class TestTokenizerConfig:
    """Test configuration parsing."""

    def test_defaults(self):
        config = TokenizerConfig()
        assert config.expression_validator is None
        assert config.max_continuation_depth == DEFAULT_MAX_CONTINUATION_DEPTH
        assert config.log_level is LogLevel.INFO
        assert config.languages == {}

    def test_from_dict(self):
        config = TokenizerConfig.from_dict({
            'expression_validator': 'balanced',
            'max_continuation_depth': 4,
            'log_level': 'debug',
            'languages': {
                'C': {'types': ['size_t'], 'class': ['union']},
            },
        })
        assert config.expression_validator == 'balanced'
        assert config.max_continuation_depth == 4
        assert config.log_level is LogLevel.DEBUG
        overrides = config.overrides_for('c')
        assert overrides.types == ['size_t']
        assert overrides.class_keywords == ['union']
        assert config.overrides_for('javascript') is None

    def test_invalid_log_level(self, caplog):
        config = TokenizerConfig.from_dict({'log_level': 'loud'})
        assert config.log_level is LogLevel.INFO
        assert "Invalid log level: loud" in caplog.text

    @pytest.mark.parametrize("depth", [-1, "8", True, 2.5])
    def test_invalid_depth(self, depth, caplog):
        config = TokenizerConfig.from_dict({'max_continuation_depth': depth})
        assert config.max_continuation_depth == DEFAULT_MAX_CONTINUATION_DEPTH
        assert "Invalid max_continuation_depth" in caplog.text

    def test_to_dict_round_trip(self):
        config = TokenizerConfig.from_dict({
            'max_continuation_depth': 2,
            'languages': {'scss': {'modifiers': ['debug']}},
        })
        assert TokenizerConfig.from_dict(config.to_dict()) == config

    def test_apply_logging(self):
        root = logging.getLogger()
        previous = root.level
        try:
            TokenizerConfig(log_level=LogLevel.WARN).apply_logging()
            assert root.level == logging.WARNING
            TokenizerConfig(log_level=LogLevel.TRACE).apply_logging()
            assert root.level == logging.DEBUG
        finally:
            root.setLevel(previous)


class TestConfigFile:
    """Test loading configuration files."""

    def test_load(self, tmp_path):
        path = tmp_path / "tokenizer.json"
        path.write_text(json.dumps({
            'expression_validator': 'python',
            'languages': {'c': {'types': ['uint8_t']}},
        }), encoding='utf-8')
        config = TokenizerConfig.load(path)
        assert config.expression_validator == 'python'
        assert config.overrides_for('c').types == ['uint8_t']

    def test_load_missing_file(self, tmp_path, caplog):
        with pytest.raises(FileNotFoundError):
            TokenizerConfig.load(tmp_path / "missing.json")
        assert "Failed to load tokenizer config" in caplog.text

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding='utf-8')
        with pytest.raises(json.JSONDecodeError):
            TokenizerConfig.load(path)


class TestLanguageOverrides:
    """Test per-language keyword additions."""

    def test_grammar_keys(self):
        overrides = LanguageOverrides.from_dict({'function': ['fn'], 'variables': ['val']})
        assert overrides.as_grammar_dict() == {
            'types': [],
            'modifiers': [],
            'class': [],
            'function': ['fn'],
            'variables': ['val'],
        }
