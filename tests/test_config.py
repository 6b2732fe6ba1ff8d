"""Unit tests for the Pydantic configuration model (stencil.config).

Tests cover:
- Config defaults and derived values
- Field validation (marker extension, clone timeout)
- from_env overrides
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from stencil.config import Config


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestConfigDefaults:
    @pytest.mark.unit
    def test_defaults(self):
        config = Config()
        assert config.template_extension == "j2"
        assert config.questions_file == "blueprint.toml"
        assert config.registry_file == "blueprints.toml"
        assert config.clone_timeout == 120
        assert config.verbose is False

    @pytest.mark.unit
    def test_template_suffix(self):
        assert Config().template_suffix == ".j2"
        assert Config(template_extension="tmplext").template_suffix == ".tmplext"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestConfigValidation:
    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["", "   ", ".j2", "a/b", "tar.gz"])
    def test_rejects_non_bare_extension(self, value):
        with pytest.raises(ValidationError):
            Config(template_extension=value)

    @pytest.mark.unit
    def test_extension_is_stripped(self):
        assert Config(template_extension=" jinja ").template_extension == "jinja"

    @pytest.mark.unit
    def test_clone_timeout_minimum(self):
        with pytest.raises(ValidationError):
            Config(clone_timeout=5)

    @pytest.mark.unit
    def test_empty_questions_file_rejected(self):
        with pytest.raises(ValidationError):
            Config(questions_file="")


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


class TestConfigFromEnv:
    @pytest.mark.unit
    def test_no_overrides(self):
        with patch.dict(os.environ, {}, clear=True):
            assert Config.from_env() == Config()

    @pytest.mark.unit
    def test_overrides(self):
        env = {
            "STENCIL_TEMPLATE_EXTENSION": "tera",
            "STENCIL_QUESTIONS_FILE": "questions.toml",
            "STENCIL_REGISTRY_FILE": "registry.toml",
            "STENCIL_CLONE_TIMEOUT": "300",
            "STENCIL_VERBOSE": "yes",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.template_extension == "tera"
        assert config.questions_file == "questions.toml"
        assert config.registry_file == "registry.toml"
        assert config.clone_timeout == 300
        assert config.verbose is True

    @pytest.mark.unit
    @pytest.mark.parametrize("raw, expected", [("1", True), ("TRUE", True), ("0", False), ("no", False)])
    def test_verbose_flag(self, raw, expected):
        with patch.dict(os.environ, {"STENCIL_VERBOSE": raw}, clear=True):
            assert Config.from_env().verbose is expected

    @pytest.mark.unit
    def test_invalid_extension_from_env(self):
        with patch.dict(os.environ, {"STENCIL_TEMPLATE_EXTENSION": ".j2"}, clear=True):
            with pytest.raises(ValidationError):
                Config.from_env()
