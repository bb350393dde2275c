"""Tests for doc_reconcile.config: settings resolution and validation.

NOT to be confused with test_config_loader.py (hierarchical YAML config)
or test_config_schema.py (Pydantic models).  This tests the precedence
layer: validate_settings() and load_settings().
"""

import logging

import pytest

from doc_reconcile.config import Settings, load_settings, validate_settings
from doc_reconcile.config_schema import build_config

# -------------------------------------------------------------------------
# validate_settings()
# -------------------------------------------------------------------------


class TestValidateSettings:
    """Tests for validate_settings(): label and limit checks."""

    def test_defaults_valid(self):
        validate_settings(Settings())  # should not raise

    def test_labels_stripped(self):
        settings = Settings(current_label="  EDITOR ", incoming_label="AGENT\t")
        validate_settings(settings)

        assert settings.current_label == "EDITOR"
        assert settings.incoming_label == "AGENT"

    def test_empty_label_rejected(self):
        with pytest.raises(ValueError, match="current_label"):
            validate_settings(Settings(current_label="  "))

    def test_multiline_label_rejected(self):
        with pytest.raises(ValueError, match="line breaks"):
            validate_settings(Settings(incoming_label="A\nB"))

    @pytest.mark.parametrize("value", [0, -3, 1001])
    def test_revision_limit_range(self, value):
        with pytest.raises(ValueError, match="between 1 and 1000"):
            validate_settings(Settings(max_revisions=value))

    def test_identical_labels_warn(self, caplog):
        with caplog.at_level(logging.WARNING):
            validate_settings(Settings(current_label="X", incoming_label="X"))

        assert "both 'X'" in caplog.text


# -------------------------------------------------------------------------
# load_settings()
# -------------------------------------------------------------------------


class TestLoadSettings:
    """Tests for load_settings() precedence: CLI > env > YAML > default."""

    def test_defaults(self, clean_env):
        settings = load_settings()

        assert settings == Settings()

    def test_yaml_fallbacks(self, clean_env):
        unified = build_config(
            {
                "merge": {"current_label": "DRAFT"},
                "revisions": {"max_revisions": 9},
                "logging": {"level": "WARNING", "file": "/tmp/r.log"},
            }
        )

        settings = load_settings(unified=unified)

        assert settings.current_label == "DRAFT"
        assert settings.max_revisions == 9
        assert settings.log_level == "WARNING"
        assert settings.log_file == "/tmp/r.log"

    def test_env_beats_yaml(self, clean_env, monkeypatch):
        monkeypatch.setenv("DOC_RECONCILE_MAX_REVISIONS", "12")
        monkeypatch.setenv("DOC_RECONCILE_INCOMING_LABEL", "AGENT")
        unified = build_config(
            {"merge": {"incoming_label": "YAML"}, "revisions": {"max_revisions": 9}}
        )

        settings = load_settings(unified=unified)

        assert settings.max_revisions == 12
        assert settings.incoming_label == "AGENT"

    def test_cli_beats_env(self, clean_env, monkeypatch):
        monkeypatch.setenv("DOC_RECONCILE_MAX_REVISIONS", "12")
        monkeypatch.setenv("DOC_RECONCILE_CURRENT_LABEL", "ENV")

        settings = load_settings(
            max_revisions=3, current_label="CLI", log_file="/tmp/cli.log"
        )

        assert settings.max_revisions == 3
        assert settings.current_label == "CLI"
        assert settings.log_file == "/tmp/cli.log"

    def test_non_numeric_env_rejected(self, clean_env, monkeypatch):
        monkeypatch.setenv("DOC_RECONCILE_MAX_REVISIONS", "lots")

        with pytest.raises(ValueError, match="DOC_RECONCILE_MAX_REVISIONS"):
            load_settings()

    def test_out_of_range_env_rejected(self, clean_env, monkeypatch):
        monkeypatch.setenv("DOC_RECONCILE_MAX_REVISIONS", "5000")

        with pytest.raises(ValueError, match="between 1 and 1000"):
            load_settings()

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("true", True), ("1", True), ("on", True), ("no", False), ("0", False)],
    )
    def test_debug_env(self, clean_env, monkeypatch, raw, expected):
        monkeypatch.setenv("DOC_RECONCILE_DEBUG", raw)

        assert load_settings().debug is expected

    def test_debug_flag_beats_env(self, clean_env, monkeypatch):
        monkeypatch.setenv("DOC_RECONCILE_DEBUG", "false")

        assert load_settings(debug=True).debug is True
