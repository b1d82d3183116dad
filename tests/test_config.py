"""Tests for configuration loading."""

import logging
from pathlib import Path

import pytest

from guardian.config import (
    LOG_FORMAT,
    Config,
    HeuristicTables,
    configure_logging,
    load_config,
    load_tables,
    validate_config,
)
from guardian.constants import DEFAULT_BRANDS, DEFAULT_SUSPICIOUS_KEYWORDS, DEFAULT_SUSPICIOUS_TLDS


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "LOG_LEVEL",
        "CONFIG_DIR",
        "ENABLE_ML",
        "ENABLE_LLM",
        "ENABLE_THREAT_INTEL",
        "EMAIL_MAX_URL_SCANS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("guardian.config.load_dotenv", lambda *args, **kwargs: False)
    return monkeypatch


class TestHeuristicTables:
    def test_defaults(self):
        tables = HeuristicTables.default()
        assert tables.brands == DEFAULT_BRANDS
        assert tables.suspicious_tlds == DEFAULT_SUSPICIOUS_TLDS
        assert tables.homoglyphs["1"] == ("l", "i")

    def test_tables_are_immutable(self):
        tables = HeuristicTables.default()
        with pytest.raises(TypeError):
            tables.homoglyphs["z"] = ("s",)
        with pytest.raises(AttributeError):
            tables.brands = ("acme",)

    def test_build_normalises(self):
        tables = HeuristicTables.build(brands=["ACME"], suspicious_tlds=[".ZZ"])
        assert tables.brands == ("acme",)
        assert tables.suspicious_tlds == frozenset({"zz"})
        assert tables.suspicious_keywords == DEFAULT_SUSPICIOUS_KEYWORDS


class TestLoadTables:
    def test_missing_file(self, tmp_path):
        assert load_tables(tmp_path) == HeuristicTables.default()

    def test_overrides(self, tmp_path, caplog):
        (tmp_path / "heuristics.yaml").write_text(
            "brands:\n"
            "  - Contoso\n"
            "  - fabrikam\n"
            "suspicious_tlds: [zz]\n"
            "homoglyphs:\n"
            "  '0': o\n"
            "  1: [l, i]\n"
        )
        with caplog.at_level("INFO"):
            tables = load_tables(tmp_path)
        assert tables.brands == ("contoso", "fabrikam")
        assert tables.suspicious_tlds == frozenset({"zz"})
        assert tables.suspicious_keywords == DEFAULT_SUSPICIOUS_KEYWORDS
        assert dict(tables.homoglyphs) == {"0": ("o",), "1": ("l", "i")}
        assert "Loaded heuristic overrides" in caplog.text

    def test_malformed_entries_are_skipped(self, tmp_path):
        (tmp_path / "heuristics.yaml").write_text(
            "brands:\n  - acme\n  - {nested: value}\n  - ''\nhomoglyphs:\n  ab: c\n  '5': s\n"
        )
        tables = load_tables(tmp_path)
        assert tables.brands == ("acme",)
        assert dict(tables.homoglyphs) == {"5": ("s",)}

    def test_malformed_yaml(self, tmp_path, caplog):
        (tmp_path / "heuristics.yaml").write_text("brands: [unclosed\n")
        with caplog.at_level("WARNING"):
            tables = load_tables(tmp_path)
        assert tables == HeuristicTables.default()
        assert "Failed to parse heuristics.yaml" in caplog.text

    def test_non_mapping_yaml(self, tmp_path, caplog):
        (tmp_path / "heuristics.yaml").write_text("- just\n- a list\n")
        with caplog.at_level("WARNING"):
            tables = load_tables(tmp_path)
        assert tables == HeuristicTables.default()
        assert "expected a mapping" in caplog.text


class TestLoadConfig:
    def test_defaults(self, clean_env, tmp_path):
        clean_env.setenv("CONFIG_DIR", str(tmp_path))
        config = load_config()
        assert config.log_level == "INFO"
        assert config.config_dir == Path(tmp_path)
        assert config.enable_ml and config.enable_llm and config.enable_threat_intel
        assert config.email_max_url_scans == 5
        assert validate_config(config) == []

    def test_environment_overrides(self, clean_env, tmp_path):
        (tmp_path / "heuristics.yaml").write_text("brands: [contoso]\n")
        clean_env.setenv("CONFIG_DIR", str(tmp_path))
        clean_env.setenv("LOG_LEVEL", "debug")
        clean_env.setenv("ENABLE_LLM", "false")
        clean_env.setenv("EMAIL_MAX_URL_SCANS", "3")
        config = load_config()
        assert config.log_level == "DEBUG"
        assert config.enable_llm is False
        assert config.enable_ml is True
        assert config.email_max_url_scans == 3
        assert config.tables.brands == ("contoso",)


class TestValidateConfig:
    def test_valid(self):
        assert validate_config(Config()) == []

    def test_invalid(self):
        config = Config(
            log_level="loud",
            enable_ml=False,
            enable_llm=False,
            enable_threat_intel=False,
            email_max_url_scans=0,
        )
        errors = validate_config(config)
        assert len(errors) == 3
        assert any("LOG_LEVEL" in error for error in errors)
        assert any("EMAIL_MAX_URL_SCANS" in error for error in errors)


class TestConfigureLogging:
    def test_installs_format(self, monkeypatch):
        calls = {}
        monkeypatch.setattr("guardian.config.logging.basicConfig", lambda **kwargs: calls.update(kwargs))
        configure_logging("debug")
        assert calls["level"] == logging.DEBUG
        assert calls["format"] == LOG_FORMAT
