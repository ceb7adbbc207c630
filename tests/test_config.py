"""Tests for YAML configuration loading."""

from pathlib import Path

import pytest

from article_archive.config import CONFIG_ENV_VAR, AppConfig, ConfigError, load_config


def test_defaults_without_path(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    cfg = load_config(None)

    assert cfg == AppConfig()
    assert cfg.store.root == "articles"
    assert cfg.attribution.required == ["original", "author", "project", "permalink"]
    assert "原文作者" in cfg.attribution.labels["author"]


def test_defaults_are_not_shared(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    cfg = load_config(None)
    cfg.store.root = "elsewhere"
    assert load_config(None).store.root == "articles"


def test_yaml_overrides_merge_with_defaults(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "store:\n  root: docs\nlint:\n  disabled_rules: [duplicate-article]\nunknown: 1\n",
        encoding="utf-8",
    )
    cfg = load_config(str(path))

    assert cfg.store.root == "docs"
    assert cfg.store.pattern == "*.md"
    assert cfg.lint.disabled_rules == ["duplicate-article"]
    assert cfg.lint.allow_relative_links is True


def test_env_var_names_config(tmp_path: Path, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("output:\n  report_format: html\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    assert load_config(None).output.report_format == "html"


def test_invalid_format_raises(tmp_path: Path):
    path = tmp_path / "bad.yaml"
    path.write_text("output:\n  report_format: pdf\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_unknown_option_raises(tmp_path: Path):
    path = tmp_path / "bad.yaml"
    path.write_text("store:\n  folder: docs\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_section_must_be_mapping(tmp_path: Path):
    path = tmp_path / "bad.yaml"
    path.write_text("store: docs\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_required_field_needs_labels(tmp_path: Path):
    path = tmp_path / "bad.yaml"
    path.write_text("attribution:\n  required: [original, editor]\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_label_override_keeps_other_fields(tmp_path: Path):
    path = tmp_path / "labels.yaml"
    path.write_text("attribution:\n  labels:\n    author: [作者]\n", encoding="utf-8")
    cfg = load_config(str(path))

    assert cfg.attribution.labels["author"] == ["作者"]
    assert "原文地址" in cfg.attribution.labels["original"]


def test_malformed_yaml_raises_config_error(tmp_path: Path):
    path = tmp_path / "broken.yaml"
    path.write_text("store: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid YAML"):
        load_config(str(path))


@pytest.mark.parametrize(
    "body",
    [
        "lint:\n  duplicate_title_threshold: '95'\n",
        "lint:\n  duplicate_title_threshold: true\n",
        "lint:\n  allow_relative_links: 'no'\n",
        "lint:\n  url_schemes: https\n",
        "store:\n  exclude: [README.md, 3]\n",
        "logging:\n  console: 1\n",
        "attribution:\n  labels:\n    author: 作者\n",
        "lint:\n  placeholder_patterns: ['[unclosed']\n",
    ],
)
def test_wrongly_typed_values_raise_config_error(tmp_path: Path, body: str):
    path = tmp_path / "typed.yaml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(path))
