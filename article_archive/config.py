"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- StoreConfig: Where articles live and how they are read
- AttributionConfig: Attribution block labels and required fields
- LintConfig: Integrity check settings
- OutputConfig: Report and catalog output settings
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
import re
from typing import Any

import yaml

from .input.parser import DEFAULT_LABELS

CONFIG_ENV_VAR = "ARTICLE_ARCHIVE_CONFIG"

REPORT_FORMATS = ("markdown", "html", "jsonl")
INDEX_FORMATS = ("markdown", "html")
LOG_FORMATS = ("jsonl", "plain")


class ConfigError(ValueError):
    """Raised when a configuration file contains invalid values."""


@dataclass
class StoreConfig:
    """Configuration for the document store.

    Attributes:
        root: Directory holding the article files
        pattern: Glob pattern selecting article files inside root
        exclude: File names that are never treated as articles
        encoding: Text encoding of article files
    """

    root: str = "articles"
    pattern: str = "*.md"
    exclude: list[str] = field(default_factory=lambda: ["README.md"])
    encoding: str = "utf-8"


@dataclass
class AttributionConfig:
    """Configuration for attribution block parsing.

    Attributes:
        labels: Canonical field name -> accepted label texts
        required: Fields that must appear exactly once, in this order
        optional: Fields that may follow the required ones, in this order
    """

    labels: dict[str, list[str]] = field(
        default_factory=lambda: {key: list(value) for key, value in DEFAULT_LABELS.items()}
    )
    required: list[str] = field(
        default_factory=lambda: ["original", "author", "project", "permalink"]
    )
    optional: list[str] = field(default_factory=lambda: ["translator", "proofreader"])


@dataclass
class LintConfig:
    """Configuration for integrity checks.

    Attributes:
        disabled_rules: Rule ids to skip (e.g., ["duplicate-article"])
        url_schemes: Schemes accepted for absolute link targets
        allow_relative_links: Whether "#anchor" and relative paths are valid
        placeholder_patterns: Regular expressions matching template placeholders
        attribution_placeholders: Values that count as placeholders when they
                                  make up a whole attribution value
        duplicate_title_threshold: Fuzzy match threshold (0-100) for titles
    """

    disabled_rules: list[str] = field(default_factory=list)
    url_schemes: list[str] = field(default_factory=lambda: ["http", "https", "mailto"])
    allow_relative_links: bool = True
    placeholder_patterns: list[str] = field(
        default_factory=lambda: [
            r"\{\{[^{}]*\}\}",
            r"\$\{[A-Za-z_][A-Za-z0-9_]*\}",
            r"<(?:译者|校对者|作者|translator|proofreader|author|name)>",
            r"\[\]\(\)",
        ]
    )
    attribution_placeholders: list[str] = field(
        default_factory=lambda: ["TODO", "TBD", "待定", "待认领", "xxx", "XXX"]
    )
    duplicate_title_threshold: int = 95


@dataclass
class OutputConfig:
    """Configuration for output generation.

    Attributes:
        report_dir: Directory for lint reports; no report is written when None
        report_format: "markdown", "html" or "jsonl"
        index_format: Catalog format, "markdown" or "html"
        index_title: Catalog heading
    """

    report_dir: str | None = None
    report_format: str = "markdown"
    index_format: str = "markdown"
    index_title: str = "译文目录"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to a file in the report directory
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "WARNING"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "lint.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    store: StoreConfig = field(default_factory=StoreConfig)
    attribution: AttributionConfig = field(default_factory=AttributionConfig)
    lint: LintConfig = field(default_factory=LintConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults.

    When path is None the ARTICLE_ARCHIVE_CONFIG environment variable is
    consulted; with neither, the defaults are returned.

    Raises:
        FileNotFoundError: If the config file does not exist
        ConfigError: If the file is not a mapping or holds invalid values
    """
    path = path or os.getenv(CONFIG_ENV_VAR)
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"{path}: invalid YAML: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    cfg = _merge_config(AppConfig(), raw)
    validate_config(cfg)
    return cfg


def _expect(name: str, value: Any, kind: type, label: str) -> None:
    # bool is an int subclass
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ConfigError(f"{name} must be {label}, got {value!r}")


def _expect_strings(name: str, value: Any) -> None:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{name} must be a list of strings, got {value!r}")


def validate_config(cfg: AppConfig) -> None:
    """Check option types, enumerated and numeric settings.

    Raises:
        ConfigError: On the first invalid value found
    """
    for name, value in (
        ("store.root", cfg.store.root),
        ("store.pattern", cfg.store.pattern),
        ("store.encoding", cfg.store.encoding),
        ("output.report_format", cfg.output.report_format),
        ("output.index_format", cfg.output.index_format),
        ("output.index_title", cfg.output.index_title),
        ("logging.level", cfg.logging.level),
        ("logging.format", cfg.logging.format),
        ("logging.filename", cfg.logging.filename),
    ):
        _expect(name, value, str, "a string")
    if cfg.output.report_dir is not None:
        _expect("output.report_dir", cfg.output.report_dir, str, "a string")
    for name, value in (
        ("lint.allow_relative_links", cfg.lint.allow_relative_links),
        ("logging.console", cfg.logging.console),
        ("logging.file", cfg.logging.file),
    ):
        _expect(name, value, bool, "true or false")
    _expect("lint.duplicate_title_threshold", cfg.lint.duplicate_title_threshold, int, "an integer")
    for name, value in (
        ("store.exclude", cfg.store.exclude),
        ("attribution.required", cfg.attribution.required),
        ("attribution.optional", cfg.attribution.optional),
        ("lint.disabled_rules", cfg.lint.disabled_rules),
        ("lint.url_schemes", cfg.lint.url_schemes),
        ("lint.placeholder_patterns", cfg.lint.placeholder_patterns),
        ("lint.attribution_placeholders", cfg.lint.attribution_placeholders),
    ):
        _expect_strings(name, value)
    _expect("attribution.labels", cfg.attribution.labels, dict, "a mapping")
    for key, labels in cfg.attribution.labels.items():
        _expect_strings(f"attribution.labels.{key}", labels)
    for pattern in cfg.lint.placeholder_patterns:
        try:
            re.compile(pattern)
        except re.error as exc:
            raise ConfigError(f"lint.placeholder_patterns: invalid pattern {pattern!r}: {exc}") from exc

    if cfg.output.report_format not in REPORT_FORMATS:
        raise ConfigError(f"output.report_format must be one of {REPORT_FORMATS}")
    if cfg.output.index_format not in INDEX_FORMATS:
        raise ConfigError(f"output.index_format must be one of {INDEX_FORMATS}")
    if cfg.logging.format not in LOG_FORMATS:
        raise ConfigError(f"logging.format must be one of {LOG_FORMATS}")
    if not 0 <= cfg.lint.duplicate_title_threshold <= 100:
        raise ConfigError("lint.duplicate_title_threshold must be between 0 and 100")
    known = set(cfg.attribution.labels)
    for name in [*cfg.attribution.required, *cfg.attribution.optional]:
        if name not in known:
            raise ConfigError(f"attribution field {name!r} has no labels")


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            labels = value.get("labels") if key == "attribution" else None
            if isinstance(labels, dict):
                # Per-field override; fields left out keep their default labels
                value = {**value, "labels": {**data[key]["labels"], **labels}}
            data[key].update(value)
        else:
            raise ConfigError(f"section {key!r} must be a mapping")
    try:
        return _fromdict(data)
    except TypeError as exc:
        raise ConfigError(f"unknown configuration option: {exc}") from exc


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "store": {
            "root": cfg.store.root,
            "pattern": cfg.store.pattern,
            "exclude": list(cfg.store.exclude),
            "encoding": cfg.store.encoding,
        },
        "attribution": {
            "labels": {key: list(value) for key, value in cfg.attribution.labels.items()},
            "required": list(cfg.attribution.required),
            "optional": list(cfg.attribution.optional),
        },
        "lint": {
            "disabled_rules": list(cfg.lint.disabled_rules),
            "url_schemes": list(cfg.lint.url_schemes),
            "allow_relative_links": cfg.lint.allow_relative_links,
            "placeholder_patterns": list(cfg.lint.placeholder_patterns),
            "attribution_placeholders": list(cfg.lint.attribution_placeholders),
            "duplicate_title_threshold": cfg.lint.duplicate_title_threshold,
        },
        "output": {
            "report_dir": cfg.output.report_dir,
            "report_format": cfg.output.report_format,
            "index_format": cfg.output.index_format,
            "index_title": cfg.output.index_title,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        store=StoreConfig(**data["store"]),
        attribution=AttributionConfig(**data["attribution"]),
        lint=LintConfig(**data["lint"]),
        output=OutputConfig(**data["output"]),
        logging=LoggingConfig(**data["logging"]),
    )
