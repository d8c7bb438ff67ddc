"""Configuration loading and structured logging tests."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from scanner_app.config import DEFAULT_SUPPORTED_DOMAINS, ScannerConfig
from scanner_app.logging_config import (
    JsonFormatter,
    correlation_context,
    ensure_correlation_id,
    hash_identifier,
    redact_for_log,
)

_ENV_KEYS = [
    "APP_ENV",
    "APP_CONFIG_PATH",
    "SCANNER_CONFIG_DIR",
    "GEMINI_API_KEY",
    "MODEL",
    "DATABASE_PATH",
    "SCRAPE_TIMEOUT",
    "SUPPORTED_DOMAINS",
    "HISTORY_LIMIT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_environment() -> None:
    config = ScannerConfig.from_env()

    assert config.gemini_api_key is None
    assert config.model == "gemini-2.0-flash"
    assert config.database_path == "data/scanner.db"
    assert config.scrape_timeout == 10.0
    assert config.supported_domains == DEFAULT_SUPPORTED_DOMAINS
    assert config.history_limit == 20
    assert config.environment is None


def test_yaml_file_with_environment_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_dir = tmp_path / "environments"
    config_dir.mkdir()
    (config_dir / "staging.yaml").write_text(
        "# staging settings\n"
        "model: 'gemini-1.5-pro'\n"
        'supported_domains: "Zara.com, cos.com"\n'
        "history_limit: 50\n"
    )
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("SCANNER_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("HISTORY_LIMIT", "5")
    monkeypatch.setenv("GEMINI_API_KEY", "secret")

    config = ScannerConfig.from_env()

    assert config.environment == "staging"
    assert config.model == "gemini-1.5-pro"
    assert config.supported_domains == ["zara.com", "cos.com"]
    assert config.history_limit == 5
    assert config.gemini_api_key == "secret"


def test_explicit_config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "scanner.yaml"
    path.write_text("database_path: /tmp/other.db\nscrape_timeout: 2.5\n")
    monkeypatch.setenv("APP_CONFIG_PATH", str(path))

    config = ScannerConfig.from_env()

    assert config.database_path == "/tmp/other.db"
    assert config.scrape_timeout == 2.5


def test_redaction_masks_identifiers_urls_and_emails() -> None:
    payload = {
        "user_id": "u-123",
        "product_url": "https://www.zara.com/x",
        "note": "contact me at someone@example.com",
        "source": "https://img.zara.net/a.jpg",
        "nested": [{"api_key": "k"}],
        "score": 80,
    }

    assert redact_for_log(payload) == {
        "user_id": hash_identifier("u-123"),
        "product_url": "[redacted]",
        "note": "contact me at [redacted-email]",
        "source": "[redacted-url]",
        "nested": [{"api_key": "[redacted]"}],
        "score": 80,
    }


def test_json_formatter_includes_event_fields() -> None:
    record = logging.makeLogRecord(
        {"name": "scanner", "levelno": logging.INFO, "levelname": "INFO", "msg": "scan_scored",
         "event": "scan_scored", "correlation_id": "abc", "score": 80}
    )

    payload = json.loads(JsonFormatter().format(record))

    assert payload["event"] == "scan_scored"
    assert payload["correlation_id"] == "abc"
    assert payload["score"] == 80
    assert payload["level"] == "INFO"


def test_correlation_context_restores_previous_id() -> None:
    outer = ensure_correlation_id("outer-id")
    with correlation_context("inner-id") as inner:
        assert inner == "inner-id"
        assert ensure_correlation_id() == "inner-id"
    assert ensure_correlation_id() == outer


def test_user_ids_hash_to_stable_tokens() -> None:
    token = hash_identifier("u-123")
    assert token.startswith("user:")
    assert token == hash_identifier("u-123")
    assert token != hash_identifier("u-124")
    assert "u-123" not in token


def test_json_formatter_renders_exceptions() -> None:
    try:
        raise LookupError("Scan s1 not found")
    except LookupError:
        record = logging.makeLogRecord(
            {"msg": "tool_call_failed", "levelname": "ERROR", "exc_info": sys.exc_info()}
        )

    payload = json.loads(JsonFormatter().format(record))

    assert payload["service"] == "wardrobe-compatibility"
    assert "LookupError: Scan s1 not found" in payload["exception"]


def test_invalid_limits_are_rejected() -> None:
    with pytest.raises(ValueError):
        ScannerConfig(scrape_timeout=0)
    with pytest.raises(ValueError):
        ScannerConfig(history_limit=0)
    assert ScannerConfig(supported_domains=[" Zara.com ", ""]).supported_domains == ["zara.com"]
