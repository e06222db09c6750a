"""Tests for environment-based settings."""

import logging
from pathlib import Path

import pytest

from homework.config import load_settings
from homework.reference import DEFAULT_REFERENCE_DIR


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for suffix in ("DATA_DIR", "REFERENCE_DIR", "WORDS_SOURCE", "VERBS_SOURCE", "LOG_LEVEL"):
        monkeypatch.delenv(f"HOMEWORK_{suffix}", raising=False)


def test_defaults():
    settings = load_settings()
    assert settings.data_dir == Path("~/.homework").expanduser()
    assert settings.reference_dir == DEFAULT_REFERENCE_DIR
    assert settings.words_source == "words.csv"
    assert settings.verbs_source == "verbs.csv"
    assert settings.log_level == logging.WARNING


def test_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("HOMEWORK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HOMEWORK_WORDS_SOURCE", "https://example.com/words.csv")
    monkeypatch.setenv("HOMEWORK_LOG_LEVEL", "debug")

    settings = load_settings()
    assert settings.data_dir == tmp_path
    assert settings.words_source == "https://example.com/words.csv"
    assert settings.log_level == logging.DEBUG


@pytest.mark.parametrize("raw, expected", [("20", 20), ("bogus", logging.WARNING), ("  ", logging.WARNING)])
def test_log_level_parsing(monkeypatch, raw, expected):
    monkeypatch.setenv("HOMEWORK_LOG_LEVEL", raw)
    assert load_settings().log_level == expected
