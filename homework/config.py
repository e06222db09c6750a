"""Settings loaded from HOMEWORK_* environment variables."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from homework.reference import DEFAULT_REFERENCE_DIR

ENV_PREFIX = "HOMEWORK"


def _env(suffix: str, default: str) -> str:
    value = os.environ.get(f"{ENV_PREFIX}_{suffix}")
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_level(suffix: str, default: int) -> int:
    raw = _env(suffix, "")
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


@dataclass(frozen=True)
class Settings:
    """Runtime settings.

    Attributes:
        data_dir: Directory holding the persisted task list and student name
        reference_dir: Directory that relative reference sources resolve against
        words_source: Word-list file name, path or URL
        verbs_source: Verb-list file name, path or URL
        log_level: Console logging level
    """

    data_dir: Path
    reference_dir: Path
    words_source: str = "words.csv"
    verbs_source: str = "verbs.csv"
    log_level: int = logging.WARNING


def load_settings() -> Settings:
    return Settings(
        data_dir=Path(_env("DATA_DIR", "~/.homework")).expanduser(),
        reference_dir=Path(_env("REFERENCE_DIR", str(DEFAULT_REFERENCE_DIR))).expanduser(),
        words_source=_env("WORDS_SOURCE", "words.csv"),
        verbs_source=_env("VERBS_SOURCE", "verbs.csv"),
        log_level=_env_level("LOG_LEVEL", logging.WARNING),
    )
