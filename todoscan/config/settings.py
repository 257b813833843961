"""
Scan settings.

Values come from, in order of precedence: explicit overrides (usually CLI
flags), ``TODOSCAN_*`` environment variables (a ``.env`` file in the working
directory is loaded first), then the defaults below.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Any, Dict, List, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

from ..scanner.models import ScanPreferences

logger = logging.getLogger(__name__)

ENV_PREFIX = "TODOSCAN_"

_ENV_FIELDS = {
    "min_words": "MIN_WORDS",
    "min_chars": "MIN_CHARS",
    "max_workers": "MAX_WORKERS",
    "log_level": "LOG_LEVEL",
    "filters": "FILTERS",
    "excluded_dirs": "EXCLUDED_DIRS",
}

_LIST_FIELDS = {"filters", "excluded_dirs"}


class ScanSettings(BaseModel):
    filters: List[str] = Field(default_factory=list)
    excluded_dirs: Optional[List[str]] = None
    min_words: int = Field(3, ge=0)
    min_chars: int = Field(30, ge=0)
    max_workers: Optional[int] = Field(None, ge=1)
    log_level: str = "WARNING"

    @field_validator("filters")
    @classmethod
    def _filters_compile(cls, value: List[str]) -> List[str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"Invalid filter pattern {pattern!r}: {exc}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level {value!r}")
        return level

    def to_preferences(self) -> ScanPreferences:
        return ScanPreferences(
            filters=list(self.filters),
            excluded_dirs=list(self.excluded_dirs) if self.excluded_dirs is not None else None,
            min_words=self.min_words,
            min_chars=self.min_chars,
            max_workers=self.max_workers,
        )


def _split_list(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def settings_from_env(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    environ = os.environ if environ is None else environ
    values: Dict[str, Any] = {}
    for field_name, suffix in _ENV_FIELDS.items():
        raw = environ.get(ENV_PREFIX + suffix)
        if raw is None or raw == "":
            continue
        values[field_name] = _split_list(raw) if field_name in _LIST_FIELDS else raw
    return values


def load_settings(*, use_dotenv: bool = True, **overrides: Any) -> ScanSettings:
    """Build validated settings; overrides that are None are ignored."""
    if use_dotenv:
        load_dotenv(find_dotenv(usecwd=True))
    values = settings_from_env()
    values.update({key: value for key, value in overrides.items() if value is not None})
    settings = ScanSettings(**values)
    logger.debug(f"Loaded settings: {settings.model_dump()}")
    return settings
