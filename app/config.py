"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

DEFAULT_TEST_USER_IDS: tuple[str, ...] = ("X001", "PH123", "OMMATEST")

DEFAULT_MISSING_ID_PREFIX = "MissingID-"

# A row counts as one unique interaction when the sum across these columns is > 0.
DEFAULT_INTERACTION_COLUMNS: tuple[str, ...] = (
    "event_count_answer_correct",
    "event_count_answer_wrong",
    "event_count_back_to_home",
    "event_count_replay",
    "event_count_scene2_earning_details",
    "event_count_scene2_skip_details",
    "event_count_scene5_availability",
    "event_count_scene5_unique_packcodes",
    "event_count_scene5_visibility",
    "event_count_scene8_home_page",
    "event_count_scene8_nps_campaign",
    "event_count_scene8_service_catalog_stg",
    "event_count_scene8_service_chargili",
)

DEFAULT_EXCLUDED_LABEL_TERMS: tuple[str, ...] = ("elevenlabs", "tts synthesis")


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_list_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """
    Read a comma-separated list from environment variables with fallback.

    Blank entries are dropped; an entirely blank value falls back to *default*.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    items = tuple(item.strip() for item in raw_value.split(",") if item.strip())
    return items if items else default


@dataclass(frozen=True)
class AnalyticsEngineSettings:
    """
    Identity classification and column discovery settings for the engine.
    """

    test_user_ids: frozenset[str] = frozenset(DEFAULT_TEST_USER_IDS)
    missing_id_prefix: str = DEFAULT_MISSING_ID_PREFIX
    interaction_columns: tuple[str, ...] = DEFAULT_INTERACTION_COLUMNS


@dataclass(frozen=True)
class FunnelSettings:
    """
    Funnel item-count bounds and metric catalogue filtering.
    """

    min_items: int = 3
    max_items: int = 6
    default_items: int = 4
    excluded_label_terms: tuple[str, ...] = DEFAULT_EXCLUDED_LABEL_TERMS

    def clamp_item_count(self, count: int | None) -> int:
        """
        Bring a requested funnel length into the configured bounds.
        """

        if count is None:
            return self.default_items
        return max(self.min_items, min(self.max_items, count))

    def allows_item_count(self, count: int) -> bool:
        return self.min_items <= count <= self.max_items


@dataclass(frozen=True)
class CSVProcessingSettings:
    """
    Runtime settings for CSV upload processing.
    """

    max_upload_bytes: int = 50 * 1024 * 1024
    log_skipped_rows: bool = False


@lru_cache(maxsize=1)
def get_analytics_engine_settings() -> AnalyticsEngineSettings:
    """
    Return cached engine settings from environment variables.
    """

    return AnalyticsEngineSettings(
        test_user_ids=frozenset(_get_list_env("ANALYTICS_TEST_USER_IDS", DEFAULT_TEST_USER_IDS)),
        missing_id_prefix=_get_str_env("ANALYTICS_MISSING_ID_PREFIX", DEFAULT_MISSING_ID_PREFIX),
        interaction_columns=_get_list_env("ANALYTICS_INTERACTION_COLUMNS", DEFAULT_INTERACTION_COLUMNS),
    )


@lru_cache(maxsize=1)
def get_funnel_settings() -> FunnelSettings:
    """
    Return cached funnel settings from environment variables.

    Bounds are sanitised so that 1 <= min <= default <= max always holds.
    """

    min_items = max(1, _get_int_env("FUNNEL_MIN_ITEMS", 3))
    max_items = max(min_items, _get_int_env("FUNNEL_MAX_ITEMS", 6))
    default_items = max(min_items, min(max_items, _get_int_env("FUNNEL_DEFAULT_ITEMS", 4)))
    excluded = _get_list_env("FUNNEL_EXCLUDED_LABEL_TERMS", DEFAULT_EXCLUDED_LABEL_TERMS)
    return FunnelSettings(
        min_items=min_items,
        max_items=max_items,
        default_items=default_items,
        excluded_label_terms=tuple(term.lower() for term in excluded),
    )


@lru_cache(maxsize=1)
def get_csv_processing_settings() -> CSVProcessingSettings:
    """
    Return cached CSV processing settings from environment variables.
    """

    return CSVProcessingSettings(
        max_upload_bytes=max(1, _get_int_env("CSV_PROCESS_MAX_UPLOAD_BYTES", 50 * 1024 * 1024)),
        log_skipped_rows=_get_bool_env("CSV_PROCESS_LOG_SKIPPED_ROWS", False),
    )
