from __future__ import annotations

from collections.abc import Iterator

import pytest

from app.config import (
    DEFAULT_INTERACTION_COLUMNS,
    FunnelSettings,
    get_analytics_engine_settings,
    get_csv_processing_settings,
    get_funnel_settings,
)


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    get_analytics_engine_settings.cache_clear()
    get_funnel_settings.cache_clear()
    get_csv_processing_settings.cache_clear()
    yield
    get_analytics_engine_settings.cache_clear()
    get_funnel_settings.cache_clear()
    get_csv_processing_settings.cache_clear()


def test_engine_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("ANALYTICS_TEST_USER_IDS", "ANALYTICS_MISSING_ID_PREFIX", "ANALYTICS_INTERACTION_COLUMNS"):
        monkeypatch.delenv(name, raising=False)

    settings = get_analytics_engine_settings()

    assert settings.test_user_ids == frozenset({"X001", "PH123", "OMMATEST"})
    assert settings.missing_id_prefix == "MissingID-"
    assert settings.interaction_columns == DEFAULT_INTERACTION_COLUMNS


def test_engine_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANALYTICS_TEST_USER_IDS", " QA1, ,QA2 ")
    monkeypatch.setenv("ANALYTICS_MISSING_ID_PREFIX", "NOID:")
    monkeypatch.setenv("ANALYTICS_INTERACTION_COLUMNS", "event_count_replay")

    settings = get_analytics_engine_settings()

    assert settings.test_user_ids == frozenset({"QA1", "QA2"})
    assert settings.missing_id_prefix == "NOID:"
    assert settings.interaction_columns == ("event_count_replay",)


def test_funnel_bounds_are_sanitised(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FUNNEL_MIN_ITEMS", "4")
    monkeypatch.setenv("FUNNEL_MAX_ITEMS", "2")
    monkeypatch.setenv("FUNNEL_DEFAULT_ITEMS", "9")
    monkeypatch.setenv("FUNNEL_EXCLUDED_LABEL_TERMS", "ElevenLabs")

    settings = get_funnel_settings()

    assert (settings.min_items, settings.max_items, settings.default_items) == (4, 4, 4)
    assert settings.excluded_label_terms == ("elevenlabs",)


def test_invalid_numbers_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FUNNEL_MIN_ITEMS", "three")
    monkeypatch.setenv("CSV_PROCESS_MAX_UPLOAD_BYTES", "lots")
    monkeypatch.setenv("CSV_PROCESS_LOG_SKIPPED_ROWS", "yes")

    assert get_funnel_settings().min_items == 3
    processing = get_csv_processing_settings()
    assert processing.max_upload_bytes == 50 * 1024 * 1024
    assert processing.log_skipped_rows is True


def test_clamp_item_count() -> None:
    settings = FunnelSettings()

    assert settings.clamp_item_count(None) == 4
    assert settings.clamp_item_count(0) == 3
    assert settings.clamp_item_count(99) == 6
