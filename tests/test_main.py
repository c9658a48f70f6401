"""Tests for the ``python -m travelxo`` entry point."""

import pytest

from travelxo import __main__ as entry


@pytest.mark.parametrize(
    "value, expected",
    [("debug", "DEBUG"), (" Warning ", "WARNING"), ("INFO", "INFO")],
)
def test_known_log_levels(value, expected):
    assert entry.resolve_log_level(value) == expected


@pytest.mark.parametrize("value", ["VERBOSE", "", "warn", "notset"])
def test_unknown_log_level_falls_back_to_info(value):
    assert entry.resolve_log_level(value) == "INFO"


def test_main_starts_with_fallback_level(monkeypatch):
    calls = {}

    def fake_run(app, **kwargs):
        calls["app"] = app
        calls.update(kwargs)

    monkeypatch.setenv("TRAVELXO_LOG_LEVEL", "VERBOSE")
    monkeypatch.setenv("TRAVELXO_PORT", "9001")
    monkeypatch.setattr(entry.uvicorn, "run", fake_run)

    entry.main()

    assert calls["app"] == "travelxo.ui:app"
    assert calls["port"] == 9001
    assert calls["log_level"] == "info"
