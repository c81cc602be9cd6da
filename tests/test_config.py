"""Tests for configuration helpers."""

import pytest

from live_quiz.config import Settings, parse_allowed_origins


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, ["*"]),
        ("", ["*"]),
        (" * ", ["*"]),
        ("https://a.example/", ["https://a.example"]),
        (
            "https://a.example, https://b.example ,",
            ["https://a.example", "https://b.example"],
        ),
        (" , ", ["*"]),
    ],
)
def test_parse_allowed_origins(raw: str | None, expected: list[str]) -> None:
    assert parse_allowed_origins(raw) == expected


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("QUIZ_DEFAULT_TIME_LIMIT_SECONDS", "30")
    monkeypatch.setenv("TRANSCRIPT_MAX_CHUNK_SIZE", "500")

    settings = Settings()

    assert settings.quiz_default_time_limit_seconds == 30
    assert settings.transcript_max_chunk_size == 500
