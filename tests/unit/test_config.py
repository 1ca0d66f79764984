"""Unit tests for service settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from sandbox_tasks.config import ServiceSettings
from sandbox_tasks.tasks.models import PLACEHOLDER_RESULT


def test_settings_defaults() -> None:
    settings = ServiceSettings(_env_file=None)

    assert settings.host == "0.0.0.0"
    assert settings.port == 8000
    assert settings.log_level == "INFO"
    assert settings.min_delay_seconds == 2
    assert settings.max_delay_seconds == 4
    assert settings.result_text == PLACEHOLDER_RESULT
    assert settings.task_ttl_seconds == 0
    assert settings.retention_enabled is False


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SANDBOX_PORT", "9001")
    monkeypatch.setenv("SANDBOX_MIN_DELAY_SECONDS", "0")
    monkeypatch.setenv("SANDBOX_MAX_DELAY_SECONDS", "1")
    monkeypatch.setenv("SANDBOX_TASK_TTL_SECONDS", "300")

    settings = ServiceSettings(_env_file=None)

    assert settings.port == 9001
    assert settings.min_delay_seconds == 0
    assert settings.max_delay_seconds == 1
    assert settings.retention_enabled is True


def test_settings_loads_from_dotenv(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text(
        "\n".join(
            [
                "LOG_LEVEL=DEBUG",
                "SANDBOX_RESULT_TEXT=done",
                "",
            ]
        ),
        encoding="utf-8",
    )

    settings = ServiceSettings()

    assert settings.log_level == "DEBUG"
    assert settings.result_text == "done"


def test_keyword_overrides_take_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SANDBOX_PORT", "9001")

    settings = ServiceSettings(_env_file=None, port=9100)

    assert settings.port == 9100


def test_inverted_delay_range_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SANDBOX_MIN_DELAY_SECONDS", "5")
    monkeypatch.setenv("SANDBOX_MAX_DELAY_SECONDS", "2")

    with pytest.raises(ValidationError):
        ServiceSettings(_env_file=None)


@pytest.mark.parametrize("port", ["0", "70000"])
def test_out_of_range_port_is_rejected(monkeypatch: pytest.MonkeyPatch, port: str) -> None:
    monkeypatch.setenv("SANDBOX_PORT", port)

    with pytest.raises(ValidationError):
        ServiceSettings(_env_file=None)
