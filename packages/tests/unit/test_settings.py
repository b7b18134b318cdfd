"""Unit tests for understudy._settings — configuration model.

Test Techniques Used:
    - Specification-based Testing: default values
    - Boundary Value Analysis: max_reported_records lower bound
    - Environment Override: monkeypatch for env var injection
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from understudy._settings import Settings


class TestDefaults:
    def test_strict_signatures_on(self) -> None:
        assert Settings(_env_file=None).strict_signatures is True  # type: ignore[call-arg]

    def test_max_reported_records_20(self) -> None:
        assert Settings(_env_file=None).max_reported_records == 20  # type: ignore[call-arg]

    def test_autoverify_off(self) -> None:
        assert Settings(_env_file=None).autoverify is False  # type: ignore[call-arg]


class TestValidation:
    """Technique: Boundary Value Analysis."""

    def test_max_reported_records_minimum_is_one(self) -> None:
        assert Settings(max_reported_records=1).max_reported_records == 1

    def test_max_reported_records_zero_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(max_reported_records=0)


class TestEnvironment:
    def test_prefixed_variables_read(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("UNDERSTUDY_STRICT_SIGNATURES", "false")
        monkeypatch.setenv("UNDERSTUDY_AUTOVERIFY", "true")
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.strict_signatures is False
        assert settings.autoverify is True

    def test_unprefixed_variables_ignored(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("MAX_REPORTED_RECORDS", "2")
        assert Settings(_env_file=None).max_reported_records == 20  # type: ignore[call-arg]

    def test_env_file_read(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text(
            "UNDERSTUDY_MAX_REPORTED_RECORDS=7\nUNRELATED_KEY=1\n", encoding="utf-8"
        )
        settings = Settings(_env_file=env_file)  # type: ignore[call-arg]
        assert settings.max_reported_records == 7
