import logging

import pytest

from src.infrastructure import config as config_module
from src.infrastructure.config import AppConfig
from src.infrastructure.logging_config import configure_logging


@pytest.mark.unit
@pytest.mark.parametrize("raw, expected", [(None, 7), ("12", 12), ("abc", 7), ("-3", 7), ("0", 7)])
def test_int_env_falls_back_on_invalid_values(monkeypatch, raw, expected) -> None:
    if raw is None:
        monkeypatch.delenv("PDF_ASSEMBLER_TEST_INT", raising=False)
    else:
        monkeypatch.setenv("PDF_ASSEMBLER_TEST_INT", raw)
    assert config_module._get_int_env("PDF_ASSEMBLER_TEST_INT", 7) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, expected", [(None, True), ("false", False), ("0", False), ("YES", True), ("on", True)]
)
def test_bool_env(monkeypatch, raw, expected) -> None:
    if raw is None:
        monkeypatch.delenv("PDF_ASSEMBLER_TEST_BOOL", raising=False)
    else:
        monkeypatch.setenv("PDF_ASSEMBLER_TEST_BOOL", raw)
    assert config_module._get_bool_env("PDF_ASSEMBLER_TEST_BOOL", True) is expected


@pytest.mark.unit
def test_str_env_ignores_blank(monkeypatch) -> None:
    monkeypatch.setenv("PDF_ASSEMBLER_TEST_STR", "   ")
    assert config_module._get_str_env("PDF_ASSEMBLER_TEST_STR", "fallback") == "fallback"
    monkeypatch.setenv("PDF_ASSEMBLER_TEST_STR", " combined.pdf ")
    assert config_module._get_str_env("PDF_ASSEMBLER_TEST_STR", "fallback") == "combined.pdf"


@pytest.mark.unit
def test_size_limit_in_bytes() -> None:
    assert AppConfig(max_pdf_size_mb=3).max_pdf_size_bytes == 3 * 1024 * 1024


@pytest.mark.unit
def test_configure_logging_accepts_unknown_level(monkeypatch) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging("verbose")
    configure_logging("debug")

    assert calls[0]["level"] == logging.INFO
    assert calls[1]["level"] == logging.DEBUG
