from __future__ import annotations

import os
from dataclasses import dataclass


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _get_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


@dataclass(frozen=True)
class AppConfig:
    max_pdf_size_mb: int = _get_int_env("PDF_ASSEMBLER_MAX_PDF_MB", 10)
    max_documents: int = _get_int_env("PDF_ASSEMBLER_MAX_DOCUMENTS", 20)
    max_pages_per_document: int = _get_int_env("PDF_ASSEMBLER_MAX_PAGES", 1000)
    default_output_name: str = _get_str_env("PDF_ASSEMBLER_OUTPUT_NAME", "merged-document.pdf")
    compress_output: bool = _get_bool_env("PDF_ASSEMBLER_COMPRESS", True)
    thumbnail_width: int = _get_int_env("PDF_ASSEMBLER_THUMBNAIL_WIDTH", 150)
    log_level: str = _get_str_env("PDF_ASSEMBLER_LOG_LEVEL", "INFO")

    @property
    def max_pdf_size_bytes(self) -> int:
        return self.max_pdf_size_mb * 1024 * 1024
