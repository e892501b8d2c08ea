from __future__ import annotations

from typing import Callable

import fitz
import pytest

from src.adapters.pymupdf_adapter import PyMuPdfAdapter
from src.infrastructure.config import AppConfig
from src.services.workspace_service import WorkspaceService


def build_pdf(label: str, page_count: int) -> bytes:
    document = fitz.open()
    try:
        for number in range(1, page_count + 1):
            page = document.new_page()
            page.insert_text((72, 72), f"{label} page {number}")
        return document.tobytes(deflate=True, garbage=3)
    finally:
        document.close()


def page_texts(pdf_bytes: bytes) -> list[str]:
    with fitz.open(stream=pdf_bytes, filetype="pdf") as document:
        return [page.get_text("text").strip() for page in document]


@pytest.fixture
def pdf_factory() -> Callable[[str, int], bytes]:
    return build_pdf


@pytest.fixture
def read_page_texts() -> Callable[[bytes], list[str]]:
    return page_texts


@pytest.fixture
def doc_x_bytes() -> bytes:
    return build_pdf("X", 3)


@pytest.fixture
def doc_y_bytes() -> bytes:
    return build_pdf("Y", 2)


@pytest.fixture
def adapter() -> PyMuPdfAdapter:
    return PyMuPdfAdapter()


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(
        max_pdf_size_mb=10,
        max_documents=5,
        max_pages_per_document=50,
        default_output_name="merged-document.pdf",
        compress_output=True,
        thumbnail_width=120,
        log_level="DEBUG",
    )


@pytest.fixture
def workspace(adapter: PyMuPdfAdapter, config: AppConfig) -> WorkspaceService:
    return WorkspaceService(adapter, config)
