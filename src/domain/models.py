from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Union


@dataclass(frozen=True)
class SourceDocument:
    document_id: str
    name: str
    size_bytes: int
    page_count: int
    content: bytes = field(repr=False)


@dataclass(frozen=True)
class Page:
    page_id: str
    source_document_id: str
    source_page_number: int

    @property
    def source_page_index(self) -> int:
        return self.source_page_number - 1


@dataclass(frozen=True)
class CollectionSnapshot:
    pages: tuple[Page, ...]
    documents: Mapping[str, SourceDocument]

    @classmethod
    def capture(
        cls, pages: list[Page] | tuple[Page, ...], documents: Mapping[str, SourceDocument]
    ) -> CollectionSnapshot:
        return cls(pages=tuple(pages), documents=MappingProxyType(dict(documents)))

    @property
    def is_empty(self) -> bool:
        return not self.pages


class ProgressStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class Idle:
    status: ProgressStatus = field(default=ProgressStatus.IDLE, init=False)
    message: str = field(default="", init=False)
    percent: int = field(default=0, init=False)


@dataclass(frozen=True)
class Loading:
    message: str
    percent: int
    status: ProgressStatus = field(default=ProgressStatus.LOADING, init=False)


@dataclass(frozen=True)
class Processing:
    message: str
    percent: int
    status: ProgressStatus = field(default=ProgressStatus.PROCESSING, init=False)


@dataclass(frozen=True)
class Complete:
    message: str
    status: ProgressStatus = field(default=ProgressStatus.COMPLETE, init=False)
    percent: int = field(default=100, init=False)


@dataclass(frozen=True)
class Error:
    message: str
    status: ProgressStatus = field(default=ProgressStatus.ERROR, init=False)
    percent: int = field(default=0, init=False)


MergeProgress = Union[Idle, Loading, Processing, Complete, Error]


@dataclass(frozen=True)
class MergeResult:
    output_name: str
    output_pdf: bytes
    merged_pages: int
    source_documents: int


@dataclass(frozen=True)
class UploadRejection:
    name: str
    reason: str


@dataclass(frozen=True)
class UploadBatchResult:
    accepted: list[SourceDocument] = field(default_factory=list)
    rejected: list[UploadRejection] = field(default_factory=list)

    @property
    def accepted_count(self) -> int:
        return len(self.accepted)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)
