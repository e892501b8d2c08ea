class PdfAssemblerError(Exception):
    pass


class ValidationError(PdfAssemblerError):
    pass


class SizeLimitExceededError(ValidationError):
    pass


class TooManyDocumentsError(ValidationError):
    pass


class PageCountError(ValidationError):
    pass


class UnsupportedFileTypeError(ValidationError):
    pass


class ParsingError(PdfAssemblerError):
    pass


class UnknownDocumentError(PdfAssemblerError):
    pass


class InvalidProgressTransitionError(PdfAssemblerError):
    pass


class MergeError(PdfAssemblerError):
    pass


class NothingToMergeError(MergeError):
    pass


class MissingSourceError(MergeError):
    def __init__(self, page_id: str, source_document_id: str) -> None:
        super().__init__(
            f"Page {page_id} references missing source document {source_document_id}"
        )
        self.page_id = page_id
        self.source_document_id = source_document_id


class MergeBusyError(MergeError):
    pass


class MergeCancelledError(MergeError):
    pass
