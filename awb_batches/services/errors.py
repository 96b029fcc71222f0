from __future__ import annotations

"""Error kinds surfaced by an extraction run.

Every kind is recovered at the pipeline boundary (services.pipeline.run_pipeline) and turned
into a FAILED ExtractionResult; none of them escapes to the host process.
"""

__all__ = [
    "ExtractionError",
    "UnsupportedFileTypeError",
    "MissingColumnError",
    "ProcessingFailure",
    "SessionBusyError",
]


class ExtractionError(Exception):
    """Base class. error_type is the UPPER_SNAKE label used in logs and error records."""
    error_type = "EXTRACTION_ERROR"


class UnsupportedFileTypeError(ExtractionError):
    """Raised before processing when the file extension is not accepted."""
    error_type = "UNSUPPORTED_FILE_TYPE"


class MissingColumnError(ExtractionError):
    """Raised when the Identifier and/or GroupKey column cannot be located in the header."""
    error_type = "MISSING_COLUMN"

    def __init__(self, roles: list[str], message: str) -> None:
        super().__init__(message)
        self.roles = roles


class ProcessingFailure(ExtractionError):
    """Any unexpected failure while reading or parsing the sheet."""
    error_type = "PROCESSING_FAILURE"


class SessionBusyError(ExtractionError):
    error_type = "SESSION_BUSY"
