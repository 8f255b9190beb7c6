"""
Renovation Estimator - Ingestion Errors

Every ingestion failure is recoverable: the caller's project is left as it was.
"""


class IngestionError(Exception):
    """Base class for ingestion failures."""
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedFileError(IngestionError):
    """The uploaded file kind cannot be ingested."""


class EmptyDocumentError(IngestionError):
    """Extraction produced no text."""


class AnalysisServiceError(IngestionError):
    """The AI service failed or returned nothing usable."""
    retryable = True


class IngestionInProgressError(IngestionError):
    """Another ingestion is still running."""
    retryable = True
