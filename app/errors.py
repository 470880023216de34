"""Errors raised while ingesting a webhook request."""


class IngestError(Exception):
    """Base class for request-fatal ingestion errors."""

    status_code: int = 400
    message: str = "ingestion failed"

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(f"{self.message}: {detail}" if detail else self.message)


class DatasourceNotFoundError(IngestError):
    status_code = 404
    message = "datasource not found"


class WrongDatasourceTypeError(IngestError):
    message = "wrong datasource type"


class BadPayloadError(IngestError):
    message = "bad payload"


class MissingFieldError(IngestError):
    message = "missing required field"
