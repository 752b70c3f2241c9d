"""Custom exception classes."""

from fastapi import HTTPException, status


class CognoteException(Exception):
    """Base exception for Cognote application."""

    pass


class InvalidInputError(CognoteException):
    """Raised when a request is missing required input."""

    def __init__(self, detail: str = "Invalid input"):
        self.detail = detail
        super().__init__(detail)

    def to_http_exception(self) -> HTTPException:
        """Convert to FastAPI HTTPException."""
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=self.detail,
        )


class NotFoundError(CognoteException):
    """Raised when a resource is not found."""

    def __init__(self, resource: str = "Resource", detail: str | None = None):
        self.detail = detail or f"{resource} not found"
        super().__init__(self.detail)

    def to_http_exception(self) -> HTTPException:
        """Convert to FastAPI HTTPException."""
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=self.detail,
        )


class ServiceError(CognoteException):
    """Raised when external service calls fail."""

    def __init__(self, detail: str = "External service error"):
        self.detail = detail
        super().__init__(detail)

    def to_http_exception(self) -> HTTPException:
        """Convert to FastAPI HTTPException."""
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=self.detail,
        )


class EmbeddingError(ServiceError):
    """Raised when the embedding model cannot be loaded or run."""

    def __init__(self, detail: str = "Embedding model unavailable"):
        super().__init__(detail)


class VectorSearchError(CognoteException):
    """Raised when the vector index cannot answer a similarity query."""

    pass


class CompletionError(CognoteException):
    """Raised when the completion provider fails."""

    pass


class RateLimitError(CompletionError):
    """Raised when the completion provider throttles the request."""

    pass


class CompletionTimeoutError(CompletionError):
    """Raised when the completion provider does not answer in time."""

    pass
