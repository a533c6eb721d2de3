"""Custom exception classes for the page ingestion service."""

from typing import Any, Dict, Optional


class IngestionException(Exception):
    """Base exception for all page ingestion errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {
            "error": {
                "message": self.message,
                "code": self.code,
                "status_code": self.status_code,
                "details": self.details,
            }
        }


class ChunkingError(IngestionException):
    """Exception raised for text chunking errors."""

    def __init__(
        self,
        message: str = "Text chunking failed",
        details: Optional[Dict[str, Any]] = None,
        code: str = "CHUNKING_ERROR",
    ):
        super().__init__(
            message=message,
            status_code=500,
            code=code,
            details=details,
        )


class ChunkingConfigError(ChunkingError):
    """Exception raised when a chunking configuration cannot be windowed."""

    def __init__(
        self,
        message: str = "Invalid chunking configuration",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, details=details, code="CHUNKING_CONFIG_INVALID")
        self.status_code = 422


class EmbeddingError(IngestionException):
    """Exception raised for embedding generation errors."""

    def __init__(
        self,
        message: str = "Embedding generation failed",
        model: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        error_details = details or {}
        if model:
            error_details["model"] = model
        super().__init__(
            message=message,
            status_code=502,
            code="EMBEDDING_ERROR",
            details=error_details,
        )

