"""Custom exceptions for document checker."""

from datetime import datetime, timezone
from typing import Any, Optional


class DocumentCheckerError(Exception):
    """Base exception for document checker errors."""

    category = "internal"

    def to_payload(self) -> dict[str, Any]:
        """Build the logical error body returned to callers."""
        return {
            "error": self.category,
            "message": self.summary(),
            "details": str(self),
            "errors": [],
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    def summary(self) -> str:
        return "An unexpected error occurred"


class ValidationFailedError(DocumentCheckerError):
    """Raised when a check request is structurally invalid.

    Carries every violation found, not only the first one.
    """

    category = "validation"

    def __init__(self, violations: list[str]):
        self.violations = list(violations)
        super().__init__(", ".join(self.violations))

    def summary(self) -> str:
        return "Validation failed"

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["errors"] = list(self.violations)
        return payload


class ExtractionError(DocumentCheckerError):
    """Raised when text extraction fails."""

    category = "processing"

    def summary(self) -> str:
        return "PDF processing failed"


class TooManyPagesError(ExtractionError):
    """Raised when the document exceeds the configured page ceiling."""

    def __init__(self, page_count: int, max_pages: int):
        self.page_count = page_count
        self.max_pages = max_pages
        super().__init__(
            f"PDF has too many pages: {page_count} (max: {max_pages})"
        )


class ProviderError(DocumentCheckerError):
    """Raised when the LLM provider answers with an error or an unusable body."""

    category = "provider"

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)

    def summary(self) -> str:
        return "LLM service failed"


class ProviderUnreachableError(ProviderError):
    """Raised when the LLM provider cannot be reached (network, timeout)."""


class ResponseMalformedError(DocumentCheckerError):
    """Raised when the provider's text is not a well-formed verdict."""

    category = "provider"

    def __init__(self, message: str, raw_text: Optional[str] = None):
        self.raw_text = raw_text
        super().__init__(message)

    def summary(self) -> str:
        return "LLM response could not be parsed"


class InternalCheckError(DocumentCheckerError):
    """Raised for uncategorized failures that abort the whole check."""
