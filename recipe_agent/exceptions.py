"""Application exception hierarchy.

All custom exceptions inherit from RecipeAgentError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "CHEF-1000"
    CONFIGURATION_ERROR = "CHEF-1001"
    VALIDATION_ERROR = "CHEF-1002"
    TRANSCRIPT_INVALID = "CHEF-1003"

    # Embedding errors (2xxx)
    EMBEDDING_SERVICE_ERROR = "CHEF-2000"
    EMBEDDING_QUOTA_EXCEEDED = "CHEF-2001"
    EMBEDDING_TIMEOUT = "CHEF-2002"

    # Vector errors (3xxx)
    VECTOR_DIMENSION_MISMATCH = "CHEF-3000"
    VECTOR_STORE_ERROR = "CHEF-3001"

    # LLM errors (4xxx)
    LLM_SERVICE_ERROR = "CHEF-4000"
    LLM_TIMEOUT = "CHEF-4001"
    LLM_RATE_LIMIT = "CHEF-4002"
    LLM_QUOTA_EXCEEDED = "CHEF-4003"

    # Retrieval errors (5xxx)
    RETRIEVAL_ERROR = "CHEF-5000"

    # Tool errors (6xxx)
    TOOL_ARGUMENTS_INVALID = "CHEF-6000"
    UNKNOWN_TOOL = "CHEF-6001"


class RecipeAgentError(Exception):
    """Base exception for all recipe agent errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(RecipeAgentError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class ValidationError(RecipeAgentError):
    """Input validation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class TranscriptError(ValidationError):
    """Conversation transcript violates the tool-call correlation rule."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.TRANSCRIPT_INVALID, details)


class EmbeddingError(RecipeAgentError):
    """Embedding service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.EMBEDDING_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class VectorError(RecipeAgentError):
    """Vector comparison or storage error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VECTOR_STORE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class DimensionMismatchError(VectorError):
    """Two vectors of different length were compared."""

    def __init__(self, left: int, right: int) -> None:
        super().__init__(
            f"Vector dimension mismatch: {left} vs {right}",
            ErrorCode.VECTOR_DIMENSION_MISMATCH,
            {"left": left, "right": right},
        )


class VectorStoreError(VectorError):
    """Recipe store operation error."""


class LLMError(RecipeAgentError):
    """LLM service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.LLM_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class RetrievalError(RecipeAgentError):
    """Retrieval operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RETRIEVAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class ToolError(RecipeAgentError):
    """Tool call could not be executed as issued by the model."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TOOL_ARGUMENTS_INVALID,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


def provider_error_code(response: Any) -> str | None:
    """Extract the OpenAI-style ``error.code`` from a failed HTTP response.

    Returns None when the body is not JSON or carries no code.
    """
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict):
        code = error.get("code") or error.get("type")
        return str(code) if code else None
    return None
