"""Tests for application exceptions."""

from unittest.mock import MagicMock

from recipe_agent.exceptions import (
    ConfigurationError,
    DimensionMismatchError,
    EmbeddingError,
    ErrorCode,
    LLMError,
    RecipeAgentError,
    RetrievalError,
    ToolError,
    TranscriptError,
    ValidationError,
    VectorError,
    VectorStoreError,
    provider_error_code,
)


class TestErrorCode:
    """Tests for error codes."""

    def test_error_code_format(self) -> None:
        """Error codes follow CHEF-XXXX format."""
        for code in ErrorCode:
            assert code.value.startswith("CHEF-")
            assert len(code.value) == 9

    def test_error_code_uniqueness(self) -> None:
        """All error codes are unique."""
        codes = [code.value for code in ErrorCode]
        assert len(codes) == len(set(codes))


class TestRecipeAgentError:
    """Tests for base exception."""

    def test_basic_exception(self) -> None:
        """Base exception stores message and code."""
        error = RecipeAgentError("Something went wrong")
        assert error.message == "Something went wrong"
        assert error.code == ErrorCode.INTERNAL_ERROR
        assert error.details == {}
        assert str(error) == "Something went wrong"

    def test_to_dict(self) -> None:
        """Exception converts to API response dict."""
        error = RecipeAgentError(
            "Something went wrong",
            code=ErrorCode.INTERNAL_ERROR,
            details={"trace_id": "abc123"},
        )

        assert error.to_dict() == {
            "error": {
                "code": "CHEF-1000",
                "message": "Something went wrong",
                "details": {"trace_id": "abc123"},
            }
        }


class TestSubclasses:
    """Tests for default codes and hierarchy of subclasses."""

    def test_configuration_error(self) -> None:
        error = ConfigurationError("Missing env var")
        assert error.code == ErrorCode.CONFIGURATION_ERROR
        assert isinstance(error, RecipeAgentError)

    def test_validation_error(self) -> None:
        assert ValidationError("Invalid input").code == ErrorCode.VALIDATION_ERROR

    def test_transcript_error_is_validation_error(self) -> None:
        """Transcript problems are reported as client input errors."""
        error = TranscriptError("orphan tool message", details={"position": 3})
        assert isinstance(error, ValidationError)
        assert error.code == ErrorCode.TRANSCRIPT_INVALID
        assert error.details == {"position": 3}

    def test_embedding_error(self) -> None:
        error = EmbeddingError("quota", code=ErrorCode.EMBEDDING_QUOTA_EXCEEDED)
        assert error.code == ErrorCode.EMBEDDING_QUOTA_EXCEEDED
        assert EmbeddingError("down").code == ErrorCode.EMBEDDING_SERVICE_ERROR

    def test_dimension_mismatch_error(self) -> None:
        """Dimension mismatch carries both lengths."""
        error = DimensionMismatchError(3, 2)
        assert isinstance(error, VectorError)
        assert error.code == ErrorCode.VECTOR_DIMENSION_MISMATCH
        assert error.details == {"left": 3, "right": 2}
        assert "3 vs 2" in error.message

    def test_vector_store_error(self) -> None:
        assert VectorStoreError("down").code == ErrorCode.VECTOR_STORE_ERROR

    def test_llm_error(self) -> None:
        assert LLMError("Model unavailable").code == ErrorCode.LLM_SERVICE_ERROR
        error = LLMError("Request timed out", code=ErrorCode.LLM_TIMEOUT)
        assert error.code == ErrorCode.LLM_TIMEOUT

    def test_retrieval_error(self) -> None:
        assert RetrievalError("Search failed").code == ErrorCode.RETRIEVAL_ERROR

    def test_tool_error(self) -> None:
        assert ToolError("bad args").code == ErrorCode.TOOL_ARGUMENTS_INVALID


class TestProviderErrorCode:
    """Tests for extracting provider error codes from responses."""

    def test_reads_error_code(self) -> None:
        response = MagicMock()
        response.json.return_value = {"error": {"code": "insufficient_quota"}}
        assert provider_error_code(response) == "insufficient_quota"

    def test_falls_back_to_type(self) -> None:
        response = MagicMock()
        response.json.return_value = {"error": {"type": "server_error", "code": None}}
        assert provider_error_code(response) == "server_error"

    def test_non_json_body(self) -> None:
        response = MagicMock()
        response.json.side_effect = ValueError("not json")
        assert provider_error_code(response) is None

    def test_missing_error_object(self) -> None:
        response = MagicMock()
        response.json.return_value = ["unexpected"]
        assert provider_error_code(response) is None
