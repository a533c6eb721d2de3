"""Tests for custom exceptions."""

from page_ingestion.utils.errors import (
    ChunkingConfigError,
    ChunkingError,
    EmbeddingError,
    IngestionException,
)


class TestCustomExceptions:
    """Test suite for custom exceptions."""

    def test_base_exception(self):
        error = IngestionException("Test error")
        assert str(error) == "Test error"
        assert error.status_code == 500
        assert error.code == "IngestionException"

    def test_chunking_config_error(self):
        error = ChunkingConfigError("overlap must be less than target_chunk_size", details={"overlap": 150})
        assert isinstance(error, ChunkingError)
        assert isinstance(error, IngestionException)
        assert error.code == "CHUNKING_CONFIG_INVALID"
        assert error.status_code == 422
        assert error.details == {"overlap": 150}

    def test_embedding_error_records_model(self):
        error = EmbeddingError("Embedding request failed", model="gemma-3", details={"batch": 4})
        assert error.status_code == 502
        assert error.details == {"batch": 4, "model": "gemma-3"}

    def test_to_dict(self):
        payload = ChunkingError("Text chunking failed").to_dict()
        assert payload == {
            "error": {
                "message": "Text chunking failed",
                "code": "CHUNKING_ERROR",
                "status_code": 500,
                "details": {},
            }
        }
