"""Embedding client for OpenAI-compatible backends, with unit-length normalization."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from openai import APIError, AsyncOpenAI

from page_ingestion.config import EmbeddingSettings, get_settings
from page_ingestion.utils.errors import EmbeddingError
from page_ingestion.utils.logging import get_logger

logger = get_logger("embedding_service")
settings = get_settings()


def normalize_vector(vector: Sequence[float]) -> List[float]:
    """
    Rescale a vector to unit Euclidean length.

    A zero or non-finite norm returns the raw values unchanged so that no
    NaNs or invented directions are produced.
    """
    norm = math.hypot(*vector)
    if norm == 0 or not math.isfinite(norm):
        return list(vector)
    return [value / norm for value in vector]


@dataclass(frozen=True)
class EmbedOptions:
    """Per-call overrides for the embedding backend."""

    base_url: Optional[str] = None
    model: Optional[str] = None
    timeout_ms: Optional[int] = None


class EmbeddingClient:
    """
    Embed batches of texts and return unit-length vectors.

    One backend request per batch; the batch either succeeds as a whole or
    raises a single ``EmbeddingError``. Retries belong to the caller.
    """

    def __init__(self, embedding_settings: Optional[EmbeddingSettings] = None):
        self._settings = embedding_settings or settings.embedding
        self.model = self._settings.llm_embed_model
        self.dimensions = self._settings.embed_dimensions
        self._client: Optional[AsyncOpenAI] = None  # lazy

    def _get_client(self, options: Optional[EmbedOptions] = None) -> AsyncOpenAI:
        """Return the backend client, adjusted for per-call overrides."""
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._settings.llm_api_key or "not-needed",
                base_url=_api_base(self._settings.llm_base_url),
                timeout=self._settings.timeout,
                max_retries=0,
            )
        if options is None or (options.base_url is None and options.timeout_ms is None):
            return self._client

        overrides = {}
        if options.base_url is not None:
            overrides["base_url"] = _api_base(options.base_url)
        if options.timeout_ms is not None:
            overrides["timeout"] = options.timeout_ms / 1000.0
        return self._client.with_options(**overrides)

    async def embed(
        self,
        batch: Sequence[str],
        options: Optional[EmbedOptions] = None,
    ) -> List[List[float]]:
        """
        Embed a batch of texts.

        Args:
            batch: Texts to embed, in order
            options: Optional base URL / model / timeout overrides

        Returns:
            One unit-length vector per input text, in input order

        Raises:
            EmbeddingError: On transport failure, timeout, non-success status,
                or a malformed / mismatched response
        """
        if not batch:
            return []

        model = (options.model if options and options.model else None) or self.model
        raw = await self._request(list(batch), model, options)
        return [normalize_vector(vector) for vector in raw]

    async def embed_query(self, text: str, options: Optional[EmbedOptions] = None) -> List[float]:
        """Embed a single query string."""
        vectors = await self.embed([text], options)
        return vectors[0]

    async def _request(
        self,
        inputs: List[str],
        model: str,
        options: Optional[EmbedOptions],
    ) -> List[List[float]]:
        """Send one batch to the backend and validate the payload."""
        client = self._get_client(options)
        try:
            resp = await client.embeddings.create(model=model, input=inputs, encoding_format="float")
        except APIError as e:
            logger.error(f"Embedding request failed: model={model}, batch={len(inputs)} - {e}")
            raise EmbeddingError(f"Embedding request failed: {e}", model=model) from e

        data = getattr(resp, "data", None)
        if not isinstance(data, list):
            raise EmbeddingError("Malformed embedding response: missing data", model=model)

        vectors: List[List[float]] = []
        for index, item in enumerate(data):
            embedding = getattr(item, "embedding", None)
            if not isinstance(embedding, list):
                raise EmbeddingError(
                    "Malformed embedding response: embedding is not a list",
                    model=model,
                    details={"index": index},
                )
            if any(isinstance(value, bool) or not isinstance(value, (int, float)) for value in embedding):
                raise EmbeddingError(
                    "Malformed embedding response: non-numeric component",
                    model=model,
                    details={"index": index},
                )
            vectors.append(embedding)

        if len(vectors) != len(inputs):
            raise EmbeddingError(
                "Embedding response size mismatch",
                model=model,
                details={"expected": len(inputs), "got": len(vectors)},
            )

        if self._settings.embed_validate_dimensions:
            for index, vector in enumerate(vectors):
                if len(vector) != self.dimensions:
                    raise EmbeddingError(
                        "Embedding dimension mismatch",
                        model=model,
                        details={
                            "index": index,
                            "expected_dimension": self.dimensions,
                            "actual_dimension": len(vector),
                        },
                    )

        logger.debug(f"Embedded batch: model={model}, count={len(vectors)}")
        return vectors


def _api_base(base_url: str) -> str:
    """Append the OpenAI-compatible ``/v1`` prefix to a backend base URL."""
    return f"{base_url.rstrip('/')}/v1"
