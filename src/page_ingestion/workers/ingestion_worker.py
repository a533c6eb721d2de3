"""Ingestion worker: chunk pages, embed chunks in batches, and track page state."""

import asyncio
import hashlib
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Sequence

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from page_ingestion.config import EmbeddingSettings, IngestionSettings, get_settings
from page_ingestion.models.chunk import Chunk
from page_ingestion.models.document import Document
from page_ingestion.models.ingestion import IndexedDocument, IngestionState, IngestionStatus
from page_ingestion.services.chunking_service import ChunkingService
from page_ingestion.services.embedding_service import EmbeddingClient
from page_ingestion.services.markup_normalizer import normalize
from page_ingestion.utils.errors import EmbeddingError, IngestionException
from page_ingestion.utils.logging import get_logger, log_error, set_document_id, setup_logging

logger = get_logger("ingestion_worker")
settings = get_settings()


def content_hash(document: Document) -> str:
    """sha256 hex digest of the page's normalized body."""
    return hashlib.sha256(normalize(document.body).encode("utf-8")).hexdigest()


def needs_reindex(
    document: Document,
    state: Optional[IngestionState],
    digest: Optional[str] = None,
) -> bool:
    """A page is up to date only when both its version and content hash match."""
    if state is None:
        return True
    digest = digest or content_hash(document)
    return not (state.version == document.version and state.content_hash == digest)


class IngestionWorker:
    """
    Index pages: chunk, embed, and attach vectors.

    Processing pipeline per page:
    1. Skip the page when version and content hash are unchanged
    2. Chunk the markup body
    3. Embed chunk texts in batches (each batch retried as a whole)
    4. Attach vectors and return the chunks with the new page state
    """

    def __init__(
        self,
        chunking_service: Optional[ChunkingService] = None,
        embedding_client: Optional[EmbeddingClient] = None,
        embedding_settings: Optional[EmbeddingSettings] = None,
        ingestion_settings: Optional[IngestionSettings] = None,
    ):
        """Initialize ingestion worker."""
        setup_logging()
        self.chunking_service = chunking_service or ChunkingService()
        self.embedding_client = embedding_client or EmbeddingClient()
        self._embedding_settings = embedding_settings or settings.embedding
        self._ingestion_settings = ingestion_settings or settings.ingestion

    async def index_document(
        self,
        document: Document,
        state: Optional[IngestionState] = None,
    ) -> IndexedDocument:
        """
        Index a single page.

        Args:
            document: Page snapshot to index
            state: State recorded the last time this page was indexed

        Returns:
            IndexedDocument with embedded chunks and the new page state

        Raises:
            ChunkingError: If chunking fails
            EmbeddingError: If a batch still fails after all retries
        """
        set_document_id(document.id)
        digest = content_hash(document)

        if not needs_reindex(document, state, digest):
            logger.info(f"Page unchanged, skipping: page_id={document.id}, version={document.version}")
            return IndexedDocument(page_id=document.id, status=IngestionStatus.UNCHANGED, state=state)

        chunks = self.chunking_service.chunk_document(document)
        if not chunks:
            logger.info(f"Page produced no chunks: page_id={document.id}")
            return IndexedDocument(page_id=document.id, status=IngestionStatus.EMPTY, state=state)

        vectors = await self.embed_chunks(chunks)
        indexed_at = datetime.now(timezone.utc)
        for chunk, vector in zip(chunks, vectors):
            chunk.vector = vector
            chunk.indexed_at = indexed_at

        new_state = IngestionState(
            page_id=document.id,
            space=document.space_key,
            title=document.title,
            version=document.version,
            updated_at=document.updated_at,
            content_hash=digest,
            last_indexed_at=indexed_at,
            url=document.url,
        )
        logger.info(
            f"Page indexed: page_id={document.id}, version={document.version}, "
            f"chunks={len(chunks)}, dim={len(vectors[0]) if vectors else 0}"
        )
        return IndexedDocument(
            page_id=document.id,
            status=IngestionStatus.INDEXED,
            chunks=chunks,
            state=new_state,
        )

    async def index_documents(
        self,
        documents: Sequence[Document],
        states: Optional[Mapping[str, IngestionState]] = None,
    ) -> List[IndexedDocument]:
        """
        Index many pages with bounded concurrency.

        A failing page is logged and reported with ``IngestionStatus.FAILED``;
        the remaining pages are still indexed. Results keep input order.
        """
        states = states or {}
        semaphore = asyncio.Semaphore(self._ingestion_settings.concurrency)

        async def run(document: Document) -> IndexedDocument:
            async with semaphore:
                try:
                    return await self.index_document(document, states.get(document.id))
                except Exception as e:
                    log_error(e, context={"page_id": document.id})
                    error = e if isinstance(e, IngestionException) else IngestionException(
                        str(e), code=type(e).__name__
                    )
                    return IndexedDocument(
                        page_id=document.id,
                        status=IngestionStatus.FAILED,
                        state=states.get(document.id),
                        error_message=error.message,
                        error=error.to_dict()["error"],
                    )

        results = await asyncio.gather(*(run(document) for document in documents))
        counts: Dict[str, int] = {}
        for result in results:
            counts[result.status.value] = counts.get(result.status.value, 0) + 1
        logger.info(f"Indexed {len(documents)} pages: {counts}")
        return list(results)

    async def embed_chunks(self, chunks: Sequence[Chunk]) -> List[List[float]]:
        """Embed chunk texts in configured batches, pausing between batches."""
        texts = [chunk.text for chunk in chunks]
        batch_size = self._embedding_settings.embed_batch_size
        delay = self._embedding_settings.embed_delay_ms / 1000.0

        vectors: List[List[float]] = []
        for start in range(0, len(texts), batch_size):
            vectors.extend(await self._embed_batch_with_retry(texts[start : start + batch_size]))
            if delay > 0 and start + batch_size < len(texts):
                await asyncio.sleep(delay)
        return vectors

    async def _embed_batch_with_retry(self, inputs: List[str]) -> List[List[float]]:
        """Embed one batch, retrying the whole batch on backend failure."""
        async for attempt in AsyncRetrying(
            reraise=True,
            stop=stop_after_attempt(self._ingestion_settings.max_retries),
            wait=wait_exponential(
                multiplier=self._ingestion_settings.retry_backoff_factor,
                max=self._ingestion_settings.retry_max_delay,
            ),
            retry=retry_if_exception_type(EmbeddingError),
        ):
            with attempt:
                return await self.embedding_client.embed(inputs)
        # unreachable with reraise=True
        raise EmbeddingError("Embedding retries exhausted", model=self.embedding_client.model)
