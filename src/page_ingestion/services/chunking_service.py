"""Heading-aware, token-budgeted chunking of pages for RAG ingestion."""

from typing import Iterable, List, Optional

from page_ingestion.config import ChunkingSettings, TokenEstimatorKind, get_settings
from page_ingestion.models.chunk import Chunk, ChunkingConfig, Section, TextWindow
from page_ingestion.models.document import Document
from page_ingestion.services import markup_normalizer, section_segmenter
from page_ingestion.services.token_estimator import (
    CharRatioEstimator,
    TiktokenEstimator,
    TokenEstimator,
)
from page_ingestion.utils.logging import get_logger

logger = get_logger("chunking_service")
settings = get_settings()


def build_estimator(chunking: ChunkingSettings) -> TokenEstimator:
    """Create the token estimator selected in settings."""
    if chunking.token_estimator == TokenEstimatorKind.TIKTOKEN:
        return TiktokenEstimator(chunking.tiktoken_encoding)
    return CharRatioEstimator()


class ChunkingService:
    """
    Turn a page into ordered, overlapping chunks.

    Pipeline: markup normalization -> section segmentation -> windowing ->
    assembly. Stateless apart from its configuration, so one instance can
    chunk many pages concurrently.
    """

    def __init__(
        self,
        config: Optional[ChunkingConfig] = None,
        estimator: Optional[TokenEstimator] = None,
    ):
        """
        Initialize the chunking service.

        Args:
            config: Chunk sizes in tokens (defaults to settings.chunking)
            estimator: Token estimator used for every size decision

        Raises:
            ChunkingConfigError: If the configuration cannot be windowed
        """
        self.config = (config or settings.chunking.to_config()).check()
        self.estimator = estimator or build_estimator(settings.chunking)

    def chunk_document(self, document: Document) -> List[Chunk]:
        """
        Chunk a page's markup body into chunk records.

        Args:
            document: Page snapshot; never mutated

        Returns:
            Chunks ordered by section, then by position within the section
        """
        text = markup_normalizer.normalize(document.body)
        sections = section_segmenter.segment(text)
        windows = [window for section in sections for window in self.window(section)]
        chunks = self.assemble(document, windows)

        logger.info(
            f"Chunked page: page_id={document.id}, sections={len(sections)}, chunks={len(chunks)}",
            extra={
                "target_chunk_size": self.config.target_chunk_size,
                "overlap": self.config.overlap,
            },
        )
        return chunks

    def window(self, section: Section) -> List[TextWindow]:
        """
        Cut a section into word windows sized by the token budget.

        A section within ``target_chunk_size`` is returned whole. Larger
        sections are cut into windows of ``target // 4`` words advancing by
        ``target // 4 - overlap // 4`` words. Windowing stops after the window
        that reaches the last word, so the final window may be shorter than
        the others. A section without words yields no windows.
        """
        words = section.text.split()
        if not words:
            return []

        if self.estimator(section.text) <= self.config.target_chunk_size:
            return [TextWindow(section.text, section.anchor)]

        width = self.config.window_words
        step = self.config.step_words
        windows: List[TextWindow] = []
        start = 0
        while start < len(words):
            window_words = words[start : start + width]
            if not window_words:
                break

            text = " ".join(window_words)
            tokens = self.estimator(text)
            if tokens > self.config.max_chunk_size:
                logger.warning(
                    f"Chunk exceeds max_chunk_size: tokens={tokens}, max={self.config.max_chunk_size}, "
                    f"words={len(window_words)}"
                )
            windows.append(TextWindow(text, section.anchor))

            if start + width >= len(words):
                break
            start += step

        return windows

    def assemble(self, document: Document, windows: Iterable[TextWindow]) -> List[Chunk]:
        """Attach copied page metadata and a fresh id to every window."""
        return [
            Chunk(
                page_id=document.id,
                space=document.space_key,
                title=document.title,
                section_anchor=window.anchor,
                text=window.text,
                version=document.version,
                updated_at=document.updated_at,
                labels=list(document.labels),
                url=document.url,
            )
            for window in windows
        ]
