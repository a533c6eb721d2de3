"""Data models for page ingestion."""

from page_ingestion.models.chunk import Chunk, ChunkingConfig, Section, TextWindow
from page_ingestion.models.document import Document
from page_ingestion.models.ingestion import IndexedDocument, IngestionState, IngestionStatus

__all__ = [
    "Chunk",
    "ChunkingConfig",
    "Document",
    "IndexedDocument",
    "IngestionState",
    "IngestionStatus",
    "Section",
    "TextWindow",
]
