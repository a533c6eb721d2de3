"""Models describing the indexing state of pages."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from page_ingestion.models.chunk import Chunk


class IngestionStatus(str, Enum):
    """Outcome of indexing one page."""

    INDEXED = "indexed"
    UNCHANGED = "unchanged"
    EMPTY = "empty"
    FAILED = "failed"


class IngestionState(BaseModel):
    """What was last indexed for a page; used to skip unchanged pages."""

    page_id: str = Field(..., description="Page id")
    space: str = Field(..., description="Page space key")
    title: str = Field(..., description="Page title")
    version: int = Field(..., description="Indexed page version")
    updated_at: datetime = Field(..., description="Page last-updated timestamp at indexing time")
    content_hash: str = Field(..., description="sha256 of the normalized page body")
    last_indexed_at: datetime = Field(..., description="When the page was last indexed")
    url: Optional[str] = Field(default=None, description="Page URL")


class IndexedDocument(BaseModel):
    """Result of indexing one page."""

    page_id: str
    status: IngestionStatus
    chunks: List[Chunk] = Field(default_factory=list)
    state: Optional[IngestionState] = Field(
        default=None, description="New state after indexing, or the previous one when nothing changed"
    )
    error_message: Optional[str] = None
    error: Optional[Dict[str, Any]] = Field(
        default=None, description="Error payload (message, code, status_code, details) when indexing failed"
    )
