"""Chunk models for page ingestion."""

from datetime import datetime
from typing import Any, Dict, List, NamedTuple, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from page_ingestion.utils.errors import ChunkingConfigError

# Characters per estimated token; also the token-to-word divisor for windowing.
CHARS_PER_TOKEN = 4


class ChunkingConfig(BaseModel):
    """Chunker tunables, all expressed in estimated tokens."""

    model_config = ConfigDict(frozen=True)

    target_chunk_size: int = Field(default=800, description="Target chunk size in tokens")
    overlap: int = Field(default=200, description="Overlap between consecutive split chunks in tokens")
    max_chunk_size: int = Field(default=1200, description="Upper bound on chunk size in tokens")

    @property
    def window_words(self) -> int:
        """Number of words per window when a section is split."""
        return self.target_chunk_size // CHARS_PER_TOKEN

    @property
    def overlap_words(self) -> int:
        """Number of words shared by consecutive windows."""
        return self.overlap // CHARS_PER_TOKEN

    @property
    def step_words(self) -> int:
        """Cursor advance between windows, in words."""
        return self.window_words - self.overlap_words

    def check(self) -> "ChunkingConfig":
        """
        Reject configurations the windower cannot run with.

        Raises:
            ChunkingConfigError: If sizes are non-positive, the overlap is not
                smaller than the target, or the resulting word step is not positive.
        """
        details = {
            "target_chunk_size": self.target_chunk_size,
            "overlap": self.overlap,
            "max_chunk_size": self.max_chunk_size,
        }
        if self.target_chunk_size <= 0:
            raise ChunkingConfigError("target_chunk_size must be > 0", details=details)
        if self.overlap < 0:
            raise ChunkingConfigError("overlap must be >= 0", details=details)
        if self.overlap >= self.target_chunk_size:
            raise ChunkingConfigError("overlap must be less than target_chunk_size", details=details)
        if self.max_chunk_size < self.target_chunk_size:
            raise ChunkingConfigError("max_chunk_size must be >= target_chunk_size", details=details)
        if self.step_words <= 0:
            raise ChunkingConfigError(
                "windowing step must be positive",
                details={**details, "window_words": self.window_words, "overlap_words": self.overlap_words},
            )
        return self


class Section(BaseModel):
    """A heading-delimited slice of a page's plain text."""

    text: str
    anchor: Optional[str] = None


class Chunk(BaseModel):
    """
    Unit of retrieval: a window of page text plus copied page metadata.

    Metadata is copied rather than referenced so a chunk stays valid after
    its source page changes. Serialised with camelCase keys for the index.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid4()), description="Freshly generated chunk id")
    page_id: str = Field(..., description="Owning page id")
    space: str = Field(..., description="Owning page space key")
    title: str = Field(..., description="Owning page title")
    section_anchor: Optional[str] = Field(default=None, description="Anchor of the source section")
    text: str = Field(..., description="Chunk text payload")
    version: int = Field(..., description="Page version the chunk was cut from")
    updated_at: datetime = Field(..., description="Page last-updated timestamp")
    labels: List[str] = Field(default_factory=list, description="Page labels")
    url: Optional[str] = Field(default=None, description="Page URL for citations")
    vector: Optional[List[float]] = Field(default=None, description="Unit-length embedding, once embedded")
    indexed_at: Optional[datetime] = Field(default=None, description="When the chunk was embedded for indexing")

    def to_record(self) -> Dict[str, Any]:
        """Return the JSON-ready camelCase record consumed by the indexer."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TextWindow(NamedTuple):
    """One windowed span of section text and the anchor it was cut from."""

    text: str
    anchor: Optional[str]
