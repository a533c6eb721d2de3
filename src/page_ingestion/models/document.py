"""Document models for source pages."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Document(BaseModel):
    """
    Immutable snapshot of a wiki page handed to the chunker.

    Accepts both snake_case and camelCase keys (``spaceKey``, ``updatedAt``)
    so records from the page source can be passed through unchanged.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Opaque page identifier")
    space_key: str = Field(..., description="Space / collection key")
    title: str = Field(..., description="Page title")
    body: str = Field(default="", description="Raw markup body")
    version: int = Field(..., ge=0, description="Monotonic page version")
    updated_at: datetime = Field(..., description="Last-updated timestamp")
    labels: List[str] = Field(default_factory=list, description="Page labels (set semantics)")
    url: Optional[str] = Field(default=None, description="Canonical page URL")

    @field_validator("labels")
    @classmethod
    def dedupe_labels(cls, v: List[str]) -> List[str]:
        """Drop duplicate labels, keeping first-seen order."""
        return list(dict.fromkeys(v))
