"""Tests for page and chunk models."""

from datetime import datetime, timezone

import pydantic
import pytest

from page_ingestion.models.chunk import Chunk, ChunkingConfig
from page_ingestion.models.document import Document


class TestDocument:
    """Page snapshots."""

    def test_accepts_camel_case_source_records(self):
        doc = Document(
            **{
                "id": "123",
                "spaceKey": "DOCS",
                "title": "Home",
                "body": "<p>hi</p>",
                "version": 7,
                "updatedAt": "2024-03-01T10:00:00Z",
                "labels": ["a"],
                "url": "https://wiki/x",
            }
        )

        assert doc.space_key == "DOCS"
        assert doc.updated_at == datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)

    def test_is_immutable(self, make_document):
        doc = make_document()
        with pytest.raises(pydantic.ValidationError):
            doc.title = "changed"

    def test_labels_behave_like_a_set(self, make_document):
        assert make_document(labels=["b", "a", "b"]).labels == ["b", "a"]

    def test_version_must_be_non_negative(self, make_document):
        with pytest.raises(pydantic.ValidationError):
            make_document(version=-1)

    def test_url_is_optional(self, make_document):
        assert make_document(url=None).url is None


class TestChunk:
    """Chunk records."""

    def _chunk(self, **overrides):
        fields = dict(
            page_id="p1",
            space="ENG",
            title="Runbook",
            text="hello",
            version=2,
            updated_at=datetime(2024, 1, 2, tzinfo=timezone.utc),
            labels=["x"],
        )
        fields.update(overrides)
        return Chunk(**fields)

    def test_ids_are_fresh(self):
        assert self._chunk().id != self._chunk().id

    def test_record_uses_camel_case_and_omits_absent_fields(self):
        record = self._chunk(section_anchor="setup", url="https://wiki/p1").to_record()

        assert record["pageId"] == "p1"
        assert record["sectionAnchor"] == "setup"
        assert record["updatedAt"].startswith("2024-01-02T00:00:00")
        assert record["labels"] == ["x"]
        assert "vector" not in record
        assert "indexedAt" not in record

    def test_record_without_anchor(self):
        assert "sectionAnchor" not in self._chunk().to_record()


def test_chunking_config_check_returns_self():
    config = ChunkingConfig(target_chunk_size=800, overlap=200, max_chunk_size=1200)
    assert config.check() is config
    assert config.step_words == 150
