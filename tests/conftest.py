"""Pytest configuration and fixtures for page ingestion tests."""

from datetime import datetime, timezone

import pytest

from page_ingestion.models.chunk import ChunkingConfig
from page_ingestion.models.document import Document


@pytest.fixture
def make_document():
    """Factory for page snapshots with sensible defaults."""

    def _make(body: str = "", **overrides) -> Document:
        fields = {
            "id": "page-1",
            "space_key": "ENG",
            "title": "Runbook",
            "body": body,
            "version": 3,
            "updated_at": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
            "labels": ["ops", "oncall"],
            "url": "https://wiki.example.com/ENG/runbook",
        }
        fields.update(overrides)
        return Document(**fields)

    return _make


@pytest.fixture
def split_config() -> ChunkingConfig:
    """Config whose windows are 62 words advancing by 50."""
    return ChunkingConfig(target_chunk_size=250, overlap=50, max_chunk_size=400)


@pytest.fixture
def reset_settings():
    """Clear the settings singleton before and after a test."""
    import page_ingestion.config

    page_ingestion.config._settings = None
    yield
    page_ingestion.config._settings = None
