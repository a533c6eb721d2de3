"""Tests for token estimators."""

from unittest.mock import MagicMock, patch

import pytest

from page_ingestion.config import ChunkingSettings
from page_ingestion.services.chunking_service import build_estimator
from page_ingestion.services.token_estimator import CharRatioEstimator, TiktokenEstimator, estimate_tokens


@pytest.mark.parametrize("text, expected", [("", 0), ("a", 1), ("abcd", 1), ("abcde", 2), ("x" * 4000, 1000)])
def test_char_ratio_is_ceil_of_quarter_length(text, expected):
    assert estimate_tokens(text) == expected


def test_char_ratio_custom_density():
    assert CharRatioEstimator(chars_per_token=3)("abcdefg") == 3


def test_tiktoken_estimator_counts_encoded_tokens():
    encoding = MagicMock()
    encoding.encode.return_value = [101, 102, 103]

    with patch("tiktoken.get_encoding", return_value=encoding) as get_encoding:
        estimator = TiktokenEstimator("cl100k_base")
        assert estimator("three token text") == 3

    get_encoding.assert_called_once_with("cl100k_base")


def test_build_estimator_selects_tiktoken():
    with patch("tiktoken.get_encoding", return_value=MagicMock()) as get_encoding:
        estimator = build_estimator(ChunkingSettings(token_estimator="tiktoken", tiktoken_encoding="o200k_base"))

    assert isinstance(estimator, TiktokenEstimator)
    get_encoding.assert_called_once_with("o200k_base")
