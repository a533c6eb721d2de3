"""Token estimators used for every chunk-size decision."""

import math
from typing import Protocol

from page_ingestion.models.chunk import CHARS_PER_TOKEN


class TokenEstimator(Protocol):
    """Maps text to an (approximate) token count."""

    def __call__(self, text: str) -> int: ...


class CharRatioEstimator:
    """Approximate English token density: one token per four characters."""

    def __init__(self, chars_per_token: int = CHARS_PER_TOKEN):
        self.chars_per_token = chars_per_token

    def __call__(self, text: str) -> int:
        return math.ceil(len(text) / self.chars_per_token)


class TiktokenEstimator:
    """
    Exact token counts from a tiktoken encoding.

    Only changes how sizes are measured; the windower still cuts in word units.
    """

    def __init__(self, encoding_name: str = "cl100k_base"):
        import tiktoken

        self._encoding = tiktoken.get_encoding(encoding_name)

    def __call__(self, text: str) -> int:
        return len(self._encoding.encode(text))


estimate_tokens = CharRatioEstimator()
