"""Page ingestion: markup normalization, heading-aware chunking, and unit-length embeddings."""

__version__ = "0.1.0"
