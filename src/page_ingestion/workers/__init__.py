"""Workers that drive page indexing."""
