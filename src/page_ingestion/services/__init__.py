"""Services for turning pages into embedded chunks."""
