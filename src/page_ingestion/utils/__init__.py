"""Utility helpers (errors, logging)."""
