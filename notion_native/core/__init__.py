"""Core extraction, chunking and migration logic."""
