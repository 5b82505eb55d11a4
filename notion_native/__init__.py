"""
Notion Native: migrates Notion pages into native JSON storage.

Pages are fetched block by block, flattened into plain text and annotated
HTML, split into section-aware chunks, embedded, and persisted next to the
original block tree in PostgreSQL with pgvector.
"""

__version__ = "0.1.0"
