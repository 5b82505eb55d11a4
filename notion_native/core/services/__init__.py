"""External service adapters: Notion API and embeddings."""
