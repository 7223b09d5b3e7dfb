"""Page-level document ingestion and hybrid search retrieval."""
