"""Pluggable collaborators: cache storage, docstore, vector stores, embeddings."""
