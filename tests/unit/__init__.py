"""Unit tests for individual components in isolation.

Coverage:
    - rag/: chunking, embeddings, vector store, indexing and retrieval
    - knowledge/: knowledge and chat session stores
    - parsing/: file text extraction and web scraping
    - agent/: agent configuration, prompts and the chat service

Uses mocks for external services. Leverages pytest-check for multiple
assertions per test.
"""
