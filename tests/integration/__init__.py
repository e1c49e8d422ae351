"""Integration tests for components working together as a system.

Coverage:
    - API endpoints with real HTTP requests over ASGITransport
    - Upload -> parse -> chunk -> embed -> index -> search workflow
    - Chat turns grounded on uploaded knowledge

Only the embedding provider and the language model are faked.
"""
