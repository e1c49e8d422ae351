"""Agent Builder - chatbot personas grounded in user-supplied knowledge.

Combines FastAPI for HTTP endpoints, Agno for reply generation, OpenAI
embeddings with an in-memory vector index for retrieval, and Pydantic for
data validation.

Components:
    - api: HTTP endpoints and application state
    - agent: persona prompts and grounded reply generation
    - rag: chunking, embeddings, vector search and context assembly
    - knowledge: session-scoped knowledge items and chat state
    - parsing: file parsing and web scraping
    - models: Request/response schemas
"""

__version__ = "0.1.0"
