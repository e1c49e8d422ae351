"""FastAPI endpoints for the agent builder.

Endpoints:
    - GET /health: Service health status
    - POST /knowledge: Upload files and pasted text
    - POST /knowledge/text: Add a standalone text source
    - GET /knowledge: List a session's knowledge
    - DELETE /knowledge/{session_id}/{item_id}: Remove an item and its vectors
    - POST /scrape: Scrape a web page into knowledge
    - POST /chat: Grounded chat reply
    - POST /chat/feedback: Thumbs up/down
"""

from agent_builder.api.app import app, create_app
from agent_builder.api.state import AppState

__all__ = ["AppState", "app", "create_app"]
