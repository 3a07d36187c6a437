"""FastAPI endpoints for the tutor backend.

Endpoints:
    - GET /health: Service health status
    - POST /chat: Complete answer for a question and/or image
    - POST /chat/stream: Same answer streamed as Server-Sent Events
"""

from tutor.api.app import app, create_app

__all__ = ["app", "create_app"]
