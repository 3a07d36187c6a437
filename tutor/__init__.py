"""Subject Tutor - homework help chat for school subjects.

Combines NiceGUI for the chat page, FastAPI for HTTP streaming, Agno for
model orchestration, and Pydantic for state and data validation.

Components:
    - session: Chat session state machine and gateway contract
    - agent: Subject tutor agents backed by Gemini or OpenAI
    - api: HTTP endpoints and streaming responses
    - parsing: Image encoding for multimodal requests
    - ui: Web interface for chat interactions
    - models: Shared schemas
"""

__version__ = "0.1.0"
