"""Unit tests for individual components in isolation.

Coverage:
    - session/: Reducer transitions and the submit state machine
    - parsing/: Base64 image encoding
    - agent/: Configuration and Agno agent wiring
    - ui/: Markdown rendering

Uses stubs and mocks for the generative backend.
"""
