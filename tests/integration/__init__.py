"""Integration tests for components working together.

Coverage:
    - API endpoints through httpx ASGITransport
    - ApiGateway consuming the real SSE stream
    - SessionStore submitting through HTTP
"""
