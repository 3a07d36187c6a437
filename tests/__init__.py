"""Test package for Subject Tutor.

Structure:
    - unit/: Session reducer and store, image encoding, agent service, markdown
    - integration/: FastAPI endpoints and the HTTP gateway end to end

No test needs a model API key: the Agno service is stubbed at the
FastAPI dependency or mocked at the class level.
Leverages pytest with pytest-check for soft assertions.
"""
