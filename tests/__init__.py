"""Test package for the Agent Builder backend.

Unit tests cover isolated logic and integration tests cover workflows.

Structure:
    - unit/: Individual function and class tests
    - integration/: API endpoints and the full indexing pipeline

The embedding provider and the Agno agent are always faked, so no API
keys are needed. Leverages pytest with pytest-check for soft assertions.
"""
