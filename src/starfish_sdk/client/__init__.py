"""Client package for the Starfish SDK.

Provides HTTP client setup and token management for the Starfish API:
- ``http``: Async client factory and the single-request JSON pipeline
- ``token_manager``: Bearer token lifecycle management with refresh on expiry
"""
