"""
Users API — Application Package Initializer
============================================

What: Marks the `users_api` directory as a Python package.
Why:  Enables module imports like `from users_api.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The service follows the same thin layering for every request:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │        Services (Store Adapter)     │  ← One driver call per operation
    ├─────────────────────────────────────┤
    │           Schemas (Data)            │  ← Pydantic request/response shapes
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Motor client, users collection
    └─────────────────────────────────────┘

    Routes translate HTTP into a service call; the service translates driver
    results and errors into documents and application exceptions; global
    exception handlers translate those exceptions back into HTTP.
"""

__version__ = "1.0.0"
