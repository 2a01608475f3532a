"""
Scarch Client — Package Initializer
=====================================

What: Async client for the Scarch transcription / OCR / form-filling backend.
Who:  Imported by the mobile shell and by scripts as `from scarch_client.main import ScarchApi`.

Architecture Note:
    The client follows a layered structure:

    ┌─────────────────────────────────────┐
    │     Services (call-site wrappers)   │  ← typed list/get/create/update/delete
    ├─────────────────────────────────────┤
    │    Cascades (family / shape / 404)  │  ← ordered fallbacks across routes
    ├─────────────────────────────────────┤
    │   ApiClient + Interceptors          │  ← prefix rewrite, token, 404 retry
    ├─────────────────────────────────────┤
    │        Transport (httpx)            │  ← one request, one response
    └─────────────────────────────────────┘

    Each layer only talks to the one below it, so every layer can be
    tested with a scripted stand-in for the next.
"""

__version__ = "1.0.0"
