"""External API clients for metadata resolution.

Submodules:
    youtube -- YouTube Data API v3 client with per-key quota fallback
"""
