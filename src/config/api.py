"""API configuration for the probate records query service."""

import os


class APIConfig:
    """API configuration and settings."""

    # Query API endpoint
    BASE_URL = os.environ.get("PROBATE_API_BASE", "http://localhost:8000/api").rstrip("/")

    # Request settings
    REQUEST_TIMEOUT = float(os.environ.get("PROBATE_REQUEST_TIMEOUT", "30"))
    UPLOAD_TIMEOUT = 120

    # Shortlist paging
    SHORTLIST_PAGE_SIZE = 25
    EXPORT_PAGE_SIZE = 10000

    # Retry settings (export only; dashboard dispatches are not retried)
    EXPORT_MAX_TRIES = 3
    RETRY_BASE_DELAY = 2
    RETRY_MAX_DELAY = 30

