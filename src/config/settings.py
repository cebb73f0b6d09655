"""Application-wide settings and configuration."""

import logging
import os
from pathlib import Path
from typing import Optional


class Settings:
    """Centralized application settings."""

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent.parent
    LOGS_DIR = PROJECT_ROOT / "logs"
    EXPORT_DIR = PROJECT_ROOT / "exports"

    # Logging
    LOGGER_NAME = "probate_dashboard"
    LOG_LEVEL = os.environ.get("PROBATE_LOG_LEVEL", "INFO").upper()

    # UI settings
    PAGE_TITLE = "Probate Leads – Preliminary Analysis"
    EXPORT_FILENAME_PREFIX = "shortlist_export"
    UPLOAD_FILE_TYPES = ["csv", "xlsx", "xls"]

    @classmethod
    def get_log_level(cls) -> int:
        """Resolve the configured log level name to a logging constant."""
        return getattr(logging, cls.LOG_LEVEL, logging.INFO)

    @classmethod
    def get_export_path(cls, filename: str, custom_dir: Optional[Path] = None) -> Path:
        """Get the path an export file is written to, with optional directory override."""
        return (custom_dir or cls.EXPORT_DIR) / filename
