"""Error handling and categorization for query API operations."""

import asyncio
import json
from enum import Enum
from typing import Optional

import aiohttp


class ErrorCategory(Enum):
    """Categories for different types of API errors."""
    NETWORK = "network"
    SERVER = "server"
    CLIENT = "client"
    TIMEOUT = "timeout"
    DATA = "data"
    UNKNOWN = "unknown"


def categorize_error(exception: Exception) -> ErrorCategory:
    """Categorize an exception into error types for better handling."""
    if isinstance(exception, DashboardAPIError):
        return exception.category
    if isinstance(exception, asyncio.TimeoutError):
        return ErrorCategory.TIMEOUT
    elif isinstance(exception, aiohttp.ClientResponseError):
        if 400 <= exception.status < 500:
            return ErrorCategory.CLIENT
        elif 500 <= exception.status < 600:
            return ErrorCategory.SERVER
        else:
            return ErrorCategory.UNKNOWN
    elif isinstance(exception, aiohttp.ClientError):
        return ErrorCategory.NETWORK
    elif isinstance(exception, (json.JSONDecodeError, KeyError, TypeError)):
        return ErrorCategory.DATA
    else:
        return ErrorCategory.UNKNOWN


class DashboardAPIError(Exception):
    """Base exception for failed query API operations."""

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN):
        self.message = message
        self.category = category
        super().__init__(self.message)

    @classmethod
    def from_exception(cls, exception: Exception, context: Optional[str] = None) -> "DashboardAPIError":
        """Wrap an arbitrary exception, keeping its category."""
        message = f"{context}: {exception}" if context else str(exception)
        return cls(message, categorize_error(exception))


class UploadError(DashboardAPIError):
    """Raised when the ingestion endpoint rejects or fails an upload."""


class ExportError(DashboardAPIError):
    """Raised when the unpaginated export fetch or serialization fails."""
