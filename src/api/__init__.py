"""API clients and communication modules."""

from .dashboard_client import DashboardClient
from .error_handling import DashboardAPIError, ErrorCategory, ExportError, UploadError, categorize_error

__all__ = ["DashboardClient", "DashboardAPIError", "ErrorCategory", "ExportError", "UploadError", "categorize_error"]
