"""UI service layer for decoupling UI from the query API."""

from .dashboard_controller import DashboardController, UploadResult
from .data_sources import DataSourceOrchestrator
from .export_service import ExportResult, ExportService

__all__ = ["DashboardController", "DataSourceOrchestrator", "ExportService", "ExportResult", "UploadResult"]
