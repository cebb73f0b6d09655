"""Dependency injection container for the application."""

import logging
from typing import Optional

from api.dashboard_client import DashboardClient
from config.settings import Settings
from ui.services.dashboard_controller import DashboardController
from utils.logger_setup import setup_logging


class DependencyContainer:
    """Container for managing application dependencies."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        logger_name: str = Settings.LOGGER_NAME,
        file_logging: bool = True,
    ):
        self.base_url = base_url
        self.logger = setup_logging(logger_name, file_output=file_logging)

        self._client: Optional[DashboardClient] = None

    @property
    def client(self) -> DashboardClient:
        """Get or create the query API client."""
        if self._client is None:
            self._client = DashboardClient(base_url=self.base_url, logger_obj=self.logger)
        return self._client

    def create_controller(self) -> DashboardController:
        """Create a dashboard controller with fresh filter/sort/page state."""
        return DashboardController(client=self.client, logger_obj=self.logger)

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """Get a logger instance."""
        if name:
            return logging.getLogger(name)
        return self.logger
