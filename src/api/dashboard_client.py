"""Async client for the probate records query API."""

import logging
from typing import Any, Optional

import aiohttp

from config.api import APIConfig

from .error_handling import ErrorCategory, UploadError, categorize_error
from .query_params import filter_params, shortlist_params


class DashboardClient:
    """Client for chart, KPI, shortlist and upload endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        logger_obj: Optional[logging.Logger] = None,
    ):
        self.base_url = (base_url or APIConfig.BASE_URL).rstrip("/")
        self.timeout = timeout or APIConfig.REQUEST_TIMEOUT
        self.logger = logger_obj or logging.getLogger(__name__)

    def open_session(self) -> aiohttp.ClientSession:
        """Create a session; callers own it (``async with client.open_session() as s``)."""
        return aiohttp.ClientSession()

    async def fetch_json(self, session: aiohttp.ClientSession, url: str, params=None) -> Any:
        """Fetch JSON from a URL with a fixed total timeout and no retry."""
        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with session.get(url, params=params, timeout=timeout) as resp:
                resp.raise_for_status()
                return await resp.json(content_type=None)
        except Exception as e:
            error_category = categorize_error(e)
            self.logger.error(f"Request to {url} failed with {error_category.value} error: {e}")
            raise

    async def fetch_chart(self, session: aiohttp.ClientSession, name: str, filters: Any) -> Any:
        """GET /charts/<name> with the filters as query parameters."""
        return await self.fetch_json(session, f"{self.base_url}/charts/{name}", filter_params(filters))

    async def fetch_shortlist(
        self,
        session: aiohttp.ClientSession,
        filters: Any,
        sort: Optional[str] = None,
        page: int = 1,
        page_size: int = APIConfig.SHORTLIST_PAGE_SIZE,
    ) -> Any:
        """GET /shortlist with filters, serialized sort and paging."""
        params = shortlist_params(filters, sort, page, page_size)
        return await self.fetch_json(session, f"{self.base_url}/shortlist", params)

    async def upload_file(self, session: aiohttp.ClientSession, filename: str, content: bytes) -> None:
        """POST /upload as multipart ``file``.

        Raises:
            UploadError: when the request fails or the server rejects the file.
        """
        url = f"{self.base_url}/upload"
        form = aiohttp.FormData()
        form.add_field("file", content, filename=filename)
        self.logger.info(f"Uploading {filename} ({len(content):,} bytes)")
        try:
            timeout = aiohttp.ClientTimeout(total=APIConfig.UPLOAD_TIMEOUT)
            async with session.post(url, data=form, timeout=timeout) as resp:
                if resp.status >= 400:
                    body = await resp.text()
                    category = ErrorCategory.CLIENT if resp.status < 500 else ErrorCategory.SERVER
                    raise UploadError(f"Ingest failed ({resp.status}): {body}", category)
        except UploadError:
            raise
        except Exception as e:
            raise UploadError(f"Ingest failed: {e}", categorize_error(e)) from e
