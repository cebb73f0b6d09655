"""Page bookkeeping for the shortlist."""

import logging
from typing import Optional

from config.api import APIConfig
from ui.state.state_contracts import PageMeta


class PaginationController:
    """Holds the requested page; the page size is fixed for the session."""

    def __init__(self, page_size: int = APIConfig.SHORTLIST_PAGE_SIZE, logger_obj: Optional[logging.Logger] = None):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._page = 1
        self._page_size = page_size
        self.logger = logger_obj or logging.getLogger(__name__)

    @property
    def page(self) -> int:
        return self._page

    @property
    def page_size(self) -> int:
        return self._page_size

    def reset(self) -> bool:
        """Go back to page 1. Returns True if the page changed."""
        changed = self._page != 1
        self._page = 1
        return changed

    def _describes_current_page(self, meta: Optional[PageMeta]) -> bool:
        # After a reset whose refresh failed, the kept meta still describes the old page.
        return meta is not None and meta.page == self._page

    def next_page(self, meta: Optional[PageMeta]) -> bool:
        """Advance one page; rejected when the server reports no next page."""
        if not self._describes_current_page(meta) or not meta.has_next:
            self.logger.debug("Rejected next page from page %s", self._page)
            return False
        self._page += 1
        return True

    def previous_page(self, meta: Optional[PageMeta]) -> bool:
        """Go back one page; rejected when the server reports no previous page."""
        if not self._describes_current_page(meta) or not meta.has_prev:
            self.logger.debug("Rejected previous page from page %s", self._page)
            return False
        self._page -= 1
        return True

    def go_to(self, page: int, meta: Optional[PageMeta]) -> bool:
        """Jump to an explicit page within ``1..total_pages``."""
        if meta is None or page < 1 or page > max(1, meta.total_pages) or page == self._page:
            self.logger.debug("Rejected jump to page %s", page)
            return False
        self._page = page
        return True
