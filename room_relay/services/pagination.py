# room_relay/services/pagination.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from room_relay.core.errors import PaginationLimitExceeded

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 20


class CursorPaginator:
    """
    Walks a cursor-paginated Resource API listing until it is exhausted.

    Upstream pages look like ``{"limit": 20, "data": [...], "last": "<cursor>"}``.
    The next page is requested by sending the previous ``last`` value as
    ``start``.

    Rules
    -----
    - Empty or missing ``data``          => stop.
    - Fewer than ``page_limit`` items    => stop without another request.
    - Full page without a ``last`` value => stop (nothing to continue from).
    - More than ``max_pages`` full pages => PaginationLimitExceeded.

    After ``max_pages`` full pages one more page is requested, so a listing
    of exactly ``max_pages * page_limit`` items still completes; only a full
    page at that point raises.

    Pages are fetched one after another; any failed fetch propagates as
    UpstreamError and already collected pages are discarded.
    """

    def __init__(
        self,
        resource_api,
        path: str,
        page_limit: int = DEFAULT_PAGE_LIMIT,
        max_pages: int = 500,
    ) -> None:
        if page_limit < 1:
            raise ValueError("page_limit must be positive")
        if max_pages < 1:
            raise ValueError("max_pages must be positive")

        self.api = resource_api
        self.path = path
        self.page_limit = page_limit
        self.max_pages = max_pages

    async def fetch_all(self, base_filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Return every item of the listing as one flat, upstream-ordered list.
        """
        results: List[Dict[str, Any]] = []
        cursor: Optional[str] = None

        for page_number in range(1, self.max_pages + 2):
            params = dict(base_filter or {})
            params["limit"] = self.page_limit
            if cursor:
                params["start"] = cursor

            payload = await self.api.get_json(self.path, params=params)
            items = payload.get("data") or []
            logger.debug("Fetched page %d of %s with %d items", page_number, self.path, len(items))

            if not items:
                return results

            results.extend(items)

            if len(items) < self.page_limit:
                return results

            cursor = payload.get("last")
            if not cursor:
                return results

        raise PaginationLimitExceeded(self.path, self.max_pages)
