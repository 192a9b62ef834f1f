"""Notion Content Client - Lazily-initialized, throttled wrapper around the Notion API."""

import logging
import threading
import time
from typing import Any

from notion_client import Client

from notion_content.utils import get_notion_token

logger = logging.getLogger(__name__)

# Rate limiting: max 3 requests/second
MIN_REQUEST_INTERVAL = 0.35
PAGE_SIZE = 100


class RateLimitedNotionClient:
    """Wrapper around the Notion client exposing the two read primitives the
    sync engine needs: data source queries and block-children listing.

    The underlying notion_client.Client is constructed on first use, so the
    token is only read (and a missing token only reported) when a request is
    actually made. Requests are spaced at least MIN_REQUEST_INTERVAL apart;
    the spacing is shared across threads. Errors are never retried.

    Attributes:
        request_count: Total number of API requests made.
    """

    def __init__(self, notion: Client | None = None, token: str | None = None):
        """Initialize the client.

        Args:
            notion: An already configured notion_client.Client (or a test
                double). When omitted, one is created on first request.
            token: Integration token to use instead of the environment.
        """
        self._notion = notion
        self._token = token
        self._lock = threading.Lock()
        self._last_request_time: float = 0
        self.request_count: int = 0

    @property
    def notion(self) -> Client:
        """The underlying notion_client.Client, created on first access.

        Raises:
            ConfigurationError: If no token was given and none is configured.
        """
        with self._lock:
            if self._notion is None:
                token = self._token or get_notion_token()
                self._notion = Client(auth=token)
                logger.debug("Initialized Notion client")
            return self._notion

    def _wait_for_rate_limit(self) -> None:
        """Wait if needed to respect rate limit."""
        with self._lock:
            elapsed = time.time() - self._last_request_time
            if elapsed < MIN_REQUEST_INTERVAL:
                time.sleep(MIN_REQUEST_INTERVAL - elapsed)
            self._last_request_time = time.time()
            self.request_count += 1

    def query_data_source(
        self,
        data_source_id: str,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
        start_cursor: str | None = None,
        page_size: int = PAGE_SIZE,
    ) -> dict[str, Any]:
        """Query one page of a data source.

        Args:
            data_source_id: The Notion data source ID.
            filter: Optional Notion filter object.
            sorts: Optional list of Notion sort objects.
            start_cursor: Cursor returned by the previous page, or None.
            page_size: Number of results per page (max 100).

        Returns:
            Response dict with "results", "next_cursor" and "has_more".

        Raises:
            APIResponseError: On API errors (auth, validation, rate limit).
            HTTPResponseError: On non-API HTTP failures.
        """
        notion = self.notion
        kwargs: dict[str, Any] = {"data_source_id": data_source_id, "page_size": page_size}
        if filter:
            kwargs["filter"] = filter
        if sorts:
            kwargs["sorts"] = sorts
        if start_cursor:
            kwargs["start_cursor"] = start_cursor

        self._wait_for_rate_limit()
        logger.debug(f"Querying data source {data_source_id} (cursor={start_cursor})")
        return notion.data_sources.query(**kwargs)

    def list_block_children(
        self,
        block_id: str,
        start_cursor: str | None = None,
        page_size: int = PAGE_SIZE,
    ) -> dict[str, Any]:
        """List one page of child blocks of a block or page.

        Args:
            block_id: The Notion block or page ID.
            start_cursor: Cursor returned by the previous page, or None.
            page_size: Number of results per page (max 100).

        Returns:
            Response dict with "results", "next_cursor" and "has_more".

        Raises:
            APIResponseError: On API errors (auth, validation, rate limit).
            HTTPResponseError: On non-API HTTP failures.
        """
        notion = self.notion
        kwargs: dict[str, Any] = {"block_id": block_id, "page_size": page_size}
        if start_cursor:
            kwargs["start_cursor"] = start_cursor

        self._wait_for_rate_limit()
        logger.debug(f"Listing children of {block_id} (cursor={start_cursor})")
        return notion.blocks.children.list(**kwargs)


def get_notion_client(token: str | None = None) -> RateLimitedNotionClient:
    """Factory function to create a RateLimitedNotionClient.

    The token is not read here; it is read from NOTION_TOKEN on the first
    request unless passed explicitly.

    Args:
        token: Optional integration token overriding the environment.

    Returns:
        A RateLimitedNotionClient instance.
    """
    return RateLimitedNotionClient(token=token)
