"""Fetch operations for Notion content sync.

Provides data source queries (every page of results, walked with the
SDK's pagination helper) and block fetching (top-level and recursive), all
reading through an optional DiskCache.
"""

import logging
from typing import TYPE_CHECKING, Any

from notion_client.helpers import collect_paginated_api

from notion_content.cache import blocks_cache_key, query_cache_key
from notion_content.client import PAGE_SIZE
from notion_content.errors import BlockDepthExceededError

if TYPE_CHECKING:
    from notion_content.cache import DiskCache
    from notion_content.client import RateLimitedNotionClient

logger = logging.getLogger(__name__)

# Notion nests at most a few levels in practice; anything past this is corrupt
MAX_BLOCK_DEPTH = 32


def query_data_source(
    client: "RateLimitedNotionClient",
    data_source_id: str,
    filter: dict[str, Any] | None = None,
    sorts: list[dict[str, Any]] | None = None,
    cache: "DiskCache | None" = None,
) -> list[dict]:
    """Fetch every page of a data source matching filter, in sorted order.

    Results that are not page objects (no "properties") are dropped.

    Args:
        client: RateLimitedNotionClient instance.
        data_source_id: Notion data source ID.
        filter: Optional Notion filter object.
        sorts: Optional list of Notion sort objects.
        cache: Optional DiskCache read before and written after the query.

    Returns:
        List of page dicts.
    """
    key = query_cache_key(data_source_id)
    if cache is not None:
        cached = cache.get(key)
        if cached is not None:
            logger.debug(f"Using cached query for data source {data_source_id}")
            return cached

    logger.debug(f"Querying data source {data_source_id}")
    results = collect_paginated_api(
        client.query_data_source,
        data_source_id=data_source_id,
        filter=filter,
        sorts=sorts,
        page_size=PAGE_SIZE,
    )
    pages = [result for result in results if "properties" in result]
    logger.info(f"Fetched {len(pages)} pages from data source {data_source_id}")

    if cache is not None:
        cache.set(key, pages)
    return pages


def fetch_page_blocks(client: "RateLimitedNotionClient", block_id: str) -> list[dict]:
    """Fetch the direct children of a page or block.

    Use this when you only need the immediate children of a page,
    not nested content inside toggles, columns, etc.

    Args:
        client: RateLimitedNotionClient instance.
        block_id: Notion page or block ID.

    Returns:
        List of block dicts (direct children only, no children fetched).
    """
    blocks = collect_paginated_api(
        client.list_block_children, block_id=block_id, page_size=PAGE_SIZE
    )
    return [block for block in blocks if "type" in block]


def fetch_blocks_recursive(
    client: "RateLimitedNotionClient",
    block_id: str,
    cache: "DiskCache | None" = None,
    max_depth: int = MAX_BLOCK_DEPTH,
) -> list[dict]:
    """Fetch all blocks under a page or block, including nested children.

    Every block with has_children=True gets its resolved subtree stored under
    the 'children' key; blocks without children carry no such key. Order
    matches Notion's. Each container's resolved forest is cached separately,
    so a later request for a nested block can be served from cache.

    Fetch errors are not caught: a failure anywhere aborts the whole tree.

    Args:
        client: RateLimitedNotionClient instance.
        block_id: Notion page or block ID.
        cache: Optional DiskCache for resolved forests.
        max_depth: Maximum nesting depth below block_id.

    Returns:
        List of block dicts with nested children under 'children'.

    Raises:
        BlockDepthExceededError: If the tree is nested deeper than max_depth.
    """
    blocks = _resolve(client, block_id, cache, depth=0, max_depth=max_depth)
    logger.info(f"Fetched {count_blocks(blocks)} total blocks (including nested) for {block_id}")
    return blocks


def _resolve(
    client: "RateLimitedNotionClient",
    block_id: str,
    cache: "DiskCache | None",
    depth: int,
    max_depth: int,
) -> list[dict]:
    """Resolve one container, recursing into children."""
    if depth >= max_depth:
        raise BlockDepthExceededError(block_id, max_depth)

    key = blocks_cache_key(block_id)
    if cache is not None:
        cached = cache.get(key)
        if cached is not None:
            return cached

    result = []
    for block in fetch_page_blocks(client, block_id):
        # Copy to avoid mutating the API response
        enriched_block = dict(block)
        if block.get("has_children"):
            logger.debug(
                f"{'  ' * depth}Fetching children for {block.get('type')} block {block['id']}"
            )
            enriched_block["children"] = _resolve(
                client, block["id"], cache, depth + 1, max_depth
            )
        result.append(enriched_block)

    if cache is not None:
        cache.set(key, result)
    return result


def count_blocks(blocks: list[dict]) -> int:
    """Count blocks in a resolved forest, including nested children."""
    total = len(blocks)
    for block in blocks:
        if "children" in block:
            total += count_blocks(block["children"])
    return total
