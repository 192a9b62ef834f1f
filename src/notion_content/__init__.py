"""Notion Content - Incremental Notion content sync for static-site builds.

Module structure:
- client: Lazily-initialized, rate-limited API wrapper
- cache: On-disk JSON cache with dev/production staleness policy
- fetch: Pagination walker, data source queries, recursive block fetching
- extract: Rich text extraction
- properties: Soft-failing page property projection and slugs
- models: BlogPost / Lesson item types
- store: Slug-keyed collection store
- loaders: Blog and lesson collection loaders (full-replace sync)
- images: Remote image mirroring
- utils: Environment configuration and ID utilities
"""

# Client
from notion_content.client import get_notion_client, RateLimitedNotionClient

# Cache
from notion_content.cache import DiskCache

# Fetch operations
from notion_content.fetch import (
    query_data_source,
    fetch_page_blocks,
    fetch_blocks_recursive,
)

# Extract / projection
from notion_content.extract import extract_rich_text
from notion_content.properties import (
    get_property_value,
    get_title,
    get_rich_text,
    get_select,
    get_multi_select,
    get_date,
    get_number,
    get_checkbox,
    get_url,
    get_cover,
    get_icon,
    get_slug,
    slugify,
)

# Collections
from notion_content.models import BlogPost, Lesson
from notion_content.store import ContentStore
from notion_content.loaders import load_blog_posts, load_lessons, sync_all, SyncResult

# Images
from notion_content.images import download_image

# Utils / errors
from notion_content.utils import SyncSettings, get_notion_token, extract_page_id
from notion_content.errors import ConfigurationError, BlockDepthExceededError

__all__ = [
    # Client
    "get_notion_client",
    "RateLimitedNotionClient",
    # Cache
    "DiskCache",
    # Fetch
    "query_data_source",
    "fetch_page_blocks",
    "fetch_blocks_recursive",
    # Extract / projection
    "extract_rich_text",
    "get_property_value",
    "get_title",
    "get_rich_text",
    "get_select",
    "get_multi_select",
    "get_date",
    "get_number",
    "get_checkbox",
    "get_url",
    "get_cover",
    "get_icon",
    "get_slug",
    "slugify",
    # Collections
    "BlogPost",
    "Lesson",
    "ContentStore",
    "load_blog_posts",
    "load_lessons",
    "sync_all",
    "SyncResult",
    # Images
    "download_image",
    # Utils / errors
    "SyncSettings",
    "get_notion_token",
    "extract_page_id",
    "ConfigurationError",
    "BlockDepthExceededError",
]
