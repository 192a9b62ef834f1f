"""Collection loaders - sync Notion data sources into slug-keyed stores.

Each load is a full replace: the data source is queried, every record is
normalized, and only then is the store cleared and repopulated. If the query
or normalization fails the store keeps the previous generation intact.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable

from notion_content.cache import DiskCache
from notion_content.client import RateLimitedNotionClient, get_notion_client
from notion_content.fetch import query_data_source
from notion_content.images import download_image
from notion_content.models import BlogPost, Lesson
from notion_content.properties import (
    TITLE_PROPERTY_NAMES,
    get_cover,
    get_emoji,
    get_first,
    get_slug,
)
from notion_content.store import ContentStore
from notion_content.utils import SyncSettings, require_data_source_id

logger = logging.getLogger(__name__)

STATUS_PROPERTY = "Estado"
PUBLISHED_STATUS = "Publicado"
PUBLISHED_FILTER = {"property": STATUS_PROPERTY, "select": {"equals": PUBLISHED_STATUS}}

DEFAULT_CATEGORY = "Tutorial"
DEFAULT_MODULE = "Fundamentos"
DEFAULT_POST_EMOJI = "📝"
DEFAULT_LESSON_EMOJI = "📚"
DEFAULT_READING_TIME = "5 min"


def normalize_blog_post(page: dict, today: str | None = None) -> BlogPost:
    """Project a Notion page into a BlogPost, defaulting missing fields.

    Args:
        page: Page object from the blog data source.
        today: ISO date used when the page has no date. Defaults to today.
    """
    return BlogPost(
        slug=get_slug(page),
        title=get_first(page, TITLE_PROPERTY_NAMES, "title"),
        description=get_first(page, ("Descripción", "Description"), "rich_text"),
        publishDate=get_first(page, ("Fecha", "Date"), "date") or today or date.today().isoformat(),
        readingTime=get_first(page, ("Tiempo de lectura", "Reading time"), "rich_text") or DEFAULT_READING_TIME,
        category=get_first(page, ("Categoría", "Category"), "select") or DEFAULT_CATEGORY,
        tags=get_first(page, ("Etiquetas", "Tags"), "multi_select"),
        emoji=get_emoji(page) or get_first(page, ("Emoji",), "rich_text") or DEFAULT_POST_EMOJI,
        cover=get_cover(page),
        notionId=page.get("id", ""),
    )


def normalize_lesson(page: dict) -> Lesson:
    """Project a Notion page into a Lesson, defaulting missing fields."""
    return Lesson(
        slug=get_slug(page),
        title=get_first(page, TITLE_PROPERTY_NAMES, "title"),
        description=get_first(page, ("Descripción", "Description"), "rich_text"),
        order=get_first(page, ("Orden", "Order"), "number"),
        module=get_first(page, ("Módulo", "Module"), "select") or DEFAULT_MODULE,
        emoji=get_emoji(page) or get_first(page, ("Emoji",), "rich_text") or DEFAULT_LESSON_EMOJI,
        cover=get_cover(page),
        notionId=page.get("id", ""),
    )


@dataclass(frozen=True)
class CollectionSpec:
    """Static description of one synced collection."""

    name: str
    env_var: str
    settings_field: str
    filter: dict[str, Any]
    sorts: list[dict[str, Any]]
    normalize: Callable[[dict], Any]


BLOG = CollectionSpec(
    name="blog",
    env_var="NOTION_BLOG_DB",
    settings_field="blog_data_source_id",
    filter=PUBLISHED_FILTER,
    sorts=[{"property": "Fecha", "direction": "descending"}],
    normalize=normalize_blog_post,
)

LESSONS = CollectionSpec(
    name="lessons",
    env_var="NOTION_LESSONS_DB",
    settings_field="lessons_data_source_id",
    filter=PUBLISHED_FILTER,
    sorts=[{"property": "Orden", "direction": "ascending"}],
    normalize=normalize_lesson,
)

COLLECTIONS = {spec.name: spec for spec in (BLOG, LESSONS)}


def _mirror_cover(item: dict, collection: str, settings: SyncSettings) -> None:
    if item["cover"]:
        item["cover"] = download_image(
            item["cover"], f"{collection}-{item['slug']}-cover", settings.image_dir
        )


def load_collection(
    spec: CollectionSpec,
    store: ContentStore,
    client: RateLimitedNotionClient,
    cache: DiskCache | None = None,
    settings: SyncSettings | None = None,
) -> int:
    """Query, normalize and fully replace the contents of a store.

    Args:
        spec: Which collection to load (BLOG or LESSONS).
        store: Destination store; cleared only after a successful fetch.
        client: RateLimitedNotionClient instance.
        cache: Optional DiskCache for the query result.
        settings: Sync settings. Defaults to SyncSettings.from_env().

    Returns:
        Number of items in the store after the load.

    Raises:
        ConfigurationError: If the collection's data source ID is missing.
    """
    settings = settings or SyncSettings.from_env()
    data_source_id = require_data_source_id(getattr(settings, spec.settings_field), spec.env_var)

    pages = query_data_source(client, data_source_id, filter=spec.filter, sorts=spec.sorts, cache=cache)

    items = []
    for page in pages:
        item = spec.normalize(page)
        if settings.mirror_images:
            _mirror_cover(item, spec.name, settings)
        items.append(item)

    store.clear()
    for item in items:
        store.set(item["slug"], item)

    logger.info(f"[{spec.name}] Loaded {len(store)} items from {len(pages)} pages")
    return len(store)


def load_blog_posts(
    store: ContentStore[BlogPost],
    client: RateLimitedNotionClient,
    cache: DiskCache | None = None,
    settings: SyncSettings | None = None,
) -> int:
    """Load published blog posts, newest first."""
    return load_collection(BLOG, store, client, cache, settings)


def load_lessons(
    store: ContentStore[Lesson],
    client: RateLimitedNotionClient,
    cache: DiskCache | None = None,
    settings: SyncSettings | None = None,
) -> int:
    """Load published lessons in course order."""
    return load_collection(LESSONS, store, client, cache, settings)


@dataclass
class SyncResult:
    """Outcome of syncing one collection."""

    name: str
    store: ContentStore
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def sync_all(
    client: RateLimitedNotionClient | None = None,
    settings: SyncSettings | None = None,
    cache: DiskCache | None = None,
    stores: dict[str, ContentStore] | None = None,
    only: list[str] | None = None,
) -> dict[str, SyncResult]:
    """Sync the blog and lessons collections concurrently.

    A failure in one collection is captured in its SyncResult and does not
    affect the other. Stores passed in keep their previous contents on failure.

    Args:
        client: Shared client. Defaults to get_notion_client().
        settings: Sync settings. Defaults to SyncSettings.from_env().
        cache: DiskCache. Defaults to one built from settings.
        stores: Existing stores by collection name, created if missing.
        only: Restrict to these collection names.

    Returns:
        Dict mapping collection name to SyncResult.
    """
    settings = settings or SyncSettings.from_env()
    client = client or get_notion_client()
    cache = cache or DiskCache(settings.cache_dir, production=settings.production)
    stores = stores if stores is not None else {}

    # One thread per collection, even if a name is repeated
    names = list(dict.fromkeys(only)) if only else list(COLLECTIONS)
    for name in names:
        stores.setdefault(name, ContentStore(name))

    def _run(name: str) -> SyncResult:
        try:
            load_collection(COLLECTIONS[name], stores[name], client, cache, settings)
        except Exception as e:
            logger.error(f"[{name}] Sync failed: {type(e).__name__}: {e}")
            return SyncResult(name, stores[name], e)
        return SyncResult(name, stores[name])

    with ThreadPoolExecutor(max_workers=len(names) or 1) as executor:
        results = list(executor.map(_run, names))

    return {result.name: result for result in results}
