"""Shared pytest fixtures and helpers: an in-memory Notion API double and page builders."""

import logging
import os

import pytest
from dotenv import load_dotenv

from notion_content import RateLimitedNotionClient, SyncSettings

# Load .env file (live tests only use it)
load_dotenv()

logger = logging.getLogger(__name__)


# =============================================================================
# FAKE NOTION API
# =============================================================================


def _paginate(items: list[dict], start_cursor: str | None, page_size: int) -> dict:
    """Slice items like the Notion API does, using the offset as cursor."""
    start = int(start_cursor) if start_cursor else 0
    chunk = items[start:start + page_size]
    end = start + len(chunk)
    has_more = end < len(items)
    return {
        "object": "list",
        "results": chunk,
        "next_cursor": str(end) if has_more else None,
        "has_more": has_more,
    }


class FakeDataSources:
    def __init__(self):
        self.records: dict[str, list[dict]] = {}
        self.calls: list[dict] = []
        self.error: Exception | None = None

    def query(self, data_source_id, page_size=100, start_cursor=None, **kwargs):
        self.calls.append({"data_source_id": data_source_id, "start_cursor": start_cursor, **kwargs})
        if self.error is not None:
            raise self.error
        return _paginate(self.records[data_source_id], start_cursor, page_size)


class FakeBlockChildren:
    def __init__(self):
        self.children: dict[str, list[dict]] = {}
        self.calls: list[str] = []

    def list(self, block_id, page_size=100, start_cursor=None):
        self.calls.append(block_id)
        return _paginate(self.children.get(block_id, []), start_cursor, page_size)


class FakeBlocks:
    def __init__(self):
        self.children = FakeBlockChildren()


class FakeNotion:
    """Stands in for notion_client.Client with just the read endpoints."""

    def __init__(self):
        self.data_sources = FakeDataSources()
        self.blocks = FakeBlocks()


@pytest.fixture(autouse=True)
def no_rate_limit(monkeypatch):
    """Disable request spacing so tests don't sleep."""
    monkeypatch.setattr("notion_content.client.MIN_REQUEST_INTERVAL", 0)


@pytest.fixture
def fake_notion():
    return FakeNotion()


@pytest.fixture
def client(fake_notion):
    return RateLimitedNotionClient(notion=fake_notion)


@pytest.fixture
def settings(tmp_path):
    return SyncSettings(
        blog_data_source_id="blog-ds",
        lessons_data_source_id="lessons-ds",
        cache_dir=tmp_path / "cache",
        image_dir=tmp_path / "images",
        production=False,
    )


# =============================================================================
# PAGE / BLOCK BUILDERS
# =============================================================================


def rich_text(text: str) -> list[dict]:
    return [{"type": "text", "text": {"content": text}, "plain_text": text}]


def title_prop(text: str) -> dict:
    return {"type": "title", "title": rich_text(text)}


def text_prop(text: str) -> dict:
    return {"type": "rich_text", "rich_text": rich_text(text)}


def select_prop(name: str | None) -> dict:
    return {"type": "select", "select": {"name": name} if name is not None else None}


def multi_select_prop(*names: str) -> dict:
    return {"type": "multi_select", "multi_select": [{"name": n} for n in names]}


def date_prop(start: str | None) -> dict:
    return {"type": "date", "date": {"start": start} if start is not None else None}


def number_prop(value) -> dict:
    return {"type": "number", "number": value}


def make_page(page_id: str, properties: dict, cover: dict | None = None, icon: dict | None = None) -> dict:
    return {
        "object": "page",
        "id": page_id,
        "properties": properties,
        "cover": cover,
        "icon": icon,
    }


def make_block(block_id: str, text: str = "", block_type: str = "paragraph", has_children: bool = False) -> dict:
    return {
        "object": "block",
        "id": block_id,
        "type": block_type,
        "has_children": has_children,
        block_type: {"rich_text": rich_text(text)},
    }


@pytest.fixture(scope="session")
def live_client():
    """Real client for live tests; skipped without credentials."""
    if not (os.getenv("NOTION_TOKEN") or os.getenv("NOTION_API_TOKEN")):
        pytest.skip("NOTION_TOKEN not set - skipping live tests")
    from notion_content import get_notion_client

    return get_notion_client()
