"""In-memory collection store keyed by slug."""

import json
import logging
from pathlib import Path
from typing import Generic, Iterator, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ContentStore(Generic[T]):
    """Ordered mapping of slug -> normalized item for one collection.

    Insertion order is preserved, so iterating yields items in the order the
    loader received them from Notion.
    """

    def __init__(self, name: str):
        self.name = name
        self._items: dict[str, T] = {}

    def clear(self) -> None:
        """Remove every item; the next load repopulates from scratch."""
        self._items.clear()

    def set(self, slug: str, item: T) -> None:
        """Insert an item under its slug.

        Args:
            slug: Item slug.
            item: Normalized item. Replaces any item already stored under
                slug (last write wins) and moves it to the end.
        """
        if slug in self._items:
            logger.warning(f"[{self.name}] Duplicate slug '{slug}', keeping the later item")
            # Re-insert so the surviving item takes the later position
            del self._items[slug]
        self._items[slug] = item

    def get(self, slug: str) -> T | None:
        """Return the item for slug, or None."""
        return self._items.get(slug)

    def keys(self) -> list[str]:
        """Slugs in store order."""
        return list(self._items.keys())

    def values(self) -> list[T]:
        """Items in store order."""
        return list(self._items.values())

    def items(self) -> list[tuple[str, T]]:
        """Return (slug, item) pairs in store order."""
        return list(self._items.items())

    def to_list(self) -> list[T]:
        """Items in store order, for serialization."""
        return self.values()

    def write_json(self, path: str | Path) -> Path:
        """Write the collection as a JSON array.

        Args:
            path: Destination file; parent directories are created.

        Returns:
            The path written.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(self.to_list(), f, ensure_ascii=False, indent=2)
        logger.info(f"[{self.name}] Wrote {len(self)} items to {path}")
        return path

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, slug: object) -> bool:
        return slug in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))
