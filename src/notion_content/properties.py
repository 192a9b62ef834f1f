"""Property projection for Notion page objects.

Notion database schemas are edited by hand, so properties may be missing,
renamed or retyped at any time. Every getter here inspects the property's
``type`` tag and falls back to the type's zero value instead of raising.
"""

import logging
import re
import unicodedata
from typing import Any, Callable

from notion_content.extract import extract_rich_text

logger = logging.getLogger(__name__)

TITLE_PROPERTY_NAMES = ("Name", "Título", "Title")
SLUG_PROPERTY_NAME = "Slug"


def _select_name(value: dict | None) -> str:
    return (value or {}).get("name") or ""


def _date_start(value: dict | None) -> str:
    return (value or {}).get("start") or ""


# Property type tag -> (extractor for the tagged payload, zero value)
_PROPERTY_TYPES: dict[str, tuple[Callable[[Any], Any], Any]] = {
    "title": (extract_rich_text, ""),
    "rich_text": (extract_rich_text, ""),
    "select": (_select_name, ""),
    "status": (_select_name, ""),
    "multi_select": (lambda value: [_select_name(option) for option in value or []], []),
    "date": (_date_start, ""),
    "number": (lambda value: value if value is not None else 0, 0),
    "checkbox": (bool, False),
    "url": (lambda value: value or "", ""),
}


def _zero_value(expected_type: str) -> Any:
    default = _PROPERTY_TYPES[expected_type][1]
    # Fresh list per call so callers can mutate the result
    return list(default) if isinstance(default, list) else default


def get_property_value(page: dict, name: str, expected_type: str) -> Any:
    """Project a named property of a page to a plain Python value.

    Args:
        page: Page object from the Notion API.
        name: Property name as shown in the Notion database.
        expected_type: Notion property type tag ("title", "rich_text",
            "select", "status", "multi_select", "date", "number",
            "checkbox" or "url").

    Returns:
        The typed value, or the type's zero value ("", 0, False, []) if the
        property is absent, null, or tagged with a different type.

    Raises:
        ValueError: If expected_type is not a supported property type.
    """
    if expected_type not in _PROPERTY_TYPES:
        raise ValueError(f"Unsupported property type: {expected_type}")

    prop = (page.get("properties") or {}).get(name)
    if not prop or prop.get("type") != expected_type:
        return _zero_value(expected_type)

    extractor, _ = _PROPERTY_TYPES[expected_type]
    return extractor(prop.get(expected_type))


def get_first(page: dict, names: tuple[str, ...] | list[str], expected_type: str) -> Any:
    """Return the first non-empty value among several candidate property names.

    Used for properties that exist under a primary name or a localized alias
    (e.g. "Descripción" / "Description").
    """
    for name in names:
        value = get_property_value(page, name, expected_type)
        if value:
            return value
    return _zero_value(expected_type)


def get_title(page: dict, name: str = "Name") -> str:
    """Return the plain text of a title property.

    Args:
        page: Notion page object.
        name: Property name. Defaults to "Name".

    Returns:
        Concatenated plain text, or "" if absent.
    """
    return get_property_value(page, name, "title")


def get_rich_text(page: dict, name: str) -> str:
    """Return the plain text of a rich_text property, or ""."""
    return get_property_value(page, name, "rich_text")


def get_select(page: dict, name: str) -> str:
    """Return the option name of a select property, or ""."""
    return get_property_value(page, name, "select")


def get_multi_select(page: dict, name: str) -> list[str]:
    """Return the option names of a multi_select property.

    Returns:
        List of names in Notion order, or [] if absent.
    """
    return get_property_value(page, name, "multi_select")


def get_date(page: dict, name: str) -> str:
    """Return the start of a date property as an ISO string, or ""."""
    return get_property_value(page, name, "date")


def get_number(page: dict, name: str) -> int | float:
    """Return a number property, or 0 if absent or empty."""
    return get_property_value(page, name, "number")


def get_checkbox(page: dict, name: str) -> bool:
    """Return a checkbox property, or False."""
    return get_property_value(page, name, "checkbox")


def get_url(page: dict, name: str) -> str:
    """Return a url property, or ""."""
    return get_property_value(page, name, "url")


def _file_object_url(obj: dict | None, allow_emoji: bool = False) -> str:
    """Resolve a Notion file object (external / uploaded file / emoji) to a string."""
    if not obj:
        return ""
    obj_type = obj.get("type")
    if obj_type == "external":
        return (obj.get("external") or {}).get("url", "")
    if obj_type == "file":
        return (obj.get("file") or {}).get("url", "")
    if obj_type == "emoji" and allow_emoji:
        return obj.get("emoji", "")
    return ""


def get_cover(page: dict) -> str:
    """Return the cover image URL of a page, or "" if it has none."""
    return _file_object_url(page.get("cover"))


def get_icon(page: dict) -> str:
    """Return the page icon: an emoji literal or an image URL, or ""."""
    return _file_object_url(page.get("icon"), allow_emoji=True)


def get_emoji(page: dict) -> str:
    """Return the page icon only if it is an emoji, else ""."""
    icon = page.get("icon") or {}
    if icon.get("type") == "emoji":
        return icon.get("emoji", "")
    return ""


def slugify(text: str) -> str:
    """Convert text to a URL-safe slug.

    Lowercases, strips diacritics, collapses every run of characters outside
    [a-z0-9] into a single hyphen and trims leading/trailing hyphens.

    Example:
        >>> slugify("¿Cómo usar Notion?")
        'como-usar-notion'
    """
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"[^a-z0-9]+", "-", stripped).strip("-")


def get_slug(page: dict) -> str:
    """Derive the slug for a page.

    An explicit "Slug" rich-text property wins; otherwise the title (from
    "Name", "Título" or "Title") is slugified. A page whose title has no
    usable characters falls back to its ID so the slug is never empty.
    """
    explicit = slugify(get_rich_text(page, SLUG_PROPERTY_NAME))
    if explicit:
        return explicit

    slug = slugify(get_first(page, TITLE_PROPERTY_NAMES, "title"))
    if slug:
        return slug

    page_id = page.get("id", "")
    logger.warning(f"Page {page_id} has no usable title; using its ID as slug")
    return slugify(page_id)
