"""Configuration helpers - environment, .env loading and ID normalization."""

import os
import re
import logging
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from notion_content.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = ".notion-cache"
DEFAULT_IMAGE_DIR = os.path.join("public", "images", "notion")
PRODUCTION_MODES = frozenset(["production", "build", "prod"])

# Auto-load .env from project root
_env_loaded = False


def _ensure_env_loaded() -> None:
    """Load .env file if not already loaded."""
    global _env_loaded
    if _env_loaded:
        return

    # Working directory first (the site being built), then the package's parents
    candidates = [Path.cwd()] + list(Path(__file__).resolve().parents)
    for parent in candidates:
        env_file = parent / ".env"
        if env_file.exists():
            load_dotenv(env_file)
            logger.debug(f"Loaded environment from {env_file}")
            break

    _env_loaded = True


def get_notion_token() -> str:
    """Get Notion API token from environment.

    Automatically loads .env file from project root if present.
    NOTION_TOKEN is preferred; NOTION_API_TOKEN is accepted as a fallback.

    Returns:
        The integration token.

    Raises:
        ConfigurationError: If neither variable is set.
    """
    _ensure_env_loaded()

    token = os.environ.get("NOTION_TOKEN") or os.environ.get("NOTION_API_TOKEN")
    if not token:
        raise ConfigurationError(
            "NOTION_TOKEN environment variable not set.\n"
            "Get your token at: https://www.notion.so/my-integrations"
        )
    return token


def is_production_mode() -> bool:
    """Whether the cache should trust entries indefinitely.

    Controlled by NOTION_SYNC_MODE; "production", "build" or "prod" select the
    build policy, anything else (including unset) is interactive/dev.
    """
    _ensure_env_loaded()
    return os.environ.get("NOTION_SYNC_MODE", "").strip().lower() in PRODUCTION_MODES


def extract_page_id(url: str) -> str:
    """Extract page ID from Notion URL and format as UUID.

    Supports formats:
    - https://notion.so/workspace/Page-Title-abc123def456
    - https://notion.so/abc123def456
    - https://www.notion.so/workspace/abc123def456?v=...

    Args:
        url: A Notion page or database URL.

    Returns:
        32-character ID formatted as UUID with dashes.
        Example: "2d240e6d-8f97-8077-8b8d-fd8dae6ed382"

    Raises:
        ValueError: If the ID cannot be extracted from the URL.
    """
    # Remove query params and fragments
    url = url.split("?")[0].split("#")[0]

    last_segment = url.rstrip("/").split("/")[-1]

    # 32 hex chars at the END (titles can contain hex chars like "cafe")
    match = re.search(r"([a-f0-9]{32})$", last_segment.replace("-", ""))
    if match:
        raw_id = match.group(1)
        return f"{raw_id[:8]}-{raw_id[8:12]}-{raw_id[12:16]}-{raw_id[16:20]}-{raw_id[20:]}"

    raise ValueError(f"Could not extract page ID from URL: {url}")


@dataclass
class SyncSettings:
    """Settings for one sync run.

    Data source IDs are kept as raw strings (possibly empty) so that a missing
    ID only fails when the corresponding collection is actually loaded.
    """

    blog_data_source_id: str = ""
    lessons_data_source_id: str = ""
    cache_dir: Path = field(default_factory=lambda: Path(DEFAULT_CACHE_DIR))
    image_dir: Path = field(default_factory=lambda: Path(DEFAULT_IMAGE_DIR))
    production: bool = False
    mirror_images: bool = False

    @classmethod
    def from_env(cls) -> "SyncSettings":
        """Build settings from environment variables (and .env)."""
        _ensure_env_loaded()
        return cls(
            blog_data_source_id=os.environ.get("NOTION_BLOG_DB", "").strip(),
            lessons_data_source_id=os.environ.get("NOTION_LESSONS_DB", "").strip(),
            cache_dir=Path(os.environ.get("NOTION_CACHE_DIR") or DEFAULT_CACHE_DIR),
            image_dir=Path(os.environ.get("NOTION_IMAGE_DIR") or DEFAULT_IMAGE_DIR),
            production=is_production_mode(),
            mirror_images=os.environ.get("NOTION_MIRROR_IMAGES", "").strip().lower() in ("1", "true", "yes"),
        )


def require_data_source_id(value: str, env_var: str) -> str:
    """Normalize a data source ID, accepting bare IDs or Notion URLs.

    Args:
        value: Configured value, possibly empty.
        env_var: Name of the setting, used in the error message.

    Returns:
        The data source ID.

    Raises:
        ConfigurationError: If the value is empty.
    """
    value = value.strip()
    if not value:
        raise ConfigurationError(f"{env_var} environment variable not set.")
    if value.startswith("http"):
        return extract_page_id(value)
    return value
