"""Mirror remote images into the site's public asset directory.

Notion-hosted file URLs expire after about an hour, so covers and inline
images are copied locally under a stable name.
"""

import logging
import re
from pathlib import Path

import httpx

from notion_content.utils import DEFAULT_IMAGE_DIR

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/images/notion"


def guess_extension(url: str) -> str:
    """Guess an image extension from a URL by substring match (default .jpg)."""
    if ".png" in url:
        return ".png"
    if ".gif" in url:
        return ".gif"
    return ".jpg"


def safe_filename(name: str) -> str:
    """Replace every character outside [a-zA-Z0-9-] with a hyphen."""
    return re.sub(r"[^a-zA-Z0-9-]", "-", name)


def download_image(
    url: str,
    name: str,
    image_dir: str | Path = DEFAULT_IMAGE_DIR,
    public_prefix: str = PUBLIC_PREFIX,
    http: httpx.Client | None = None,
) -> str:
    """Download an image once and return its public path.

    The target file is ``<image_dir>/<safe name><ext>``. If it already exists
    the download is skipped; existing mirrors are never refreshed.

    Args:
        url: Source image URL.
        name: Logical name for the file (e.g. "blog-my-post-cover").
        image_dir: Local directory served as public assets.
        public_prefix: URL path under which image_dir is served.
        http: Optional httpx.Client to reuse.

    Returns:
        The public path (e.g. "/images/notion/blog-my-post-cover.png"), or the
        original URL if the server answered with a non-success status.

    Raises:
        httpx.HTTPError: On transport failures.
        OSError: If the file cannot be written.
    """
    image_dir = Path(image_dir)
    image_dir.mkdir(parents=True, exist_ok=True)

    filename = safe_filename(name) + guess_extension(url)
    file_path = image_dir / filename
    public_path = f"{public_prefix.rstrip('/')}/{filename}"

    if file_path.exists():
        logger.debug(f"Image already mirrored: {file_path}")
        return public_path

    if http is None:
        response = httpx.get(url, follow_redirects=True)
    else:
        response = http.get(url, follow_redirects=True)

    if not response.is_success:
        logger.warning(f"Image download failed ({response.status_code}), keeping remote URL for {name}")
        return url

    file_path.write_bytes(response.content)
    logger.debug(f"Mirrored {url} to {file_path}")
    return public_path
