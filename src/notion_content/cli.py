"""Command line entry point: sync collections or dump a page's block tree."""

import argparse
import json
import logging
import sys
from pathlib import Path

from notion_content.cache import DiskCache
from notion_content.client import get_notion_client
from notion_content.fetch import fetch_blocks_recursive
from notion_content.loaders import COLLECTIONS, sync_all
from notion_content.utils import SyncSettings, extract_page_id

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notion-content",
        description="Sync published Notion content into JSON collections for the site build.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Sync blog posts and lessons")
    sync.add_argument(
        "--output", "-o", type=Path, default=Path("src/content/notion"),
        help="Directory for <collection>.json files (default: src/content/notion)",
    )
    mode = sync.add_mutually_exclusive_group()
    mode.add_argument("--production", action="store_true", default=None,
                      help="Trust cached entries indefinitely")
    mode.add_argument("--dev", dest="production", action="store_false", default=None,
                      help="Expire cached entries after 5 minutes")
    sync.add_argument("--only", choices=sorted(COLLECTIONS), action="append",
                      help="Sync only this collection (repeatable)")
    sync.add_argument("--mirror-images", action="store_true", default=None,
                      help="Download cover images into the public image directory")

    blocks = subparsers.add_parser("blocks", help="Fetch the full block tree of a page")
    blocks.add_argument("page_id", help="Notion page or block ID, or a page URL")
    blocks.add_argument("--output", "-o", type=Path, help="Write JSON here instead of stdout")

    return parser


def _cmd_sync(args: argparse.Namespace, settings: SyncSettings) -> int:
    if args.production is not None:
        settings.production = args.production
    if args.mirror_images:
        settings.mirror_images = True

    results = sync_all(settings=settings, only=args.only)

    failed = 0
    for name, result in results.items():
        if result.ok:
            result.store.write_json(args.output / f"{name}.json")
        else:
            failed += 1
            logger.error(f"[{name}] Not updated: {result.error}")
    return 1 if failed else 0


def _cmd_blocks(args: argparse.Namespace, settings: SyncSettings) -> int:
    page_id = extract_page_id(args.page_id) if args.page_id.startswith("http") else args.page_id
    cache = DiskCache(settings.cache_dir, production=settings.production)
    blocks = fetch_blocks_recursive(get_notion_client(), page_id, cache=cache)
    payload = json.dumps(blocks, ensure_ascii=False, indent=2)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(payload, encoding="utf-8")
        logger.info(f"Wrote block tree to {args.output}")
    else:
        sys.stdout.write(payload + "\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = SyncSettings.from_env()

    if args.command == "sync":
        return _cmd_sync(args, settings)
    return _cmd_blocks(args, settings)


if __name__ == "__main__":
    sys.exit(main())
