"""Command-line entry point: ``python -m ytvideos_node`` / ``ytvideos-node``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from ._config import Settings, client_from_settings
from ._errors import ConfigurationError, NodeOperationError
from ._items import to_dataframe
from ._node import YoutubeVideosNode
from ._operations import Operation
from ._parameters import ItemFieldParameters, NodeParameters

logger = logging.getLogger("ytvideos_node")


def setup_logging(level: str) -> None:
    """Log to stderr so stdout carries only records."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ytvideos-node",
        description="Fetch YouTube channel, playlist, search and video metadata as flat records.",
    )
    parser.add_argument("--operation", "-o", choices=[op.value for op in Operation],
                        help="Operation applied to every item (default: channel)")
    parser.add_argument("--channel-id", help="Channel ID or @handle")
    parser.add_argument("--playlist-id", help="Playlist ID")
    parser.add_argument("--keywords", help="Search keywords")
    parser.add_argument("--page-count", type=int, help="Additional search result pages to load")
    parser.add_argument("--video-id", help="Video ID")
    parser.add_argument("--items", type=Path,
                        help="JSON file with a list of items; fields of an item override the flags above")
    parser.add_argument("--continue-on-fail", action="store_true",
                        help="Emit an error record for a failing item instead of aborting")
    parser.add_argument("--format", choices=["json", "csv"], default="json",
                        help="json: one record per line (default); csv: flattened table")
    parser.add_argument("--log-level", help="Overrides YTVIDEOS_LOG_LEVEL")
    return parser


def _flag_parameters(args: argparse.Namespace) -> dict[str, Any]:
    flags = {
        "operation": args.operation,
        "channel_id": args.channel_id,
        "playlist_id": args.playlist_id,
        "keywords": args.keywords,
        "pageCount": args.page_count,
        "video_id": args.video_id,
    }
    return {k: v for k, v in flags.items() if v is not None}


def _load_items(path: Path) -> list[dict[str, Any]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list) or not all(isinstance(i, dict) for i in data):
        raise ConfigurationError(f"{path} must contain a JSON list of objects")
    return data


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        setup_logging(args.log_level or "WARNING")
        logger.error("Configuration error: %s", e)
        return 1
    setup_logging(args.log_level or settings.log_level)

    try:
        items = _load_items(args.items) if args.items else [{}]
    except (OSError, ValueError, ConfigurationError) as e:
        logger.error("Could not read items: %s", e)
        return 1

    node_params = NodeParameters(_flag_parameters(args), items)
    resolver = ItemFieldParameters(items, fallback=node_params) if args.items else node_params

    node = YoutubeVideosNode(lambda: client_from_settings(settings))
    try:
        output = node.execute(items, resolver, continue_on_fail=args.continue_on_fail)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return 1
    except NodeOperationError as e:
        logger.error("Aborted at item %s: %s", e.item_index, e)
        return 1

    if args.format == "csv":
        to_dataframe(output).to_csv(sys.stdout, index=False)
    else:
        for item in output:
            sys.stdout.write(json.dumps(item.to_dict(), ensure_ascii=False) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
