from __future__ import annotations

import logging
from typing import Callable

from ._models import Video

__all__ = ["VideoPages", "PageFetcher"]

logger = logging.getLogger(__name__)

# fetch_page(page_token) -> (videos, next_page_token | None)
PageFetcher = Callable[[str | None], tuple[list[Video], str | None]]


class VideoPages:
    """A paged list of videos (channel uploads, playlist items, search hits).

    ``items`` holds the first page and is fetched on first access; ``next``
    walks further pages, keeping the page token internal.

    Args:
        fetch_page (Callable[[str | None], tuple[list[Video], str | None]]):
            Called with ``None`` for the first page and with the previous
            ``nextPageToken`` afterwards.
    """

    def __init__(self, fetch_page: PageFetcher):
        self._fetch_page = fetch_page
        self._items: list[Video] | None = None
        self._token: str | None = None

    def _load_first(self) -> None:
        self._items, self._token = self._fetch_page(None)

    @property
    def items(self) -> list[Video]:
        if self._items is None:
            self._load_first()
        return list(self._items)

    @property
    def has_more(self) -> bool:
        if self._items is None:
            self._load_first()
        return self._token is not None

    def next(self, count: int = 1) -> list[Video]:
        """Fetch up to *count* pages after the ones already loaded.

        Stops early when the API reports no further page; ``count <= 0``
        fetches nothing.
        """
        if self._items is None:
            self._load_first()

        more: list[Video] = []
        for _ in range(max(count, 0)):
            if self._token is None:
                break
            videos, self._token = self._fetch_page(self._token)
            more.extend(videos)

        logger.debug("fetched %d more videos (more pages: %s)", len(more), self._token is not None)
        return more
