from __future__ import annotations

import itertools
import logging
from typing import Any, Iterable, Mapping, MutableMapping, Sequence

from ._errors import InvalidRequest, raise_for_status
from ._models import Channel, Playlist, Video
from ._pages import VideoPages
from ._util import runtime_typecheck, _raise_invalid_argument, _prune_none

__all__ = ["MetadataClient", "DEFAULT_BASE_URL"]

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.googleapis.com/youtube/v3"

_VIDEO_PARTS = ("snippet", "statistics", "contentDetails")
_CHANNEL_PARTS = ("snippet", "statistics", "brandingSettings", "contentDetails")
_PLAYLIST_PARTS = ("snippet", "contentDetails")
_SEARCH_KINDS_ALLOWED = {"video"}


class MetadataClient:
    """Entity-level wrapper around the **YouTube Data API v3**.

    The client resolves single videos, channels and playlists into
    :mod:`ytvideos_node._models` entities and exposes channel uploads,
    playlist contents and keyword searches as :class:`VideoPages`.
    Page tokens never leave the paged results.

    Args:
        session (requests.Session):
            HTTP session that already carries the credentials (see
            :func:`ytvideos_node.api_key_session`). The client never
            inspects or refreshes them.
        base_url (str, optional):
            API root to use instead of the default
            ``"https://www.googleapis.com/youtube/v3"``.
        timeout (float, optional):
            Per-request timeout in seconds.
        page_size (int, optional):
            ``maxResults`` for paged endpoints (1–50).

    Raises:
        requests.RequestException:
            Propagated from the underlying session if the network fails.
        ytvideos_node.YTAPIError:
            Any non-2xx answer, mapped by
            :func:`ytvideos_node._errors.raise_for_status`.

    Examples:
         with MetadataClient(api_key_session(key)) as yt:
             video = yt.get_video("dQw4w9WgXcQ")
             hits = yt.search("cats")
             first, more = hits.items, hits.next(2)
    """

    def __init__(self, session, base_url: str = DEFAULT_BASE_URL, *, timeout: float = 60, page_size: int = 50):
        if not 1 <= page_size <= 50:
            raise ValueError(f"page_size must be within 1..50, got {page_size}")
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.page_size = page_size

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.session.close()

    def close(self) -> None:
        self.session.close()

    @staticmethod
    def _chunk(iterable: Iterable[str], size: int = 50):
        """Yield successive `size`-length chunks from *iterable*."""
        it = iter(iterable)
        while chunk := list(itertools.islice(it, size)):
            yield chunk

    def _data_request(self, path: str, params: MutableMapping[str, object] | None = None) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s %s", url, params)
        resp = self.session.request("GET", url, params=params or {}, timeout=self.timeout)

        raise_for_status(resp)

        return resp.json()

    def _list_helper(self, resource: str, *, params: Mapping[str, object]) -> tuple[list[dict[str, Any]], str | None]:
        payload = self._data_request(f"/{resource}", dict(params))
        return payload.get("items", []), payload.get("nextPageToken")

    def _videos_by_id(self, video_ids: Sequence[str]) -> list[Video]:
        """Look up full video resources, keeping the order of *video_ids*.

        IDs the API does not return (private or deleted videos) are skipped.
        """
        found: dict[str, Video] = {}
        for chunk in self._chunk(dict.fromkeys(video_ids), size=50):
            items, _ = self._list_helper("videos", params={
                "part": ",".join(_VIDEO_PARTS),
                "id": ",".join(chunk),
            })
            for item in items:
                found[item["id"]] = Video.from_resource(item)

        missing = [vid for vid in video_ids if vid not in found]
        if missing:
            logger.debug("skipping %d unavailable videos: %s", len(missing), missing)
        return [found[vid] for vid in video_ids if vid in found]

    def _playlist_pages(self, playlist_id: str | None, *, missing_ok: bool = False) -> VideoPages:
        """Page through *playlist_id*.

        With *missing_ok* a ``playlistNotFound`` answer is an empty last page;
        the API gives that for the uploads playlist of a channel without videos.
        """
        if not playlist_id:
            return VideoPages(lambda token: ([], None))

        def fetch(token: str | None) -> tuple[list[Video], str | None]:
            try:
                items, next_token = self._list_helper("playlistItems", params=_prune_none({
                    "part": "contentDetails",
                    "playlistId": playlist_id,
                    "maxResults": self.page_size,
                    "pageToken": token,
                }))
            except InvalidRequest as e:
                if missing_ok and e.status_code == 404 and e.reason == "playlistNotFound":
                    logger.debug("playlist %s not found, treating it as empty", playlist_id)
                    return [], None
                raise
            ids = [i["contentDetails"]["videoId"] for i in items if i.get("contentDetails", {}).get("videoId")]
            return self._videos_by_id(ids), next_token

        return VideoPages(fetch)

    @runtime_typecheck
    def get_video(self, video_id: str) -> Video | None:
        """Return the video with *video_id*, or ``None`` if it does not exist."""
        items, _ = self._list_helper("videos", params={
            "part": ",".join(_VIDEO_PARTS),
            "id": video_id,
        })
        return Video.from_resource(items[0]) if items else None

    @runtime_typecheck
    def get_channel(self, channel_id: str) -> Channel | None:
        """Return the channel with *channel_id*, or ``None`` if it does not exist.

        A value starting with ``@`` is treated as a channel handle.
        """
        params = _prune_none({
            "part": ",".join(_CHANNEL_PARTS),
            "forHandle": channel_id if channel_id.startswith("@") else None,
            "id": None if channel_id.startswith("@") else channel_id,
        })
        items, _ = self._list_helper("channels", params=params)
        if not items:
            return None

        item = items[0]
        uploads = item.get("contentDetails", {}).get("relatedPlaylists", {}).get("uploads")
        return Channel.from_resource(item, videos=self._playlist_pages(uploads, missing_ok=True))

    @runtime_typecheck
    def get_playlist(self, playlist_id: str) -> Playlist | None:
        """Return the playlist with *playlist_id*, or ``None`` if it does not exist."""
        items, _ = self._list_helper("playlists", params={
            "part": ",".join(_PLAYLIST_PARTS),
            "id": playlist_id,
        })
        if not items:
            return None
        return Playlist.from_resource(items[0], videos=self._playlist_pages(items[0]["id"]))

    @runtime_typecheck
    def search(self, keywords: str, kind: str = "video") -> VideoPages:
        """Keyword search returning a paged list of videos.

        Args:
            keywords (str):
                Query term, passed to ``search.list`` as ``q``.
            kind (str):
                Resource type to search for. Only ``"video"`` is supported.

        Raises:
            ValueError: If *kind* is not supported.
        """
        if kind not in _SEARCH_KINDS_ALLOWED:
            _raise_invalid_argument("kind", kind, _SEARCH_KINDS_ALLOWED)

        def fetch(token: str | None) -> tuple[list[Video], str | None]:
            items, next_token = self._list_helper("search", params=_prune_none({
                "part": "id",
                "q": keywords,
                "type": kind,
                "maxResults": self.page_size,
                "pageToken": token,
            }))
            ids = [i["id"]["videoId"] for i in items if i.get("id", {}).get("videoId")]
            return self._videos_by_id(ids), next_token

        return VideoPages(fetch)
