"""Immutable entities built from YouTube Data API v3 resources.

Only the fields the node forwards are kept; ``from_resource`` tolerates
missing parts so a partially populated resource still yields an entity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping

from ._util import _as_int, _iso_duration_seconds

if TYPE_CHECKING:
    from ._pages import VideoPages

__all__ = ["Thumbnail", "Thumbnails", "ChannelRef", "Video", "Channel", "Playlist"]

YOUTUBE_URL = "https://www.youtube.com"


@dataclass(frozen=True)
class Thumbnail:
    url: str
    width: int | None = None
    height: int | None = None


@dataclass(frozen=True)
class Thumbnails:
    entries: tuple[Thumbnail, ...] = ()

    @classmethod
    def from_resource(cls, thumbs: Mapping[str, Any] | None) -> "Thumbnails":
        entries = tuple(
            Thumbnail(url=t["url"], width=_as_int(t.get("width")), height=_as_int(t.get("height")))
            for t in (thumbs or {}).values()
            if t.get("url")
        )
        return cls(entries)

    @property
    def best(self) -> str | None:
        """URL of the widest thumbnail, ``None`` when there is none."""
        if not self.entries:
            return None
        return max(self.entries, key=lambda t: t.width or 0).url


@dataclass(frozen=True)
class ChannelRef:
    id: str | None
    name: str | None


@dataclass(frozen=True)
class Video:
    id: str
    title: str | None = None
    description: str | None = None
    thumbnails: Thumbnails = field(default_factory=Thumbnails)
    channel: ChannelRef = field(default_factory=lambda: ChannelRef(None, None))
    view_count: int | None = None
    like_count: int | None = None
    upload_date: str | None = None
    duration: int | None = None
    tags: tuple[str, ...] = ()

    @classmethod
    def from_resource(cls, item: Mapping[str, Any]) -> "Video":
        """Build from a **videos.list** item (``snippet``, ``statistics``, ``contentDetails``)."""
        snippet = item.get("snippet", {})
        stats = item.get("statistics", {})
        details = item.get("contentDetails", {})
        return cls(
            id=item["id"],
            title=snippet.get("title"),
            description=snippet.get("description"),
            thumbnails=Thumbnails.from_resource(snippet.get("thumbnails")),
            channel=ChannelRef(snippet.get("channelId"), snippet.get("channelTitle")),
            view_count=_as_int(stats.get("viewCount")),
            like_count=_as_int(stats.get("likeCount")),
            upload_date=snippet.get("publishedAt"),
            duration=_iso_duration_seconds(details.get("duration")),
            tags=tuple(snippet.get("tags", ())),
        )


@dataclass(frozen=True)
class Channel:
    id: str
    name: str | None = None
    custom_url: str | None = None
    thumbnails: Thumbnails = field(default_factory=Thumbnails)
    banner: str | None = None
    subscriber_count: int | None = None
    uploads_playlist_id: str | None = None
    videos: VideoPages | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_resource(cls, item: Mapping[str, Any], videos: VideoPages | None = None) -> "Channel":
        """Build from a **channels.list** item.

        Hidden subscriber counts are reported as ``None`` rather than ``0``.
        """
        snippet = item.get("snippet", {})
        stats = item.get("statistics", {})
        related = item.get("contentDetails", {}).get("relatedPlaylists", {})
        image = item.get("brandingSettings", {}).get("image", {})
        hidden = stats.get("hiddenSubscriberCount", False)
        return cls(
            id=item["id"],
            name=snippet.get("title"),
            custom_url=snippet.get("customUrl"),
            thumbnails=Thumbnails.from_resource(snippet.get("thumbnails")),
            banner=image.get("bannerExternalUrl"),
            subscriber_count=None if hidden else _as_int(stats.get("subscriberCount")),
            uploads_playlist_id=related.get("uploads"),
            videos=videos,
        )

    @property
    def url(self) -> str:
        if self.custom_url:
            return f"{YOUTUBE_URL}/{self.custom_url}"
        return f"{YOUTUBE_URL}/channel/{self.id}"


@dataclass(frozen=True)
class Playlist:
    id: str
    title: str | None = None
    channel: ChannelRef = field(default_factory=lambda: ChannelRef(None, None))
    video_count: int | None = None
    videos: VideoPages | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_resource(cls, item: Mapping[str, Any], videos: VideoPages | None = None) -> "Playlist":
        snippet = item.get("snippet", {})
        return cls(
            id=item["id"],
            title=snippet.get("title"),
            channel=ChannelRef(snippet.get("channelId"), snippet.get("channelTitle")),
            video_count=_as_int(item.get("contentDetails", {}).get("itemCount")),
            videos=videos,
        )
