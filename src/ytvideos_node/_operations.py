"""Operations of the node: the closed operation set, one parameter struct
per operation, and the record mappers that flatten entities for output."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Final, Union

from ._description import NODE_DESCRIPTION, parameter_default
from ._errors import InvalidParameterError, UnknownOperationError
from ._models import Channel, Playlist, Video

if TYPE_CHECKING:
    from ._client import MetadataClient
    from ._parameters import ParameterResolver

__all__ = [
    "Operation",
    "ChannelVideosParams",
    "PlaylistVideosParams",
    "SearchVideosParams",
    "GetVideoParams",
    "GetChannelParams",
    "GetPlaylistParams",
    "OperationParams",
    "resolve_params",
    "run_operation",
    "video_summary",
    "video_detail",
    "channel_detail",
    "playlist_stub",
]

# extra pages loaded after the initial playlist page
PLAYLIST_EXTRA_PAGES: Final[int] = 1


def _normalise(value: str) -> str:
    return "_".join(value.strip().lower().replace("-", " ").split())


class Operation(str, Enum):
    channel = "channel"
    playlist = "playlist"
    search = "search"
    get_video = "get_video"
    get_channel = "get_channel"
    get_playlist = "get_playlist"

    @classmethod
    def coerce(cls, value: "Operation | str") -> "Operation":
        """Accept a member, its value, or its display name ("Load Channel Videos")."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise UnknownOperationError(f"operation must be a string, got {type(value).__name__}")
        raw = _normalise(value)
        try:
            return cls(raw)
        except ValueError:
            pass
        if raw in _ALIASES:
            return _ALIASES[raw]
        raise UnknownOperationError(
            f"Unknown operation {value!r}. Valid: {[e.value for e in cls]}"
        )


_ALIASES: Final[dict[str, Operation]] = {
    _normalise(opt["name"]): Operation(opt["value"])
    for opt in NODE_DESCRIPTION["properties"][0]["options"]
}


# ---------------------------------------------------------------------------
# Parameter reading
# ---------------------------------------------------------------------------

def _string_param(resolver: ParameterResolver, name: str, item_index: int) -> str:
    value = resolver.get_parameter(name, item_index, parameter_default(name))
    if value is None:
        value = ""
    if not isinstance(value, str):
        raise InvalidParameterError(f"{name} must be a string, got {type(value).__name__}")
    value = value.strip()
    if not value:
        raise InvalidParameterError(f"{name} is required")
    return value


def _count_param(resolver: ParameterResolver, name: str, item_index: int) -> int:
    value = resolver.get_parameter(name, item_index, parameter_default(name))
    if isinstance(value, bool):
        raise InvalidParameterError(f"{name} must be a number, got bool")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidParameterError(f"{name}={value!r} is not a whole number") from None
    elif isinstance(value, float):
        if not value.is_integer():
            raise InvalidParameterError(f"{name}={value!r} is not a whole number")
        value = int(value)
    elif not isinstance(value, int):
        raise InvalidParameterError(f"{name} must be a number, got {type(value).__name__}")
    if value < 0:
        raise InvalidParameterError(f"{name} must be >= 0, got {value}")
    return value


@dataclass(frozen=True)
class ChannelVideosParams:
    channel_id: str
    operation = Operation.channel

    @classmethod
    def from_resolver(cls, resolver: ParameterResolver, item_index: int) -> "ChannelVideosParams":
        return cls(_string_param(resolver, "channel_id", item_index))


@dataclass(frozen=True)
class PlaylistVideosParams:
    playlist_id: str
    operation = Operation.playlist

    @classmethod
    def from_resolver(cls, resolver: ParameterResolver, item_index: int) -> "PlaylistVideosParams":
        return cls(_string_param(resolver, "playlist_id", item_index))


@dataclass(frozen=True)
class SearchVideosParams:
    keywords: str
    page_count: int = 1
    operation = Operation.search

    @classmethod
    def from_resolver(cls, resolver: ParameterResolver, item_index: int) -> "SearchVideosParams":
        return cls(
            _string_param(resolver, "keywords", item_index),
            _count_param(resolver, "pageCount", item_index),
        )


@dataclass(frozen=True)
class GetVideoParams:
    video_id: str
    operation = Operation.get_video

    @classmethod
    def from_resolver(cls, resolver: ParameterResolver, item_index: int) -> "GetVideoParams":
        return cls(_string_param(resolver, "video_id", item_index))


@dataclass(frozen=True)
class GetChannelParams:
    channel_id: str
    operation = Operation.get_channel

    @classmethod
    def from_resolver(cls, resolver: ParameterResolver, item_index: int) -> "GetChannelParams":
        return cls(_string_param(resolver, "channel_id", item_index))


@dataclass(frozen=True)
class GetPlaylistParams:
    playlist_id: str
    operation = Operation.get_playlist

    @classmethod
    def from_resolver(cls, resolver: ParameterResolver, item_index: int) -> "GetPlaylistParams":
        return cls(_string_param(resolver, "playlist_id", item_index))


OperationParams = Union[
    ChannelVideosParams,
    PlaylistVideosParams,
    SearchVideosParams,
    GetVideoParams,
    GetChannelParams,
    GetPlaylistParams,
]

_PARAMS: Final[dict[Operation, type]] = {
    Operation.channel: ChannelVideosParams,
    Operation.playlist: PlaylistVideosParams,
    Operation.search: SearchVideosParams,
    Operation.get_video: GetVideoParams,
    Operation.get_channel: GetChannelParams,
    Operation.get_playlist: GetPlaylistParams,
}


def resolve_params(resolver: ParameterResolver, item_index: int) -> OperationParams:
    """Read ``operation`` and that operation's parameters for one item."""
    operation = Operation.coerce(
        resolver.get_parameter("operation", item_index, parameter_default("operation"))
    )
    return _PARAMS[operation].from_resolver(resolver, item_index)


# ---------------------------------------------------------------------------
# Record mappers
# ---------------------------------------------------------------------------

def video_summary(video: Video) -> dict[str, Any]:
    return {
        "id": video.id,
        "title": video.title,
        "description": video.description,
        "thumbnail": video.thumbnails.best,
        "channel": {"id": video.channel.id, "name": video.channel.name},
        "viewCount": video.view_count,
        "uploadDate": video.upload_date,
        "duration": video.duration,
    }


def video_detail(video: Video) -> dict[str, Any]:
    return {
        "id": video.id,
        "title": video.title,
        "description": video.description,
        "thumbnail": video.thumbnails.best,
        "channel": {"id": video.channel.id, "name": video.channel.name},
        "viewCount": video.view_count,
        "likeCount": video.like_count,
        "uploadDate": video.upload_date,
        "tags": list(video.tags),
    }


def channel_detail(channel: Channel) -> dict[str, Any]:
    return {
        "id": channel.id,
        "name": channel.name,
        "thumbnail": channel.thumbnails.best,
        "url": channel.url,
        "banner": channel.banner,
        "subscriberCount": channel.subscriber_count,
    }


def playlist_stub(playlist: Playlist) -> dict[str, Any]:
    return {"id": playlist.id, "title": playlist.title}


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def _load_channel_videos(client: MetadataClient, params: ChannelVideosParams) -> list[dict[str, Any]]:
    channel = client.get_channel(params.channel_id)
    if channel is None or channel.videos is None:
        return []
    return [video_summary(v) for v in channel.videos.items]


def _load_playlist_videos(client: MetadataClient, params: PlaylistVideosParams) -> list[dict[str, Any]]:
    playlist = client.get_playlist(params.playlist_id)
    if playlist is None or playlist.videos is None:
        return []
    videos = playlist.videos
    return [video_summary(v) for v in [*videos.items, *videos.next(PLAYLIST_EXTRA_PAGES)]]


def _search_videos(client: MetadataClient, params: SearchVideosParams) -> list[dict[str, Any]]:
    results = client.search(params.keywords, kind="video")
    return [video_summary(v) for v in [*results.items, *results.next(params.page_count)]]


def _get_video(client: MetadataClient, params: GetVideoParams) -> list[dict[str, Any]]:
    video = client.get_video(params.video_id)
    return [video_detail(video)] if video is not None else []


def _get_channel(client: MetadataClient, params: GetChannelParams) -> list[dict[str, Any]]:
    channel = client.get_channel(params.channel_id)
    return [channel_detail(channel)] if channel is not None else []


def _get_playlist(client: MetadataClient, params: GetPlaylistParams) -> list[dict[str, Any]]:
    playlist = client.get_playlist(params.playlist_id)
    return [playlist_stub(playlist)] if playlist is not None else []


_HANDLERS: Final[dict[Operation, Callable[[Any, Any], list[dict[str, Any]]]]] = {
    Operation.channel: _load_channel_videos,
    Operation.playlist: _load_playlist_videos,
    Operation.search: _search_videos,
    Operation.get_video: _get_video,
    Operation.get_channel: _get_channel,
    Operation.get_playlist: _get_playlist,
}

if set(_HANDLERS) != set(Operation) or set(_PARAMS) != set(Operation):
    raise RuntimeError("every Operation needs a parameter struct and a handler")


def run_operation(client: MetadataClient, params: OperationParams) -> list[dict[str, Any]]:
    """Perform one operation and return its output records in retrieval order."""
    return _HANDLERS[params.operation](client, params)
