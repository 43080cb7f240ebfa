"""
ytvideos_node – a batch node that fetches YouTube channel, playlist, search
and video metadata and flattens it into records.

Import the public surface like so:

    from ytvideos_node import YoutubeVideosNode, NodeParameters

Everything else (modules whose names start with “_”) is internal and
subject to change without notice.
"""

from importlib import metadata as _metadata

# ─────────────────────────────────────────────────────────────────────────────
# Re-export PUBLIC objects from the internal implementation modules
# ─────────────────────────────────────────────────────────────────────────────
from ._node import YoutubeVideosNode, detailed_error_message
from ._client import MetadataClient
from ._config import Settings, api_key_session, client_from_settings
from ._items import NodeItem, to_dataframe
from ._models import Video, Channel, Playlist, ChannelRef, Thumbnails
from ._operations import (Operation, ChannelVideosParams, PlaylistVideosParams,
                          SearchVideosParams, GetVideoParams, GetChannelParams,
                          GetPlaylistParams, resolve_params, run_operation)
from ._pages import VideoPages
from ._parameters import ParameterResolver, NodeParameters, ItemFieldParameters
from ._errors import (YTNodeError, YTAPIError, QuotaExceeded, RateLimited, NotAuthorized,
                      Forbidden, InvalidRequest, NodeOperationError, InvalidParameterError,
                      UnknownOperationError, ConfigurationError, raise_for_status)

__all__: list[str] = [
    "YoutubeVideosNode",
    "detailed_error_message",
    "MetadataClient",
    "Settings",
    "api_key_session",
    "client_from_settings",
    "NodeItem",
    "to_dataframe",
    "Video",
    "Channel",
    "Playlist",
    "ChannelRef",
    "Thumbnails",
    "Operation",
    "ChannelVideosParams",
    "PlaylistVideosParams",
    "SearchVideosParams",
    "GetVideoParams",
    "GetChannelParams",
    "GetPlaylistParams",
    "resolve_params",
    "run_operation",
    "VideoPages",
    "ParameterResolver",
    "NodeParameters",
    "ItemFieldParameters",
    "YTNodeError",
    "YTAPIError",
    "QuotaExceeded",
    "RateLimited",
    "NotAuthorized",
    "Forbidden",
    "InvalidRequest",
    "NodeOperationError",
    "InvalidParameterError",
    "UnknownOperationError",
    "ConfigurationError",
    "raise_for_status",
]

# ─────────────────────────────────────────────────────────────────────────────
# Version handling
# ─────────────────────────────────────────────────────────────────────────────
try:
    # Normal installed case – read version from package metadata
    __version__: str = _metadata.version("ytvideos-node")
except _metadata.PackageNotFoundError:
    # Running from a source checkout – fall back to __about__.py
    from .__about__ import __version__  # type: ignore[attr-defined]

# Clean up internal symbol so it doesn’t leak into dir(ytvideos_node)
del _metadata
