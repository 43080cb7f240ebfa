"""Presentation schema of the *YouTube Videos* node.

Pure metadata for hosts that render a parameter form: the operation
options and, for every other property, the operations it is shown for.
The node reads parameter defaults from here.
"""

from __future__ import annotations

from typing import Any, Final

__all__ = ["NODE_DESCRIPTION", "parameter_default", "visible_parameters"]

NODE_DESCRIPTION: Final[dict[str, Any]] = {
    "displayName": "Youtube Videos",
    "name": "youtubeVideosNode",
    "icon": "file:youTube.png",
    "group": ["transform"],
    "version": 1,
    "description": "Youtube Videos Node",
    "defaults": {"name": "Youtube Videos Node"},
    "inputs": ["main"],
    "outputs": ["main"],
    "properties": [
        {
            "displayName": "Operation",
            "name": "operation",
            "type": "options",
            "noDataExpression": True,
            "default": "channel",
            "required": True,
            "options": [
                {"name": "Get Channel", "value": "get_channel"},
                {"name": "Get Playlist", "value": "get_playlist"},
                {"name": "Get Video", "value": "get_video"},
                {"name": "Load Channel Videos", "value": "channel"},
                {"name": "Load Playlist Videos", "value": "playlist"},
                {"name": "Search Videos", "value": "search"},
            ],
        },
        {
            "displayName": "Channel ID",
            "name": "channel_id",
            "type": "string",
            "default": "",
            "placeholder": "Channel ID or @handle",
            "displayOptions": {"show": {"/operation": ["channel", "get_channel"]}},
        },
        {
            "displayName": "Playlist ID",
            "name": "playlist_id",
            "type": "string",
            "default": "",
            "placeholder": "Playlist ID",
            "displayOptions": {"show": {"/operation": ["playlist", "get_playlist"]}},
        },
        {
            "displayName": "Keywords",
            "name": "keywords",
            "type": "string",
            "default": "",
            "placeholder": "Keywords",
            "displayOptions": {"show": {"/operation": ["search"]}},
        },
        {
            "displayName": "Page Count",
            "name": "pageCount",
            "type": "number",
            "default": 1,
            "description": "Additional result pages to load after the first one",
            "displayOptions": {"show": {"/operation": ["search"]}},
        },
        {
            "displayName": "Video ID",
            "name": "video_id",
            "type": "string",
            "default": "",
            "placeholder": "Video ID",
            "displayOptions": {"show": {"/operation": ["get_video"]}},
        },
    ],
}

_PROPERTIES: Final[dict[str, dict[str, Any]]] = {p["name"]: p for p in NODE_DESCRIPTION["properties"]}


def parameter_default(name: str) -> Any:
    """Declared default of property *name*; ``KeyError`` for unknown names."""
    return _PROPERTIES[name]["default"]


def visible_parameters(operation: str) -> list[str]:
    """Names of the properties shown for *operation*, in declaration order."""
    return [
        p["name"] for p in NODE_DESCRIPTION["properties"]
        if operation in p.get("displayOptions", {}).get("show", {}).get("/operation", ())
    ]
