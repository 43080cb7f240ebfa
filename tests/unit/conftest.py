import json
from pathlib import Path

import pytest

DATA = Path(__file__).resolve().parent.parent / "data"

CAT_CHANNEL = "UCcats000000000000000001"
CAT_UPLOADS = "UUcats000000000000000001"


def load_fixture(name):
    with open(DATA / name, encoding="utf-8") as f:
        return json.load(f)


class FakeResponse:
    def __init__(self, payload, status_code=200, headers=None):
        self._payload = payload
        self.status_code = status_code
        self.headers = headers or {}
        self.text = json.dumps(payload)

    def json(self):
        return self._payload


class FakeSession:
    """Stands in for requests.Session; routes by the last URL segment."""

    def __init__(self, routes):
        self.routes = routes
        self.calls = []
        self.closed = False

    def request(self, method, url, params=None, timeout=None):
        resource = url.rsplit("/", 1)[-1]
        self.calls.append((method, resource, dict(params or {})))
        result = self.routes[resource](dict(params or {}))
        return result if isinstance(result, FakeResponse) else FakeResponse(result)

    def close(self):
        self.closed = True

    def resources(self):
        return [resource for _, resource, _ in self.calls]


def _page(ids, token=None, key="playlist"):
    if key == "search":
        items = [{"id": {"kind": "youtube#video", "videoId": vid}} for vid in ids]
    else:
        items = [{"contentDetails": {"videoId": vid}} for vid in ids]
    out = {"items": items}
    if token:
        out["nextPageToken"] = token
    return out


def default_routes():
    videos = load_fixture("videos.json")["items"]
    channels = load_fixture("channels.json")
    playlists = load_fixture("playlists.json")

    def videos_route(params):
        wanted = set(params["id"].split(","))
        # the API does not promise request order
        return {"items": [v for v in reversed(videos) if v["id"] in wanted]}

    def channels_route(params):
        if params.get("id") == CAT_CHANNEL or params.get("forHandle") == "@catchannel":
            return channels
        return {"items": []}

    def playlists_route(params):
        return playlists if params.get("id") == "PLcats" else {"items": []}

    playlist_pages = {
        ("PLcats", None): _page(["vid1", "vid2"], "T2"),
        ("PLcats", "T2"): _page(["vid3", "gone"], "T3"),
        ("PLcats", "T3"): _page(["vid4"]),
        (CAT_UPLOADS, None): _page(["vid4", "vid1"], "U2"),
        (CAT_UPLOADS, "U2"): _page(["vid2"]),
    }

    def playlist_items_route(params):
        return playlist_pages[(params["playlistId"], params.get("pageToken"))]

    search_pages = {
        None: _page(["vid1", "vid2"], "S2", key="search"),
        "S2": _page(["vid3"], "S3", key="search"),
        "S3": _page(["vid4"], key="search"),
    }

    def search_route(params):
        return search_pages[params.get("pageToken")]

    return {
        "videos": videos_route,
        "channels": channels_route,
        "playlists": playlists_route,
        "playlistItems": playlist_items_route,
        "search": search_route,
    }


@pytest.fixture
def fake_session():
    return FakeSession(default_routes())
