import pytest

from conftest import CAT_CHANNEL, FakeResponse, FakeSession, default_routes
from ytvideos_node import (Channel, InvalidRequest, ItemFieldParameters, MetadataClient, NodeOperationError,
                           NodeParameters, Playlist, Video, VideoPages, YoutubeVideosNode)


def _pages(*batches):
    """VideoPages over fixed batches of video ids."""
    batches = [[Video(id=vid, title=vid.upper()) for vid in batch] for batch in batches]

    def fetch(token):
        index = 0 if token is None else int(token)
        next_token = str(index + 1) if index + 1 < len(batches) else None
        return batches[index], next_token

    return VideoPages(fetch)


@pytest.fixture
def client(mocker):
    client = mocker.MagicMock(spec=MetadataClient)
    client.__enter__.return_value = client
    client.__exit__.return_value = False
    return client


@pytest.fixture
def node(client):
    return YoutubeVideosNode(lambda: client)


def _ids(output):
    return [(item.paired_item, item.json.get("id")) for item in output]


def test_search_concatenates_initial_and_extra_pages(node, client):
    client.search.return_value = _pages(["a", "b"], ["c"], ["d", "e"], ["f"])

    out = node.execute([{}], NodeParameters({"operation": "search", "keywords": "cats", "pageCount": 2}))

    assert _ids(out) == [(0, "a"), (0, "b"), (0, "c"), (0, "d"), (0, "e")]
    client.search.assert_called_once_with("cats", kind="video")


def test_playlist_loads_one_extra_page(node, client):
    client.get_playlist.return_value = Playlist(id="PL", title="t", videos=_pages(["a"], ["b"], ["c"]))

    out = node.execute([{}], NodeParameters({"operation": "playlist", "playlist_id": "PL"}))

    assert _ids(out) == [(0, "a"), (0, "b")]


def test_channel_loads_first_page_only(node, client):
    client.get_channel.return_value = Channel(id="UC1", videos=_pages(["a", "b"], ["c"]))

    out = node.execute([{}], NodeParameters({"operation": "channel", "channel_id": "UC1"}))

    assert _ids(out) == [(0, "a"), (0, "b")]
    assert set(out[0].json) == {"id", "title", "description", "thumbnail", "channel",
                                "viewCount", "uploadDate", "duration"}


def test_missing_video_yields_no_records(node, client):
    client.get_video.return_value = None

    out = node.execute([{}], NodeParameters({"operation": "get_video", "video_id": "abc"}))

    assert out == []


def test_missing_channel_and_playlist_yield_no_records(node, client):
    client.get_channel.return_value = None
    client.get_playlist.return_value = None
    items = [
        {"operation": "channel", "channel_id": "UCnope"},
        {"operation": "get_channel", "channel_id": "UCnope"},
        {"operation": "playlist", "playlist_id": "PLnope"},
        {"operation": "get_playlist", "playlist_id": "PLnope"},
    ]

    assert node.execute(items, ItemFieldParameters(items)) == []


def test_output_order_follows_input_order(node, client):
    client.get_video.side_effect = lambda vid: Video(id=vid)
    client.search.return_value = _pages(["s1", "s2"])
    items = [
        {"operation": "get_video", "video_id": "v0"},
        {"operation": "search", "keywords": "k", "pageCount": 0},
        {"operation": "get_video", "video_id": "v2"},
    ]

    out = node.execute(items, ItemFieldParameters(items))

    assert _ids(out) == [(0, "v0"), (1, "s1"), (1, "s2"), (2, "v2")]


def test_abort_reports_failing_index_and_stops(node, client):
    client.get_video.side_effect = [Video(id="ok"), InvalidRequest("boom"), Video(id="never")]
    items = [{"video_id": v} for v in ("ok", "bad", "later")]
    params = ItemFieldParameters(items, fallback=NodeParameters({"operation": "get_video"}))

    with pytest.raises(NodeOperationError) as exc:
        node.execute(items, params)

    assert exc.value.item_index == 1
    assert isinstance(exc.value.__cause__, InvalidRequest)
    assert str(exc.value) == (
        "Error in operation 'get_video' with parameters [operation: get_video, video_id: bad]: boom"
    )
    assert client.get_video.call_count == 2
    client.__exit__.assert_called_once()


def test_continue_on_fail_emits_placeholder_and_continues(node, client):
    client.get_channel.return_value = Channel(id="UC1", name="One")
    client.get_video.side_effect = InvalidRequest("no such video")
    items = [
        {"operation": "get_channel", "channel_id": "UC1"},
        {"operation": "get_video", "video_id": "bad"},
    ]

    out = node.execute(items, ItemFieldParameters(items), continue_on_fail=True)

    assert len(out) == 2
    assert out[0].paired_item == 0
    assert out[0].json["name"] == "One"
    assert not out[0].failed
    assert out[1].paired_item == 1
    assert out[1].failed
    assert out[1].json == {
        "error": "Error in operation 'get_video' with parameters [operation: get_video, video_id: bad]: no such video"
    }


def test_unknown_operation_follows_failure_policy(node, client):
    items = [{"operation": "download"}, {"operation": "get_video", "video_id": "v"}]
    client.get_video.return_value = Video(id="v")

    out = node.execute(items, ItemFieldParameters(items), continue_on_fail=True)

    assert out[0].failed
    assert out[0].json["error"].startswith("Error in operation 'download' with parameters [operation: download]")
    assert _ids(out[1:]) == [(1, "v")]

    with pytest.raises(NodeOperationError) as exc:
        node.execute(items, ItemFieldParameters(items))
    assert exc.value.item_index == 0


def test_invalid_parameter_is_reported_with_raw_values(node, client):
    items = [{"operation": "search", "keywords": "cats", "pageCount": -2}]

    with pytest.raises(NodeOperationError) as exc:
        node.execute(items, ItemFieldParameters(items))

    assert "[operation: search, keywords: cats, pageCount: -2]" in str(exc.value)
    client.search.assert_not_called()


def test_one_client_per_run(mocker, client):
    factory = mocker.Mock(return_value=client)
    client.get_video.return_value = None
    items = [{"video_id": "a"}, {"video_id": "b"}, {"video_id": "c"}]

    YoutubeVideosNode(factory).execute(
        items, ItemFieldParameters(items, fallback=NodeParameters({"operation": "get_video"}))
    )

    factory.assert_called_once_with()
    client.__enter__.assert_called_once()
    client.__exit__.assert_called_once()
    assert client.get_video.call_count == 3


def test_end_to_end_against_fake_api():
    session = FakeSession(default_routes())
    node = YoutubeVideosNode(lambda: MetadataClient(session))
    items = [
        {"operation": "get_channel", "channel_id": CAT_CHANNEL},
        {"operation": "get_video", "video_id": "abc"},
        {"operation": "search", "keywords": "cats", "pageCount": 2},
    ]

    out = node.execute(items, ItemFieldParameters(items))

    assert _ids(out) == [
        (0, CAT_CHANNEL),
        (2, "vid1"), (2, "vid2"), (2, "vid3"), (2, "vid4"),
    ]
    assert out[0].json["subscriberCount"] == 4200
    assert out[1].json["duration"] == 253
    assert session.closed


def test_channel_without_uploads_yields_no_records():
    routes = default_routes()
    routes["playlistItems"] = lambda params: FakeResponse(
        {"error": {"errors": [{"reason": "playlistNotFound"}]}}, status_code=404
    )
    node = YoutubeVideosNode(lambda: MetadataClient(FakeSession(routes)))
    items = [{"operation": "channel", "channel_id": CAT_CHANNEL}]

    out = node.execute(items, ItemFieldParameters(items), continue_on_fail=True)

    assert out == []


def test_missing_playlist_items_still_fail_playlist_operation():
    routes = default_routes()
    routes["playlistItems"] = lambda params: FakeResponse(
        {"error": {"errors": [{"reason": "playlistNotFound"}]}}, status_code=404
    )
    node = YoutubeVideosNode(lambda: MetadataClient(FakeSession(routes)))
    items = [{"operation": "playlist", "playlist_id": "PLcats"}]

    out = node.execute(items, ItemFieldParameters(items), continue_on_fail=True)

    assert len(out) == 1
    assert isinstance(out[0].error, InvalidRequest)
    assert out[0].error.reason == "playlistNotFound"
