"""Tests for the Bilibili provider."""

import logging
from typing import Any, Optional
from unittest.mock import AsyncMock

import pytest

from live_resolver.errors import NetworkError, NoTiersAdvertisedError, SchemaMismatchError
from live_resolver.models import LiveNode, NotLive
from live_resolver.providers.bilibili import (
    INFO_URL,
    INIT_URL,
    PLAY_URL,
    BiliQuality,
    BilibiliProvider,
)

from stream_builders import make_codec, make_format, make_play_info, make_stream


def room_init(live_status: Any = 1, room_id: Any = 5440) -> dict[str, Any]:
    return {
        "code": 0,
        "msg": "ok",
        "data": {"room_id": room_id, "short_id": 6, "uid": 9617619, "live_status": live_status},
    }


def room_info(
    title: Optional[str] = "Live title",
    cover: Optional[str] = "https://i0.hdslb.com/cover.jpg",
    uname: Optional[str] = "Anchor",
    face: Optional[str] = "https://i0.hdslb.com/face.jpg",
) -> dict[str, Any]:
    room: dict[str, Any] = {}
    if title is not None:
        room["title"] = title
    if cover is not None:
        room["cover"] = cover
    base: dict[str, Any] = {}
    if uname is not None:
        base["uname"] = uname
    if face is not None:
        base["face"] = face
    return {"code": 0, "data": {"room_info": room, "anchor_info": {"base_info": base}}}


def two_by_one_by_two(accept_qn: list[int]) -> dict[str, Any]:
    """2 formats x 1 codec x 2 CDNs."""
    hosts = [("https://cn-a.bilivideo.com", "?a=1"), ("https://cn-b.bilivideo.com", "?b=1")]
    return make_play_info(
        [
            make_stream(
                [
                    make_format([make_codec("/live/5440.flv", hosts, accept_qn)], "flv"),
                    make_format([make_codec("/live/5440.m3u8", hosts, accept_qn)], "ts"),
                ]
            )
        ]
    )


class MockHttpClient:
    """Mock transport that routes GETs by URL."""

    def __init__(self, routes: dict[str, Any]) -> None:
        self.routes = routes
        self.get_json = AsyncMock(side_effect=self._get_json)
        self.post_json = AsyncMock()

    async def _get_json(
        self,
        url: str,
        params: Optional[dict[str, str]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        route = self.routes[url]
        if isinstance(route, BaseException):
            raise route
        if callable(route):
            return route(params)
        return route

    def calls_to(self, url: str) -> list:
        return [c for c in self.get_json.await_args_list if c.args[0] == url]


def provider_with(routes: dict[str, Any]) -> tuple[BilibiliProvider, MockHttpClient]:
    client = MockHttpClient(routes)
    return BilibiliProvider(client), client  # type: ignore[arg-type]


class TestBiliQuality:
    """Tests for BiliQuality."""

    def test_known_names(self) -> None:
        assert BiliQuality.get_name(10000) == "Original"
        assert BiliQuality.get_name(400) == "Blu-ray"
        assert BiliQuality.get_name(80) == "Smooth"

    def test_unknown_name(self) -> None:
        assert BiliQuality.get_name(30000) == "Unknown (30000)"


class TestLiveness:
    """Tests for the live-status allow-list."""

    @pytest.mark.asyncio
    async def test_offline_returns_not_live(self) -> None:
        """Test live_status 0 yields NotLive with no play-info calls."""
        provider, client = provider_with({INIT_URL: room_init(live_status=0)})

        result = await provider.resolve("6")

        assert isinstance(result, NotLive)
        assert result.room_id == "6"
        assert result.platform == "bilibili"
        assert result.status == 0
        assert client.get_json.await_count == 1
        assert client.calls_to(PLAY_URL) == []

    @pytest.mark.parametrize("live_status", [2, 3, 99, None, "live", True])
    @pytest.mark.asyncio
    async def test_non_broadcasting_statuses(self, live_status: Any) -> None:
        """Test every value other than 1 maps to NotLive."""
        init = room_init(live_status=live_status)
        if live_status is None:
            del init["data"]["live_status"]
        provider, client = provider_with({INIT_URL: init})

        result = await provider.resolve("6")

        assert isinstance(result, NotLive)
        assert client.get_json.await_count == 1

    @pytest.mark.asyncio
    async def test_room_init_without_data(self) -> None:
        provider, _ = provider_with({INIT_URL: {"code": 60004, "msg": "room not found", "data": None}})

        with pytest.raises(SchemaMismatchError) as exc_info:
            await provider.resolve("999999999")

        assert exc_info.value.field == "data"

    @pytest.mark.asyncio
    async def test_live_without_room_id(self) -> None:
        provider, _ = provider_with({INIT_URL: room_init(room_id=None)})

        with pytest.raises(SchemaMismatchError) as exc_info:
            await provider.resolve("6")

        assert exc_info.value.field == "room_id"

    @pytest.mark.asyncio
    async def test_room_init_network_error_propagates(self) -> None:
        provider, _ = provider_with({INIT_URL: NetworkError("HTTP 412", 412)})

        with pytest.raises(NetworkError) as exc_info:
            await provider.resolve("6")

        assert exc_info.value.status == 412


class TestResolve:
    """End-to-end resolution tests."""

    @pytest.mark.asyncio
    async def test_probe_already_best(self) -> None:
        """Test tiers {150, 400, 10000}: one play-info call, 4 URLs."""
        provider, client = provider_with(
            {
                INIT_URL: room_init(),
                PLAY_URL: two_by_one_by_two([150, 400, 10000]),
                INFO_URL: room_info(),
            }
        )

        result = await provider.resolve("6")

        assert isinstance(result, LiveNode)
        assert result.room_id == "5440"
        assert result.quality == 10000
        assert len(result.stream_urls) == 4
        assert result.stream_urls == (
            "https://cn-a.bilivideo.com/live/5440.flv?a=1",
            "https://cn-b.bilivideo.com/live/5440.flv?b=1",
            "https://cn-a.bilivideo.com/live/5440.m3u8?a=1",
            "https://cn-b.bilivideo.com/live/5440.m3u8?b=1",
        )
        # room-init + probe before metadata
        play_calls = client.calls_to(PLAY_URL)
        assert len(play_calls) == 1
        assert play_calls[0].kwargs["params"]["qn"] == "10000"
        assert client.get_json.await_args_list[0].args[0] == INIT_URL
        assert client.get_json.await_args_list[1].args[0] == PLAY_URL

    @pytest.mark.asyncio
    async def test_refine_at_best_tier(self) -> None:
        """Test a capped probe triggers a second play-info call at the max tier."""

        def play(params: dict[str, str]) -> dict[str, Any]:
            if params["qn"] == "10000":
                return two_by_one_by_two([80, 150])
            return make_play_info(
                [
                    make_stream(
                        [
                            make_format(
                                [make_codec("/live/5440_1500.flv", [("https://cdn", "?hd")], [80, 150])]
                            )
                        ]
                    )
                ]
            )

        provider, client = provider_with(
            {INIT_URL: room_init(), PLAY_URL: play, INFO_URL: room_info()}
        )

        result = await provider.resolve("6")

        play_calls = client.calls_to(PLAY_URL)
        assert [c.kwargs["params"]["qn"] for c in play_calls] == ["10000", "150"]
        assert isinstance(result, LiveNode)
        assert result.quality == 150
        assert result.stream_urls == ("https://cdn/live/5440_1500.flv?hd",)

    @pytest.mark.asyncio
    async def test_play_info_params(self) -> None:
        provider, client = provider_with(
            {INIT_URL: room_init(), PLAY_URL: two_by_one_by_two([10000]), INFO_URL: room_info()}
        )

        await provider.resolve("6")

        params = client.calls_to(PLAY_URL)[0].kwargs["params"]
        assert params == {
            "room_id": "5440",
            "protocol": "0,1",
            "format": "0,1,2",
            "codec": "0,1",
            "qn": "10000",
            "platform": "h5",
            "ptype": "8",
        }

    @pytest.mark.asyncio
    async def test_metadata(self) -> None:
        provider, client = provider_with(
            {INIT_URL: room_init(), PLAY_URL: two_by_one_by_two([10000]), INFO_URL: room_info()}
        )

        result = await provider.resolve("6")

        assert isinstance(result, LiveNode)
        assert result.title == "Live title"
        assert result.cover_url == "https://i0.hdslb.com/cover.jpg"
        assert result.anchor_name == "Anchor"
        assert result.anchor_avatar_url == "https://i0.hdslb.com/face.jpg"
        # Metadata is looked up by the resolved id
        assert client.calls_to(INFO_URL)[0].kwargs["params"] == {"room_id": "5440"}

    @pytest.mark.asyncio
    async def test_missing_cover_is_empty(self) -> None:
        provider, _ = provider_with(
            {INIT_URL: room_init(), PLAY_URL: two_by_one_by_two([10000]), INFO_URL: room_info(cover=None)}
        )

        result = await provider.resolve("6")

        assert isinstance(result, LiveNode)
        assert result.cover_url == ""
        assert result.title == "Live title"

    @pytest.mark.asyncio
    async def test_metadata_without_anchor_info(self) -> None:
        provider, _ = provider_with(
            {
                INIT_URL: room_init(),
                PLAY_URL: two_by_one_by_two([10000]),
                INFO_URL: {"code": 0, "data": {"room_info": {"title": "t"}, "anchor_info": None}},
            }
        )

        result = await provider.resolve("6")

        assert isinstance(result, LiveNode)
        assert result.title == "t"
        assert result.anchor_name == ""
        assert result.anchor_avatar_url == ""

    @pytest.mark.asyncio
    async def test_metadata_failure_degrades(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test a failed metadata call keeps the stream URLs."""
        provider, _ = provider_with(
            {
                INIT_URL: room_init(),
                PLAY_URL: two_by_one_by_two([10000]),
                INFO_URL: NetworkError("timed out"),
            }
        )

        with caplog.at_level(logging.WARNING):
            result = await provider.resolve("6")

        assert isinstance(result, LiveNode)
        assert len(result.stream_urls) == 4
        assert result.title == ""
        assert result.cover_url == ""
        assert result.anchor_name == ""
        assert result.anchor_avatar_url == ""
        assert "metadata unavailable" in caplog.text

    @pytest.mark.asyncio
    async def test_missing_base_url_fails(self) -> None:
        play = two_by_one_by_two([10000])
        del play["data"]["playurl_info"]["playurl"]["stream"][0]["format"][1]["codec"][0]["base_url"]
        provider, client = provider_with({INIT_URL: room_init(), PLAY_URL: play, INFO_URL: room_info()})

        with pytest.raises(SchemaMismatchError) as exc_info:
            await provider.resolve("6")

        assert exc_info.value.field == "base_url"
        assert client.calls_to(INFO_URL) == []

    @pytest.mark.asyncio
    async def test_no_streams_fails(self) -> None:
        provider, _ = provider_with(
            {INIT_URL: room_init(), PLAY_URL: make_play_info(None), INFO_URL: room_info()}
        )

        with pytest.raises(NoTiersAdvertisedError):
            await provider.resolve("6")

    @pytest.mark.asyncio
    async def test_headers_forwarded(self) -> None:
        provider, client = provider_with(
            {INIT_URL: room_init(), PLAY_URL: two_by_one_by_two([10000]), INFO_URL: room_info()}
        )
        headers = {"Cookie": "SESSDATA=abc"}

        await provider.resolve("6", headers)

        for call in client.get_json.await_args_list:
            assert call.kwargs["headers"] == headers

    @pytest.mark.asyncio
    async def test_to_dict(self) -> None:
        provider, _ = provider_with(
            {INIT_URL: room_init(), PLAY_URL: two_by_one_by_two([10000]), INFO_URL: room_info()}
        )

        result = await provider.resolve("6")

        d = result.to_dict()
        assert d["live"] is True
        assert d["platform"] == "bilibili"
        assert d["room_id"] == "5440"
        assert len(d["stream_urls"]) == 4
