"""Tests for engine.py -- dispatch from input string to provider strategy."""

from unittest.mock import MagicMock

import pytest

from jukebox_search.config import SearchConfig
from jukebox_search.engine import SearchEngine
from jukebox_search.errors import ApiError, ExternalToolError
from jukebox_search.models import Track
from jukebox_search.schemas import InfoDocument


def _info(url: str, title: str = "T", **fields) -> InfoDocument:
    return InfoDocument.model_validate({"webpage_url": url, "title": title, **fields})


@pytest.fixture
def ytdlp():
    m = MagicMock()
    m.invoke.return_value = []
    return m


@pytest.fixture
def youtube():
    m = MagicMock()
    m.search.return_value = []
    return m


@pytest.fixture
def engine(tmp_path, ytdlp, youtube) -> SearchEngine:
    config = SearchConfig(_env_file=None, tmp_path=tmp_path)
    return SearchEngine(config, ytdlp=ytdlp, youtube=youtube)


class TestUnrecognized:
    @pytest.mark.parametrize("text", ["", "   ", "daft punk", "https://example.org/page"])
    def test_returns_empty_without_resolving(self, engine, ytdlp, youtube, text):
        assert engine.resolve(text) == []
        ytdlp.invoke.assert_not_called()
        youtube.search.assert_not_called()


class TestDefaultSingle:
    def test_soundcloud_url_goes_through_ytdlp(self, engine, ytdlp):
        url = "https://soundcloud.com/artist/track"
        ytdlp.invoke.return_value = [_info(url, "Song", uploader="Artist", duration=201.4)]

        tracks = engine.resolve(url)

        ytdlp.invoke.assert_called_once_with(url, {})
        assert tracks == [
            Track(url=url, source="SOUNDCLOUD", track="Song", artist="Artist", duration=201),
        ]

    def test_direct_file(self, engine, ytdlp):
        url = "https://example.org/song.ogg"
        ytdlp.invoke.return_value = [_info(url)]
        tracks = engine.resolve(url)
        assert tracks[0].source == "DIRECT_FILE"

    def test_input_is_stripped(self, engine, ytdlp):
        engine.resolve("  https://www.jamendo.com/track/1/x \n")
        ytdlp.invoke.assert_called_once_with("https://www.jamendo.com/track/1/x", {})

    def test_tool_failure_propagates(self, engine, ytdlp):
        ytdlp.invoke.side_effect = ExternalToolError("yt-dlp", -1, "not found")
        with pytest.raises(ExternalToolError):
            engine.resolve("https://www.twitch.tv/videos/1")


class TestDefaultMultiple:
    def test_soundcloud_query_uses_scsearch(self, engine, ytdlp, youtube):
        ytdlp.invoke.return_value = [_info("https://soundcloud.com/a/b", "Lofi")]
        tracks = engine.resolve("!sc lofi beats")

        ytdlp.invoke.assert_called_once_with("scsearch5:lofi beats", {})
        assert [t.track for t in tracks] == ["Lofi"]
        assert tracks[0].source == "SOUNDCLOUD"
        youtube.search.assert_not_called()


class TestYouTube:
    def test_short_link_is_canonicalized(self, engine, ytdlp, youtube):
        canonical = "https://www.youtube.com/watch?v=abc123"
        ytdlp.invoke.return_value = [_info(canonical, "Video")]

        tracks = engine.resolve("https://youtu.be/abc123?x=1")

        ytdlp.invoke.assert_called_once_with(canonical, {"yes-playlist": ""})
        youtube.search.assert_not_called()
        assert tracks[0].url == canonical
        assert tracks[0].source == "YOUTUBE"

    def test_watch_url_drops_extra_params(self, engine, ytdlp):
        engine.resolve("https://www.youtube.com/watch?v=abc123&t=42")
        target = ytdlp.invoke.call_args[0][0]
        assert target == "https://www.youtube.com/watch?v=abc123"

    def test_playlist_url_uses_api(self, engine, ytdlp, youtube):
        url = "https://www.youtube.com/watch?v=abc&list=PL42"
        youtube.search.return_value = [Track(url="u", source="YOUTUBE")]

        tracks = engine.resolve(url)

        youtube.search.assert_called_once_with(url, is_playlist=True)
        ytdlp.invoke.assert_not_called()
        assert len(tracks) == 1

    def test_query_uses_api_without_sigil(self, engine, ytdlp, youtube):
        engine.resolve("!yt daft punk")
        youtube.search.assert_called_once_with("daft punk", is_playlist=False)
        ytdlp.invoke.assert_not_called()

    def test_api_error_propagates(self, engine, youtube):
        youtube.search.side_effect = ApiError(500, "Internal Server Error")
        with pytest.raises(ApiError):
            engine.resolve("!yt daft punk")


class TestResolveBatch:
    def test_concatenates_in_order(self, engine, ytdlp, youtube):
        ytdlp.invoke.side_effect = [
            [_info("https://soundcloud.com/a/1", "one")],
            [_info("https://soundcloud.com/a/2", "two"), _info("https://soundcloud.com/a/3", "three")],
        ]
        tracks = engine.resolve_batch([
            "https://soundcloud.com/a/1",
            "not a match",
            "!sc two and three",
        ])
        assert [t.track for t in tracks] == ["one", "two", "three"]

    def test_empty_batch(self, engine):
        assert engine.resolve_batch([]) == []


class TestDefaults:
    def test_builds_collaborators_from_config(self, tmp_path):
        config = SearchConfig(_env_file=None, tmp_path=tmp_path, yt_keys=["k"])
        engine = SearchEngine(config)
        assert engine.ytdlp.config is config
        assert engine.youtube.config is config
        assert engine.youtube.ytdlp is engine.ytdlp
        engine.close()
