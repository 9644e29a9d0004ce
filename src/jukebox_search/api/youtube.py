"""YouTube Data API client with quota-aware key fallback.

Each configured key is tried in order. A 403 (quota exhausted or key
refused) moves on to the next key and restarts the listing + details
pair from scratch. Any other non-200 status aborts the request. When no
key succeeds, or none is configured, the search is handed to yt-dlp.
A playlist fallback gives yt-dlp the playlist URL itself and never
turns into a text search, so it yields the playlist entries or nothing.
No state survives between calls.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import parse_qs, urlsplit

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from ..errors import ApiError
from ..models import (
    PLAYLIST_PAGE_SIZE,
    SEARCH_PAGE_SIZE,
    TOOL_SEARCH_COUNT,
    YOUTUBE_WATCH_URL,
    Track,
)
from ..normalize import info_documents_to_tracks, video_to_track
from ..schemas import ApiPlaylistItemsResponse, ApiSearchResponse, ApiVideoList

if TYPE_CHECKING:
    from ..config import SearchConfig
    from ..ytdlp import YtDlp

log = logger.bind(stage="youtube")

SOURCE = "YOUTUBE"

# Status the API uses for an exhausted quota or a refused key
QUOTA_STATUS = 403


def _split(url: str):
    if "://" not in url:
        url = "https://" + url
    return urlsplit(url)


def playlist_id(url: str) -> str | None:
    """Return the ``list`` query parameter of a YouTube URL, if any."""
    values = parse_qs(_split(url).query).get("list")
    return values[0] if values and values[0] else None


def video_id(url: str) -> str | None:
    """Extract the video id from a youtu.be or youtube.com/watch URL."""
    parts = _split(url)
    host = parts.netloc.lower()
    if host == "youtu.be" or host.endswith(".youtu.be"):
        vid = parts.path.lstrip("/").split("/", 1)[0]
        return vid or None
    values = parse_qs(parts.query).get("v")
    return values[0] if values and values[0] else None


def canonical_url(url: str) -> str:
    """Rewrite a video URL as https://www.youtube.com/watch?v=<id>.

    URLs without a recognizable video id are returned unchanged.
    """
    vid = video_id(url)
    if vid is None:
        return url
    return YOUTUBE_WATCH_URL + vid


class YouTubeClient:
    """Searches YouTube through the Data API, falling back to yt-dlp."""

    def __init__(
        self,
        config: SearchConfig,
        ytdlp: YtDlp,
        http: httpx.Client | None = None,
    ) -> None:
        self.config = config
        self.ytdlp = ytdlp
        # An injected client belongs to the caller and is never closed here
        self._owns_http = http is None
        self.http = http if http is not None else httpx.Client(
            timeout=config.http_timeout,
        )

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def search(self, query: str, is_playlist: bool = False) -> list[Track]:
        """Resolve a text query, or a playlist URL when is_playlist is set.

        Raises ApiError on an unexpected status or transport failure.
        """
        keys = self.config.yt_keys
        if not keys:
            log.info("No YouTube API key configured, using yt-dlp")
            return self._fallback(query, is_playlist)

        log.info(f"Searching {query!r} using YouTube API")
        for idx, key in enumerate(keys, start=1):
            tracks = self._search_with_key(key, query, is_playlist)
            if tracks is not None:
                return tracks
            log.info(f"API key {idx}/{len(keys)} rejected, trying next key")

        log.info("All YouTube API keys rejected, using yt-dlp")
        return self._fallback(query, is_playlist)

    def _search_with_key(
        self,
        key: str,
        query: str,
        is_playlist: bool,
    ) -> list[Track] | None:
        """One listing + details round trip. None means the key was rejected."""
        if is_playlist:
            listing = self._get(
                "playlistItems",
                {
                    "key": key,
                    "part": "snippet",
                    "maxResults": str(PLAYLIST_PAGE_SIZE),
                    "playlistId": playlist_id(query) or query,
                },
                ApiPlaylistItemsResponse,
            )
        else:
            listing = self._get(
                "search",
                {
                    "key": key,
                    "q": query,
                    "part": "snippet",
                    "type": "video",
                    "maxResults": str(SEARCH_PAGE_SIZE),
                },
                ApiSearchResponse,
            )
        if listing is None:
            return None

        ids = listing.video_ids()
        if not ids:
            log.warning(f"Nothing found on YouTube for query {query!r}")
            return []

        details = self._get(
            "videos",
            {
                "key": key,
                "part": "snippet,contentDetails",
                "id": ",".join(ids),
            },
            ApiVideoList,
        )
        if details is None:
            return None

        tracks = [video_to_track(v, SOURCE) for v in details.items]
        log.debug(f"YouTube API returned {len(tracks)} tracks")
        return tracks

    def _get(self, endpoint: str, params: dict[str, str], model: type[BaseModel]):
        """GET an API endpoint and parse it into model. None on quota rejection."""
        url = f"{self.config.api_base_url.rstrip('/')}/{endpoint}"
        try:
            resp = self.http.get(url, params=params)
        except httpx.HTTPError as e:
            raise ApiError(None, f"{endpoint} request failed: {e}") from e

        if resp.status_code == QUOTA_STATUS:
            log.info(f"{endpoint}: quota exceeded or key refused")
            return None
        if resp.status_code != 200:
            raise ApiError(resp.status_code, resp.reason_phrase)

        try:
            return model.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise ApiError(resp.status_code, f"malformed {endpoint} response: {e}") from e

    def _fallback(self, query: str, is_playlist: bool) -> list[Track]:
        if is_playlist:
            docs = self.ytdlp.invoke(query, {"yes-playlist": ""})
        else:
            docs = self.ytdlp.invoke(f"ytsearch{TOOL_SEARCH_COUNT}:{query}")
        return info_documents_to_tracks(docs, SOURCE)
