"""Resolution facade -- classify an input, run the provider's strategy.

Strategies are looked up per provider name. Providers without an entry
use the defaults: yt-dlp on the URL for single targets, yt-dlp on
"<search_key><query>" for text queries. YouTube overrides both to go
through the Data API client.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from loguru import logger

from .api.youtube import YouTubeClient, canonical_url, playlist_id
from .models import RequestKind, Track
from .normalize import info_documents_to_tracks
from .providers import CATALOG, Provider, build_request
from .ytdlp import YtDlp

if TYPE_CHECKING:
    from .config import SearchConfig

log = logger.bind(stage="engine")

Strategy = Callable[[Provider, str], list[Track]]


class SearchEngine:
    """Turns URLs and "!xx query" strings into canonical Track records."""

    def __init__(
        self,
        config: SearchConfig,
        ytdlp: YtDlp | None = None,
        youtube: YouTubeClient | None = None,
        catalog: tuple[Provider, ...] = CATALOG,
    ) -> None:
        self.config = config
        self.catalog = catalog
        self.ytdlp = ytdlp or YtDlp(config)
        self.youtube = youtube or YouTubeClient(config, self.ytdlp)
        self._single: dict[str, Strategy] = {"YOUTUBE": self._youtube_single}
        self._multiple: dict[str, Strategy] = {"YOUTUBE": self._youtube_multiple}

    def close(self) -> None:
        self.youtube.close()

    def resolve(self, text: str) -> list[Track]:
        """Resolve one input string. Unrecognized input yields []."""
        request = build_request(text.strip(), self.catalog)
        if request is None:
            log.info(f"No provider recognizes {text!r}")
            return []
        provider = request.provider

        if request.kind == RequestKind.SINGLE_URL:
            tracks = self.resolve_single(provider, request.raw)
        else:
            tracks = self.resolve_multiple(provider, request.raw)
        log.info(f"Resolved {request.raw!r} via {provider.name}: {len(tracks)} track(s)")
        return tracks

    def resolve_batch(self, inputs: Iterable[str]) -> list[Track]:
        """Resolve several inputs in order and concatenate the results."""
        tracks: list[Track] = []
        for text in inputs:
            tracks.extend(self.resolve(text))
        return tracks

    def resolve_single(self, provider: Provider, url: str) -> list[Track]:
        strategy = self._single.get(provider.name, self._default_single)
        return strategy(provider, url)

    def resolve_multiple(self, provider: Provider, query: str) -> list[Track]:
        strategy = self._multiple.get(provider.name, self._default_multiple)
        return strategy(provider, query)

    # -- default strategies --

    def _default_single(self, provider: Provider, url: str) -> list[Track]:
        docs = self.ytdlp.invoke(url, provider.tool_args)
        return info_documents_to_tracks(docs, provider.name)

    def _default_multiple(self, provider: Provider, query: str) -> list[Track]:
        if provider.search_key is None:
            raise ValueError(f"{provider.name} does not support text search")
        target = provider.search_key + provider.strip_sigil(query)
        docs = self.ytdlp.invoke(target, provider.tool_args)
        return info_documents_to_tracks(docs, provider.name)

    # -- YouTube --

    def _youtube_single(self, provider: Provider, url: str) -> list[Track]:
        if playlist_id(url):
            return self.youtube.search(url, is_playlist=True)
        return self._default_single(provider, canonical_url(url))

    def _youtube_multiple(self, provider: Provider, query: str) -> list[Track]:
        return self.youtube.search(provider.strip_sigil(query), is_playlist=False)
