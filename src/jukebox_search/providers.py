"""Provider catalog and request classification.

The catalog is a fixed, ordered tuple. Order matters: classification
walks it twice (URL patterns first, then query sigils) and the first
match wins, so DIRECT_FILE sits ahead of the hosted providers whose
domains could also serve a ``.mp3`` path.
"""

import re
from dataclasses import dataclass

from loguru import logger

from .models import TOOL_SEARCH_COUNT, RequestKind

log = logger.bind(stage="classify")


def _domain_regex(domain: str) -> re.Pattern[str]:
    """URL pattern for a page hosted on domain (scheme and www optional)."""
    return re.compile(rf"^(https?://)?((www\.)?{domain})/.+$")


@dataclass(frozen=True)
class Provider:
    """One external source of tracks.

    sigil         -- free-text query prefix ("!yt "); None if not searchable
    search_key    -- yt-dlp search prefix used for text queries ("scsearch5:")
    ytdlp_args    -- extra yt-dlp long options as (name, value) pairs
    """

    name: str
    url_regex: re.Pattern[str]
    sigil: str | None = None
    search_key: str | None = None
    ytdlp_args: tuple[tuple[str, str], ...] = ()

    @property
    def query_regex(self) -> re.Pattern[str] | None:
        if self.sigil is None:
            return None
        return re.compile(rf"^{re.escape(self.sigil)}.+$")

    def matches_url(self, text: str) -> bool:
        return self.url_regex.fullmatch(text) is not None

    def matches_query(self, text: str) -> bool:
        regex = self.query_regex
        return regex is not None and regex.fullmatch(text) is not None

    def strip_sigil(self, query: str) -> str:
        if self.sigil is None:
            return query
        return query.removeprefix(self.sigil)

    @property
    def tool_args(self) -> dict[str, str]:
        return dict(self.ytdlp_args)


JAMENDO = Provider("JAMENDO", _domain_regex(r"jamendo\.com"))
TWITCH = Provider("TWITCH", _domain_regex(r"twitch\.tv"))
BANDCAMP = Provider("BANDCAMP", _domain_regex(r"(.+\.)?bandcamp\.com"))
DIRECT_FILE = Provider(
    "DIRECT_FILE",
    re.compile(r"^(https?://)?.*\.(mp3|mp4|ogg|flac|wav|webm)"),
)
SOUNDCLOUD = Provider(
    "SOUNDCLOUD",
    _domain_regex(r"soundcloud\.com"),
    sigil="!sc ",
    search_key=f"scsearch{TOOL_SEARCH_COUNT}:",
)
YOUTUBE = Provider(
    "YOUTUBE",
    _domain_regex(r"youtube\.com|youtu\.be"),
    sigil="!yt ",
    search_key=f"ytsearch{TOOL_SEARCH_COUNT}:",
    ytdlp_args=(("yes-playlist", ""),),
)

CATALOG: tuple[Provider, ...] = (
    JAMENDO,
    TWITCH,
    BANDCAMP,
    DIRECT_FILE,
    SOUNDCLOUD,
    YOUTUBE,
)


@dataclass(frozen=True)
class ResolutionRequest:
    """A raw input string, the provider that owns it, and how to resolve it."""

    raw: str
    kind: RequestKind
    provider: Provider


def build_request(
    text: str,
    catalog: tuple[Provider, ...] = CATALOG,
) -> ResolutionRequest | None:
    """Classify text into a ResolutionRequest.

    URL patterns take strict priority over query sigils; within each pass
    the first catalog entry wins. Returns None when nothing matches.
    """
    for provider in catalog:
        if provider.matches_url(text):
            log.debug(f"{text!r} is a {provider.name} URL")
            return ResolutionRequest(text, RequestKind.SINGLE_URL, provider)
    for provider in catalog:
        if provider.matches_query(text):
            log.debug(f"{text!r} is a {provider.name} query")
            return ResolutionRequest(text, RequestKind.FREE_TEXT_QUERY, provider)
    log.debug(f"No provider matches {text!r}")
    return None


def classify(
    text: str,
    catalog: tuple[Provider, ...] = CATALOG,
) -> Provider | None:
    """Find the provider for an input string, or None if nothing matches."""
    request = build_request(text, catalog)
    return request.provider if request else None
