"""Core enums, constants, and record types for track resolution.

Enums:
    RequestKind -- How an input string is handled (single URL or free-text query).

Records:
    Track -- Canonical track metadata shared by every provider.
"""

from dataclasses import asdict, dataclass
from enum import StrEnum


class RequestKind(StrEnum):
    SINGLE_URL = "single_url"
    FREE_TEXT_QUERY = "free_text_query"


# yt-dlp writes one "<id>.info.json" per resolved entry
INFO_JSON_SUFFIX = ".info.json"

# Documents with this _type are playlist containers, not media entries
PLAYLIST_TYPE = "playlist"

# YouTube Data API page sizes
PLAYLIST_PAGE_SIZE = 50
SEARCH_PAGE_SIZE = 5

# Result count for yt-dlp text searches ("ytsearch5:", "scsearch5:")
TOOL_SEARCH_COUNT = 5

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v="


@dataclass
class Track:
    """Canonical track record.

    ``duration`` is always a non-negative count of whole seconds.
    ``blacklisted`` and ``obsolete`` belong to the persistence layer once the
    record leaves the resolver; they start out False.
    """

    url: str
    source: str
    track: str | None = None
    artist: str | None = None
    album: str | None = None
    album_art_url: str | None = None
    duration: int = 0
    blacklisted: bool = False
    obsolete: bool = False

    def __post_init__(self) -> None:
        if self.duration < 0:
            self.duration = 0

    def to_dict(self) -> dict:
        return asdict(self)
