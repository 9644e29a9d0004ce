"""Typed views of the raw documents the resolver consumes.

Two shapes reach the normalizer:
    InfoDocument -- one yt-dlp ``*.info.json`` file (tool-native schema)
    ApiVideo     -- one entry of a YouTube Data API ``videos`` response

The API listing endpoints (``search`` and ``playlistItems``) only matter for
the video ids they carry, so their models stop at the id.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .models import PLAYLIST_TYPE


class InfoDocument(BaseModel):
    """yt-dlp info document. Only the fields the normalizer reads are typed."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    type: str | None = Field(default=None, alias="_type")
    webpage_url: str | None = None
    title: str | None = None
    track: str | None = None
    artist: str | None = None
    uploader: str | None = None
    album: str | None = None
    thumbnail: str | None = None
    # Seconds as int, float or string depending on the extractor
    duration: Any = None

    @property
    def is_playlist(self) -> bool:
        return self.type == PLAYLIST_TYPE


# -- YouTube Data API v3 --


class ApiThumbnail(BaseModel):
    url: str


class ApiThumbnails(BaseModel):
    model_config = ConfigDict(extra="ignore")

    default: ApiThumbnail | None = None
    medium: ApiThumbnail | None = None
    high: ApiThumbnail | None = None


class ApiSnippet(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    channelTitle: str | None = None
    thumbnails: ApiThumbnails = Field(default_factory=ApiThumbnails)


class ApiContentDetails(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # ISO-8601 period, e.g. "PT4M5S"
    duration: str | None = None


class ApiVideo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    snippet: ApiSnippet = Field(default_factory=ApiSnippet)
    contentDetails: ApiContentDetails = Field(default_factory=ApiContentDetails)


class ApiVideoList(BaseModel):
    model_config = ConfigDict(extra="ignore")

    items: list[ApiVideo] = Field(default_factory=list)


class ApiSearchId(BaseModel):
    model_config = ConfigDict(extra="ignore")

    videoId: str | None = None


class ApiSearchItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: ApiSearchId


class ApiSearchResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    items: list[ApiSearchItem] = Field(default_factory=list)

    def video_ids(self) -> list[str]:
        return [i.id.videoId for i in self.items if i.id.videoId]


class ApiResourceId(BaseModel):
    model_config = ConfigDict(extra="ignore")

    videoId: str | None = None


class ApiPlaylistSnippet(BaseModel):
    model_config = ConfigDict(extra="ignore")

    resourceId: ApiResourceId


class ApiPlaylistItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    snippet: ApiPlaylistSnippet


class ApiPlaylistItemsResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    items: list[ApiPlaylistItem] = Field(default_factory=list)

    def video_ids(self) -> list[str]:
        return [
            i.snippet.resourceId.videoId
            for i in self.items
            if i.snippet.resourceId.videoId
        ]
