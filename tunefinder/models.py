from typing import Any

from pydantic import BaseModel, Field

from tunefinder.fields import get_field


class Track(BaseModel):
    """Flat view over one item of a catalog search result."""

    name: str = ""
    duration_ms: int = Field(default=0, ge=0)
    album_name: str = ""
    artist_names: list[str] = Field(default_factory=list)
    track_uri: str = ""
    album_uri: str = ""

    @classmethod
    def from_item(cls, item: Any) -> "Track":
        artists = get_field(item, "artists", "name")
        if not isinstance(artists, list):
            artists = []
        return cls(
            name=get_field(item, "name") or "",
            duration_ms=get_field(item, "duration_ms") or 0,
            album_name=get_field(item, "album", "name") or "",
            artist_names=[a for a in artists if a],
            track_uri=get_field(item, "uri") or "",
            album_uri=get_field(item, "album", "uri") or "",
        )


class Candidate(BaseModel):
    label: str
    track: Track


class PlaybackOutcome(BaseModel):
    platform: str
    uri: str
    dispatched: bool
    notice: str | None = None


class SearchOutcome(BaseModel):
    query: str
    sequence: int | None = None
    candidates: list[Candidate] = Field(default_factory=list)
    stale: bool = False
    error: str | None = None


class ActionOutcome(BaseModel):
    action: str
    playback: PlaybackOutcome | None = None
    metadata: dict[str, Any] | None = None
    notice: str | None = None
