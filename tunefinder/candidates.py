import logging
from typing import Any, Callable

from tunefinder.fields import get_path
from tunefinder.models import Candidate, Track

logger = logging.getLogger(__name__)


def format_duration(duration_ms: int) -> str:
    """185000 -> "3m05s". Minutes are not padded, seconds always are."""
    seconds = duration_ms // 1000
    return f"{seconds // 60}m{seconds % 60:02d}s"


def _artists(track: Track) -> str:
    return "/".join(track.artist_names)


def track_label(track: Track) -> str:
    return (
        f"{track.name} ({format_duration(track.duration_ms)}) "
        f"{_artists(track)} - {track.album_name}"
    )


def album_label(track: Track) -> str:
    return f"{_artists(track)} - {track.album_name}"


VIEWS: dict[str, Callable[[Track], str]] = {
    "track": track_label,
    "album": album_label,
}


def dedupe(pairs: list[tuple[str, Track]]) -> list[tuple[str, Track]]:
    """
    Drop every pair whose label already appeared earlier in the list.

    Comparison is on the rendered label only, so two different songs that
    render identically collapse into the first one.
    """
    kept: list[tuple[str, Track]] = []
    for label, track in pairs:
        if not any(label == seen for seen, _ in kept):
            kept.append((label, track))
    return kept


def tracks_from_result(result: Any) -> list[Track]:
    items = get_path(result, "tracks.items")
    if not isinstance(items, list):
        return []
    return [Track.from_item(item) for item in items if isinstance(item, dict)]


def build_candidates(result: Any, view: str = "track") -> list[Candidate]:
    """Format every search item with the given view and dedupe by label."""
    try:
        render = VIEWS[view]
    except KeyError:
        raise ValueError(f"Unknown view {view!r}; expected one of {sorted(VIEWS)}")

    tracks = tracks_from_result(result)
    pairs = dedupe([(render(t), t) for t in tracks])
    if len(pairs) < len(tracks):
        logger.debug("Dropped %d duplicate label(s).", len(tracks) - len(pairs))
    return [Candidate(label=label, track=track) for label, track in pairs]
