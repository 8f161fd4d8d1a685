import logging
import threading
from typing import Protocol

from pydantic import ValidationError

from tunefinder import playback
from tunefinder.candidates import VIEWS, build_candidates
from tunefinder.config import DEFAULT_VIEW, MIN_QUERY_LENGTH
from tunefinder.models import ActionOutcome, Candidate, SearchOutcome, Track
from tunefinder.spotify_client import CatalogError

logger = logging.getLogger(__name__)

PLAY_TRACK = "Play Track"
PLAY_ALBUM = "Play Album"
SHOW_METADATA = "Show Metadata"
ACTIONS = (PLAY_TRACK, PLAY_ALBUM, SHOW_METADATA)


class Catalog(Protocol):
    def search_tracks(self, query: str) -> dict: ...


class SearchSession:
    """
    Glue between a fuzzy-selection host and the search/playback core.

    The host calls search() on every refresh and run_action() once the user
    picks a candidate. Results are sequenced: when a slower, older query
    finishes after a newer one was issued, its results are marked stale and
    never replace the current candidate list.
    """

    def __init__(
        self,
        catalog: Catalog,
        platform: str | None = None,
        view: str = DEFAULT_VIEW,
        min_query_length: int = MIN_QUERY_LENGTH,
    ):
        if view not in VIEWS:
            raise ValueError(f"Unknown view {view!r}; expected one of {sorted(VIEWS)}")
        self.catalog = catalog
        self.platform = platform or playback.detect_platform()
        self.view = view
        self.min_query_length = min_query_length
        self.candidates: list[Candidate] = []
        self._sequence = 0
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(self, query: str, view: str | None = None) -> SearchOutcome:
        view = view or self.view
        if view not in VIEWS:
            raise ValueError(f"Unknown view {view!r}; expected one of {sorted(VIEWS)}")

        with self._lock:
            self._sequence += 1
            sequence = self._sequence
            if len(query) < self.min_query_length:
                # Too short to send, but still supersedes any query in flight.
                self.candidates = []
                return SearchOutcome(query=query, sequence=sequence)

        error = None
        try:
            result = self.catalog.search_tracks(query)
            candidates = build_candidates(result, view)
        except (CatalogError, ValidationError) as exc:
            logger.warning("Query #%d '%s' failed: %s", sequence, query, exc)
            error = str(exc) or exc.__class__.__name__
            candidates = []

        with self._lock:
            if sequence != self._sequence:
                logger.info("Discarding stale results for query #%d '%s'.", sequence, query)
                return SearchOutcome(query=query, sequence=sequence, stale=True)
            self.candidates = candidates

        return SearchOutcome(query=query, sequence=sequence, candidates=candidates, error=error)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    @staticmethod
    def actions_for(track: Track) -> list[str]:
        """Actions to offer for a candidate; play actions need a URI."""
        actions = []
        if track.track_uri:
            actions.append(PLAY_TRACK)
        if track.album_uri:
            actions.append(PLAY_ALBUM)
        actions.append(SHOW_METADATA)
        return actions

    def run_action(self, action: str, track: Track) -> ActionOutcome:
        if action == SHOW_METADATA:
            return ActionOutcome(action=action, metadata=track.model_dump())

        if action == PLAY_TRACK:
            uri = track.track_uri
        elif action == PLAY_ALBUM:
            uri = track.album_uri
        else:
            raise ValueError(f"Unknown action {action!r}; expected one of {list(ACTIONS)}")

        if not uri:
            logger.warning("'%s' has no URI for %s", track.name, action)
            return ActionOutcome(action=action, notice=f"'{track.name}' has no URI for {action}")

        outcome = playback.play(uri, self.platform)
        return ActionOutcome(action=action, playback=outcome, notice=outcome.notice)
