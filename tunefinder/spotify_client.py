import logging
from typing import Any

import requests
import spotipy

from tunefinder.config import (
    CATALOG_API_URL,
    REQUEST_TIMEOUT,
    SEARCH_LIMIT,
    SPOTIFY_ACCESS_TOKEN,
)

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """A search request that did not produce usable results."""


class NetworkFailure(CatalogError):
    pass


class MalformedResponse(CatalogError):
    pass


class SpotifyClient:
    def __init__(
        self,
        api_url: str = CATALOG_API_URL,
        access_token: str | None = SPOTIFY_ACCESS_TOKEN,
        timeout: float = REQUEST_TIMEOUT,
    ):
        # Failures surface once; spotipy's own retry loop is switched off.
        self.client = spotipy.Spotify(
            auth=access_token,
            requests_timeout=timeout,
            retries=0,
            status_retries=0,
        )
        self.client.prefix = api_url if api_url.endswith("/") else api_url + "/"

    def search_tracks(self, query: str, limit: int = SEARCH_LIMIT) -> dict[str, Any]:
        """
        Run one track search and return the parsed response body.

        Raises NetworkFailure when the request fails and MalformedResponse when
        the body has no tracks.items list.
        """
        try:
            response = self.client.search(q=query, type="track", limit=limit)
        except (spotipy.SpotifyException, requests.RequestException) as exc:
            logger.warning("Search '%s' failed: %s", query, exc)
            raise NetworkFailure(str(exc)) from exc

        if not isinstance(response, dict):
            logger.warning("Search '%s' returned a non-JSON-object body.", query)
            raise MalformedResponse(f"Unexpected response body: {response!r}")

        tracks = response.get("tracks")
        items = tracks.get("items") if isinstance(tracks, dict) else None
        if not isinstance(items, list):
            logger.warning("Search '%s' response is missing tracks.items.", query)
            raise MalformedResponse("Response has no tracks.items list.")

        logger.info("Search '%s' returned %d result(s).", query, len(items))
        return response
