import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from tunefinder import playback
from tunefinder.config import LOG_LEVEL, PLATFORM_OVERRIDE
from tunefinder.models import ActionOutcome, PlaybackOutcome, SearchOutcome, Track
from tunefinder.session import SearchSession
from tunefinder.spotify_client import SpotifyClient

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up tunefinder...")
    platform = PLATFORM_OVERRIDE or playback.detect_platform()
    app.state.session = SearchSession(SpotifyClient(), platform=platform)
    if not playback.is_supported(platform):
        logger.warning("Playback is not available on platform %s.", platform)
    logger.info("Search session initialized (platform=%s).", platform)
    yield
    logger.info("Shutting down tunefinder.")


app = FastAPI(
    title="tunefinder",
    description="Search the Spotify catalog and play tracks or albums in the local client.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ActionRequest(BaseModel):
    action: str
    track: Track

    model_config = {
        "json_schema_extra": {
            "examples": [{
                "action": "Play Track",
                "track": {
                    "name": "Hurt",
                    "duration_ms": 177000,
                    "album_name": "Hurt",
                    "artist_names": ["NewJeans"],
                    "track_uri": "spotify:track:xxx",
                    "album_uri": "spotify:album:yyy",
                },
            }]
        }
    }


class PlayRequest(BaseModel):
    uri: str


def _session() -> SearchSession:
    return app.state.session


@app.get("/")
async def root():
    return {"status": "running"}


@app.get("/health")
async def health_check():
    return {"status": "ok", "app": "tunefinder"}


@app.get("/platform")
async def platform_info():
    platform = _session().platform
    return {
        "platform": platform,
        "supported": playback.is_supported(platform),
        "supported_platforms": sorted(playback.PLATFORM_HANDLERS),
    }


@app.get("/search", response_model=SearchOutcome)
def search(q: str = "", view: str | None = None):
    """
    Return deduplicated candidates for the query.

    Queries below the minimum length come back empty without touching the
    catalog. Results superseded by a newer query come back with stale=true.
    """
    try:
        return _session().search(q, view=view)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/actions")
async def list_actions(track: Track):
    """Return the action menu for a selected candidate."""
    return {"actions": SearchSession.actions_for(track)}


@app.post("/action", response_model=ActionOutcome)
def run_action(body: ActionRequest):
    """Run one action (Play Track, Play Album, Show Metadata) on a candidate."""
    try:
        return _session().run_action(body.action, body.track)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/play", response_model=PlaybackOutcome)
def play_uri(body: PlayRequest):
    """Play a resource directly by URI (e.g. spotify:track:xxx)."""
    uri = body.uri.strip()
    if not uri:
        raise HTTPException(status_code=400, detail="Missing URI.")
    return playback.play(uri, _session().platform)
