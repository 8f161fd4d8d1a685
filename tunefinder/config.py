from dotenv import load_dotenv
import os

load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), "..", ".env"), override=True)

CATALOG_API_URL = os.getenv("CATALOG_API_URL", "https://api.spotify.com/v1/")
SPOTIFY_ACCESS_TOKEN = os.getenv("SPOTIFY_ACCESS_TOKEN") or None
SEARCH_LIMIT = int(os.getenv("SEARCH_LIMIT", "20"))
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "5"))
DEFAULT_VIEW = os.getenv("DEFAULT_VIEW", "track")
PLATFORM_OVERRIDE = os.getenv("PLATFORM_OVERRIDE") or None
BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8000")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Queries shorter than this are never sent to the catalog.
MIN_QUERY_LENGTH = 2
