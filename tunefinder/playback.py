import logging
import os
import re
import subprocess
import sys
from types import MappingProxyType
from typing import Callable

from tunefinder.models import PlaybackOutcome

logger = logging.getLogger(__name__)

PlatformHandler = Callable[[str], None]

DARWIN = "darwin"
LINUX = "linux"
WINDOWS = "windows"

SPOTIFY_URI = re.compile(r"spotify:(track|album|artist|playlist):[A-Za-z0-9]+")


def detect_platform(raw: str | None = None) -> str:
    """Normalise sys.platform into a dispatch tag."""
    raw = raw or sys.platform
    if raw.startswith("linux"):
        return LINUX
    if raw in ("win32", "cygwin"):
        return WINDOWS
    return raw


def run_command(argv: list[str]) -> None:
    """Start an external command and return immediately without waiting on it."""
    logger.info("Launching: %s", " ".join(argv))
    try:
        subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as exc:
        logger.warning("Could not launch %s: %s", argv[0], exc)


def open_with_os(uri: str) -> None:
    """Hand a URI to the registered protocol handler (Windows only)."""
    startfile = getattr(os, "startfile", None)
    if startfile is None:
        logger.warning("os.startfile is not available; cannot open %s", uri)
        return
    logger.info("Opening: %s", uri)
    try:
        startfile(uri)
    except OSError as exc:
        logger.warning("Could not open %s: %s", uri, exc)


def applescript_escape(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return escaped.replace("\n", " ").replace("\r", " ")


# ------------------------------------------------------------------
# Platform mechanisms
# ------------------------------------------------------------------

def _play_darwin(uri: str) -> None:
    script = f'tell application "Spotify" to play track "{applescript_escape(uri)}"'
    run_command(["osascript", "-e", script])


def _play_linux(uri: str) -> None:
    run_command([
        "dbus-send",
        "--session",
        "--type=method_call",
        "--dest=org.mpris.MediaPlayer2.spotify",
        "/org/mpris/MediaPlayer2",
        "org.mpris.MediaPlayer2.Player.OpenUri",
        f"string:{uri}",
    ])


def _play_windows(uri: str) -> None:
    open_with_os(uri)
PLATFORM_HANDLERS: MappingProxyType[str, PlatformHandler] = MappingProxyType({
    DARWIN: _play_darwin,
    LINUX: _play_linux,
    WINDOWS: _play_windows,
})


def is_supported(platform: str) -> bool:
    return platform in PLATFORM_HANDLERS


def play(uri: str, platform: str | None = None) -> PlaybackOutcome:
    """
    Send a resource URI to the OS playback channel for the given platform.

    Exactly one handler runs for a known platform tag. For an unknown tag, or
    a URI that is not a plain spotify: identifier, nothing is launched and the
    outcome carries a user-facing notice. Success only means a launch was
    attempted, not that playback started.
    """
    platform = platform or detect_platform()
    handler = PLATFORM_HANDLERS.get(platform)
    if handler is None:
        logger.warning("Platform %s is not supported", platform)
        return PlaybackOutcome(
            platform=platform,
            uri=uri,
            dispatched=False,
            notice=f"Platform {platform} is not supported",
        )

    if not SPOTIFY_URI.fullmatch(uri):
        logger.warning("Refusing to play malformed URI %r", uri)
        return PlaybackOutcome(
            platform=platform,
            uri=uri,
            dispatched=False,
            notice=f"Not a playable Spotify URI: {uri!r}",
        )

    handler(uri)
    logger.info("Dispatched %s to %s handler.", uri, platform)
    return PlaybackOutcome(platform=platform, uri=uri, dispatched=True)
