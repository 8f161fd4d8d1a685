import sys

import requests

from tunefinder.config import BACKEND_URL

TIMEOUT = 30   # Seconds to wait on the backend


def search(query: str, view: str | None = None) -> dict:
    """GET /search and return the parsed SearchOutcome."""
    params = {"q": query}
    if view:
        params["view"] = view
    response = requests.get(f"{BACKEND_URL}/search", params=params, timeout=TIMEOUT)
    response.raise_for_status()
    return response.json()


def actions_for(track: dict) -> list[str]:
    response = requests.post(f"{BACKEND_URL}/actions", json=track, timeout=TIMEOUT)
    response.raise_for_status()
    return response.json()["actions"]


def run_action(action: str, track: dict) -> dict:
    """POST /action for the chosen candidate."""
    response = requests.post(
        f"{BACKEND_URL}/action",
        json={"action": action, "track": track},
        timeout=TIMEOUT,
    )
    response.raise_for_status()
    return response.json()


def _choose(prompt: str, options: list[str]) -> int | None:
    """Print a numbered list and read a 1-based choice. Blank input cancels."""
    for i, option in enumerate(options, 1):
        print(f"  {i:>2}. {option}")
    raw = input(prompt).strip()
    if not raw:
        return None
    if not raw.isdigit() or not 1 <= int(raw) <= len(options):
        print("  Invalid choice.")
        return None
    return int(raw) - 1


def _print_result(result: dict) -> None:
    if result.get("metadata") is not None:
        for key, value in result["metadata"].items():
            print(f"  {key:<13}: {value}")
    elif result.get("notice"):
        print(f"  {result['notice']}")
    elif result.get("playback"):
        print(f"  Sent {result['playback']['uri']} to the player.")
    else:
        print(f"  Response: {result}")


def _run_once(query: str) -> None:
    outcome = search(query)
    if outcome.get("error"):
        print(f"  Search failed: {outcome['error']}")
    candidates = outcome.get("candidates", [])
    if not candidates:
        print("  No results.")
        return

    picked = _choose("Pick a result (Enter to search again): ", [c["label"] for c in candidates])
    if picked is None:
        return
    track = candidates[picked]["track"]

    actions = actions_for(track)
    chosen = _choose("Action: ", actions)
    if chosen is None:
        return
    _print_result(run_action(actions[chosen], track))


if __name__ == "__main__":
    sys.stdout.reconfigure(encoding="utf-8")
    print("=== tunefinder ===")
    print("Type a query and press Enter. Ctrl+C to quit.\n")

    while True:
        try:
            query = input("Search: ")
            _run_once(query)
            print()
        except requests.HTTPError as e:
            print(f"  Backend error: {e.response.text}\n")
        except requests.ConnectionError:
            print(f"  Backend not reachable at {BACKEND_URL}\n")
        except (KeyboardInterrupt, EOFError):
            print("\nGoodbye.")
            break
