from typing import Any


def get_field(node: Any, *segments: str) -> Any:
    """
    Walk a JSON-like tree one key at a time.

    A missing key yields None rather than raising. List nodes are mapped, not
    indexed: get_field(track, "artists", "name") returns every artist's name.
    """
    if not segments:
        return node
    if isinstance(node, list):
        return [get_field(item, *segments) for item in node]
    if not isinstance(node, dict):
        return None
    head, *rest = segments
    if head not in node:
        return None
    return get_field(node[head], *rest)


def get_path(node: Any, path: str) -> Any:
    """Dotted-path form of get_field, e.g. get_path(result, "tracks.items")."""
    return get_field(node, *path.split("."))
