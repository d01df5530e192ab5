"""Decide which repository files look like API sources and what kind they are."""

from api_doc_agent.source.base import RepoEntry

SOURCE_SUFFIXES = (".ts", ".tsx", ".js", ".jsx", ".mjs")
API_DIRECTORIES = ("/api/", "/routes/", "/controllers/")


def is_api_source(path: str) -> bool:
    """True for script sources living under an api/, routes/ or controllers/ directory."""
    lowered = path.lower()
    return lowered.endswith(SOURCE_SUFFIXES) and any(d in lowered for d in API_DIRECTORIES)


def select_api_files(entries: list[RepoEntry], limit: int) -> list[RepoEntry]:
    """Keep API source files in listing order, at most ``limit`` of them."""
    selected = [e for e in entries if e.type == "file" and is_api_source(e.path)]
    return selected[:limit]


def determine_file_type(path: str) -> str:
    """Human-readable label for an API file, judged from its path alone.

    Returns: 'API Specification', 'V1 API Route', 'API Route', 'Controller',
    'Service' or 'API Definition'.
    """
    if "/api/" in path:
        if ".spec." in path:
            return "API Specification"
        if "/v1/" in path:
            return "V1 API Route"
        return "API Route"
    if "controller" in path:
        return "Controller"
    if "service" in path:
        return "Service"
    return "API Definition"
