"""Runtime configuration read from the environment.

Values are read on each call so a ``.env`` file loaded by the CLI (or a test
patching ``os.environ``) takes effect without re-importing.
"""

import os

DEFAULT_MAX_FILES = 15
DEFAULT_GITHUB_API = "https://api.github.com"


def model_name() -> str | None:
    return os.getenv("API_DOC_AGENT_MODEL") or None


def max_files() -> int:
    raw = os.getenv("API_DOC_AGENT_MAX_FILES")
    if not raw:
        return DEFAULT_MAX_FILES
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_MAX_FILES
    return value if value > 0 else DEFAULT_MAX_FILES


def github_token() -> str | None:
    return os.getenv("GITHUB_TOKEN") or None


def github_api_url() -> str:
    return (os.getenv("GITHUB_API_URL") or DEFAULT_GITHUB_API).rstrip("/")


def env_name() -> str:
    return os.getenv("ENV", "dev")


def is_production() -> bool:
    return env_name().lower() in ("prod", "production")


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "WARNING").upper()
