"""Repository content source interface and repository identifiers."""

import re
from typing import Literal, Protocol

from pydantic import BaseModel

from api_doc_agent.errors import InputError

GITHUB_URL = re.compile(r"github\.com[/:]([^/\s]+)/([^/\s?#]+)")
SHORTHAND = re.compile(r"^([A-Za-z0-9_.-]+)/([A-Za-z0-9_.-]+)$")


class RepoEntry(BaseModel):
    """One item of a repository listing."""

    path: str
    type: Literal["file", "dir"]


class ContentSource(Protocol):
    """Where repository files come from."""

    async def list_files(self, owner: str, repo: str) -> list[RepoEntry]: ...

    async def read_file(self, owner: str, repo: str, path: str) -> str: ...


def parse_repository_url(url: str) -> tuple[str, str]:
    """Split a GitHub URL (or ``owner/repo`` shorthand) into owner and repo.

    Raises InputError for anything else.
    """
    text = (url or "").strip()
    match = GITHUB_URL.search(text) or SHORTHAND.match(text)
    if not match:
        raise InputError(
            "Invalid GitHub URL format. Please use https://github.com/username/repository"
        )
    owner, repo = match.group(1), match.group(2)
    if repo.endswith(".git"):
        repo = repo[:-4]
    return owner, repo
