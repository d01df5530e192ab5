"""GitHub REST API content source (async httpx)."""

from __future__ import annotations

import base64
import binascii
import logging
from urllib.parse import quote

import httpx

from api_doc_agent import config
from api_doc_agent.errors import ContentSourceError, NotFoundError, RateLimitedError
from api_doc_agent.source.base import RepoEntry

logger = logging.getLogger(__name__)


class GitHubSource:
    """Lists and reads repository files through the GitHub API.

    Use as an async context manager, or call ``aclose()`` when done.
    """

    def __init__(
        self,
        token: str | None = None,
        ref: str | None = None,
        api_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.ref = ref
        headers = {"Accept": "application/vnd.github+json"}
        token = token or config.github_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=api_url or config.github_api_url(),
            headers=headers,
            timeout=20,
            transport=transport,
        )
        self._refs: dict[tuple[str, str], str] = {}

    async def __aenter__(self) -> GitHubSource:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, url: str, **params) -> dict | list:
        try:
            response = await self._client.get(url, params=params or None)
        except httpx.HTTPError as e:
            raise ContentSourceError(f"GitHub request failed for {url}: {e}") from e
        _raise_for_status(response, url)
        return response.json()

    async def _resolve_ref(self, owner: str, repo: str) -> str:
        if self.ref:
            return self.ref
        key = (owner, repo)
        if key not in self._refs:
            data = await self._get(f"/repos/{owner}/{repo}")
            self._refs[key] = data.get("default_branch") or "main"
        return self._refs[key]

    async def list_files(self, owner: str, repo: str) -> list[RepoEntry]:
        ref = await self._resolve_ref(owner, repo)
        data = await self._get(f"/repos/{owner}/{repo}/git/trees/{quote(ref, safe='')}", recursive="1")
        if data.get("truncated"):
            logger.warning("Tree listing for %s/%s@%s was truncated by GitHub", owner, repo, ref)
        entries = []
        for item in data.get("tree", []):
            if item.get("type") == "blob":
                entries.append(RepoEntry(path=item["path"], type="file"))
            elif item.get("type") == "tree":
                entries.append(RepoEntry(path=item["path"], type="dir"))
        return entries

    async def read_file(self, owner: str, repo: str, path: str) -> str:
        ref = await self._resolve_ref(owner, repo)
        data = await self._get(f"/repos/{owner}/{repo}/contents/{quote(path)}", ref=ref)
        if not isinstance(data, dict) or "content" not in data:
            raise ContentSourceError(f"{path} is not a file")
        if data.get("encoding", "base64") != "base64":
            raise ContentSourceError(f"{path} has unsupported encoding {data.get('encoding')!r}")
        try:
            return base64.b64decode(data["content"]).decode("utf-8", errors="replace")
        except (binascii.Error, ValueError) as e:
            raise ContentSourceError(f"Could not decode {path}: {e}") from e


def _raise_for_status(response: httpx.Response, url: str) -> None:
    status = response.status_code
    if status < 400:
        return
    if status == 404:
        raise NotFoundError(f"Not found: {url}")
    if status == 429 or (status == 403 and response.headers.get("x-ratelimit-remaining") == "0"):
        raise RateLimitedError(f"GitHub rate limit exceeded while requesting {url}")
    raise ContentSourceError(f"GitHub returned HTTP {status} for {url}")
