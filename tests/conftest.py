import os

# Use litellm's bundled model cost map instead of fetching it over the network at import.
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from api_doc_agent.errors import ContentSourceError, NotFoundError
from api_doc_agent.generator.base import DocumentationSections
from api_doc_agent.source.base import RepoEntry

FIXTURES = Path(__file__).parent / "fixtures"


class FakeSource:
    """In-memory content source keyed by path."""

    def __init__(self, files: dict[str, str | None], fail_listing: bool = False):
        self.files = files
        self.fail_listing = fail_listing
        self.reads: list[str] = []

    async def list_files(self, owner, repo):
        if self.fail_listing:
            raise ContentSourceError("network unreachable")
        return [RepoEntry(path=path, type="file") for path in self.files]

    async def read_file(self, owner, repo, path):
        self.reads.append(path)
        if self.files.get(path) is None:
            raise NotFoundError(f"Not found: {path}")
        return self.files[path]


def fixture_text(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


@pytest.fixture
def assembler():
    """Assembler stand-in that documents every endpoint without an LLM."""
    mock = MagicMock()
    mock.document = AsyncMock(
        side_effect=lambda candidate, semantic=None: (
            f"Endpoint {candidate.path}",
            DocumentationSections(
                overview="Overview.",
                technical_details="Details.",
                parameters="Params.",
                response_format="Response.",
                error_handling="Errors.",
            ),
        )
    )
    return mock
