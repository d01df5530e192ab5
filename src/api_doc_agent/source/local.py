"""Content source over a local checkout."""

from pathlib import Path

from api_doc_agent.errors import ContentSourceError, NotFoundError
from api_doc_agent.source.base import RepoEntry

SKIP_DIRS = {".git", "node_modules", ".next", "dist", "build"}


class LocalSource:
    """Serves files from a directory; ``owner`` and ``repo`` are ignored."""

    def __init__(self, root: Path):
        self.root = Path(root)

    async def list_files(self, owner: str, repo: str) -> list[RepoEntry]:
        if not self.root.is_dir():
            raise NotFoundError(f"Not a directory: {self.root}")
        entries = []
        for path in sorted(self.root.rglob("*")):
            rel = path.relative_to(self.root)
            if SKIP_DIRS.intersection(rel.parts):
                continue
            entries.append(RepoEntry(path=rel.as_posix(), type="dir" if path.is_dir() else "file"))
        return entries

    async def read_file(self, owner: str, repo: str, path: str) -> str:
        target = self.root / path
        try:
            return target.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError as e:
            raise NotFoundError(f"Not found: {path}") from e
        except OSError as e:
            raise ContentSourceError(f"Could not read {path}: {e}") from e
