"""Pipeline orchestrator: repository -> API files -> endpoints -> documentation.

Files are processed one after another; the endpoints of a single file are
documented concurrently. A failure inside one file or one endpoint is logged
and skipped, only listing the repository can fail a run.
"""

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from importlib.metadata import PackageNotFoundError, version

from api_doc_agent import config
from api_doc_agent.analyzer.semantic import analyze_endpoint
from api_doc_agent.errors import ContentSourceError, InputError, ParseFailure
from api_doc_agent.generator.base import (
    EndpointDocumentation,
    FileDocumentation,
    RepositoryDocumentation,
    RunMetadata,
)
from api_doc_agent.generator.docs import DocumentationAssembler
from api_doc_agent.generator.examples import examples_for
from api_doc_agent.parser.base import EndpointCandidate, SourceFile, StructuralFacts
from api_doc_agent.parser.detect import determine_file_type, select_api_files
from api_doc_agent.parser.endpoints import extract_endpoints
from api_doc_agent.parser.structure import analyze_structure
from api_doc_agent.source.base import ContentSource, parse_repository_url

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    FETCHING = "fetching"
    FILTERING = "filtering"
    PER_FILE_ANALYSIS = "per_file_analysis"
    AGGREGATING = "aggregating"
    DONE = "done"
    FAILED = "failed"


def _package_version() -> str:
    try:
        return version("api-doc-agent")
    except PackageNotFoundError:
        return "0.0.0"


class DocumentationPipeline:
    """Documents every API endpoint found in a repository."""

    def __init__(
        self,
        source: ContentSource,
        assembler: DocumentationAssembler | None = None,
        max_files: int | None = None,
    ):
        self.source = source
        self.assembler = assembler or DocumentationAssembler()
        self.max_files = max_files or config.max_files()
        self.stage: PipelineStage | None = None

    def _enter(self, stage: PipelineStage) -> None:
        logger.debug("Pipeline stage: %s", stage.value)
        self.stage = stage

    async def run(self, repo_url: str) -> RepositoryDocumentation:
        """Document the repository behind a GitHub URL. Raises InputError if it cannot be listed."""
        self._enter(PipelineStage.FETCHING)
        try:
            owner, repo = parse_repository_url(repo_url)
        except InputError:
            self._enter(PipelineStage.FAILED)
            raise
        return await self.run_for(owner, repo)

    async def run_for(self, owner: str, repo: str) -> RepositoryDocumentation:
        self._enter(PipelineStage.FETCHING)
        logger.info("Starting analysis for repository: %s/%s", owner, repo)
        try:
            entries = await self.source.list_files(owner, repo)
        except ContentSourceError as e:
            self._enter(PipelineStage.FAILED)
            raise InputError(f"Could not list repository {owner}/{repo}: {e}") from e

        self._enter(PipelineStage.FILTERING)
        api_files = select_api_files(entries, self.max_files)
        logger.info("Found %d API-related files", len(api_files))

        self._enter(PipelineStage.PER_FILE_ANALYSIS)
        files: list[FileDocumentation] = []
        for entry in api_files:
            try:
                content = await self.source.read_file(owner, repo, entry.path)
                documented = await self.document_file(SourceFile(path=entry.path, content=content))
            except Exception:
                logger.exception("Error processing file %s", entry.path)
                continue
            if documented is not None:
                files.append(documented)

        self._enter(PipelineStage.AGGREGATING)
        result = RepositoryDocumentation(
            repository=f"{owner}/{repo}",
            files=files,
            generated_at=datetime.now(timezone.utc),
            metadata=RunMetadata(
                version=_package_version(),
                files_scanned=len(api_files),
                files_skipped=len(api_files) - len(files),
            ),
        )
        self._enter(PipelineStage.DONE)
        return result

    async def document_file(self, source_file: SourceFile) -> FileDocumentation | None:
        """Documentation for one file, or None when it is unparseable or has no endpoints."""
        logger.info("Processing file: %s", source_file.path)
        try:
            facts = analyze_structure(source_file.content, source_file.path)
        except ParseFailure as e:
            logger.warning("Skipping %s: %s", source_file.path, e)
            return None

        candidates = extract_endpoints(source_file.content, source_file.path)
        logger.info("Found %d endpoints in %s", len(candidates), source_file.path)
        if not candidates:
            return None

        results = await asyncio.gather(*(self._document_endpoint(c, facts) for c in candidates))
        endpoints = [r for r in results if r is not None]
        if not endpoints:
            return None
        return FileDocumentation(
            path=source_file.path,
            file_type=determine_file_type(source_file.path),
            endpoints=endpoints,
            analysis=facts,
        )

    async def _document_endpoint(
        self, candidate: EndpointCandidate, facts: StructuralFacts
    ) -> EndpointDocumentation | None:
        try:
            logger.info("Analyzing endpoint: %s", candidate.path)
            semantic = analyze_endpoint(candidate, facts)
            title, sections = await self.assembler.document(candidate, semantic)
            security = semantic.analysis.security
            return EndpointDocumentation(
                type=candidate.type,
                path=candidate.path,
                methods=candidate.verbs,
                title=title,
                documentation=sections,
                examples=examples_for(candidate.verbs, candidate.path, security, semantic.analysis.data_flow),
                context=semantic.context,
                analysis=semantic.analysis,
            )
        except Exception:
            logger.exception("Error analyzing endpoint %s", candidate.path)
            return None
