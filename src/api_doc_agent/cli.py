"""CLI entry point for api-doc-agent."""

import asyncio
import json
import logging
import traceback
from pathlib import Path

import click
import yaml
from dotenv import load_dotenv

from api_doc_agent import config
from api_doc_agent.analyzer.semantic import analyze_endpoint
from api_doc_agent.errors import DocAgentError, ParseFailure
from api_doc_agent.generator.base import RepositoryDocumentation
from api_doc_agent.generator.docs import DocumentationAssembler
from api_doc_agent.generator.summary import format_endpoint_documentation
from api_doc_agent.parser.endpoints import extract_endpoints
from api_doc_agent.parser.structure import analyze_structure
from api_doc_agent.pipeline import DocumentationPipeline
from api_doc_agent.source.github import GitHubSource
from api_doc_agent.source.local import LocalSource


def _configure_logging(verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = getattr(logging, config.log_level(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("LiteLLM").setLevel(logging.WARNING)


def _fail(error: DocAgentError):
    """Turn a fatal pipeline error into a non-zero exit; tracebacks only outside production."""
    if not config.is_production():
        click.echo(traceback.format_exc(), err=True)
    raise click.ClickException(str(error))


def _dump(data: dict, fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _write(doc: RepositoryDocumentation, output: Path, fmt: str) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(_dump(doc.model_dump(mode="json"), fmt), encoding="utf-8")
    endpoint_count = sum(len(f.endpoints) for f in doc.files)
    click.echo(f"Documented {endpoint_count} endpoints in {len(doc.files)} files.")
    click.echo(f"Documentation saved to {output}")


def _infer_format(output: Path, fmt: str | None) -> str:
    if fmt:
        return fmt
    return "yaml" if output.suffix.lower() in (".yaml", ".yml") else "json"


async def _run_github(repo_url: str, model: str | None, max_files: int | None, ref: str | None) -> RepositoryDocumentation:
    async with GitHubSource(ref=ref) as source:
        pipeline = DocumentationPipeline(source, DocumentationAssembler(model=model), max_files=max_files)
        return await pipeline.run(repo_url)


async def _run_local(directory: Path, model: str | None, max_files: int | None) -> RepositoryDocumentation:
    pipeline = DocumentationPipeline(LocalSource(directory), DocumentationAssembler(model=model), max_files=max_files)
    return await pipeline.run_for("local", directory.resolve().name)


@click.group()
@click.version_option(package_name="api-doc-agent")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v info, -vv debug).")
def main(verbose: int):
    """API Doc Agent: discover API endpoints in source code and document them."""
    load_dotenv()
    _configure_logging(verbose)


@main.command()
@click.argument("repo_url")
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the documentation record.")
@click.option("--format", "fmt", default=None, type=click.Choice(["json", "yaml"]), help="Output format (default: from file extension).")
@click.option("--model", default=None, help="LLM model to use.")
@click.option("--max-files", default=None, type=click.IntRange(min=1), help="Maximum number of API files to analyze.")
@click.option("--ref", default=None, help="Branch, tag or commit (default: the repository's default branch).")
def generate(repo_url: str, output: Path, fmt: str | None, model: str | None, max_files: int | None, ref: str | None):
    """Generate documentation for a GitHub repository."""
    click.echo(f"Analyzing {repo_url}...")
    try:
        doc = asyncio.run(_run_github(repo_url, model, max_files, ref))
    except DocAgentError as e:
        _fail(e)
    _write(doc, output, _infer_format(output, fmt))


@main.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the documentation record.")
@click.option("--format", "fmt", default=None, type=click.Choice(["json", "yaml"]), help="Output format (default: from file extension).")
@click.option("--model", default=None, help="LLM model to use.")
@click.option("--max-files", default=None, type=click.IntRange(min=1), help="Maximum number of API files to analyze.")
def scan(directory: Path, output: Path, fmt: str | None, model: str | None, max_files: int | None):
    """Generate documentation for a local checkout."""
    click.echo(f"Scanning {directory}...")
    try:
        doc = asyncio.run(_run_local(directory, model, max_files))
    except DocAgentError as e:
        _fail(e)
    _write(doc, output, _infer_format(output, fmt))


@main.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "fmt", default="json", type=click.Choice(["json", "yaml", "markdown"]), help="Output format.")
def inspect(file_path: Path, fmt: str):
    """Show structure, endpoint candidates and analysis for one file (no LLM calls)."""
    content = file_path.read_text(encoding="utf-8")
    path = file_path.as_posix()
    try:
        facts = analyze_structure(content, path)
    except ParseFailure as e:
        raise click.ClickException(str(e))

    endpoints = []
    summaries = []
    for candidate in extract_endpoints(content, path):
        semantic = analyze_endpoint(candidate, facts)
        endpoints.append({**candidate.model_dump(mode="json"), **semantic.model_dump(mode="json")})
        summaries.append(format_endpoint_documentation(semantic))

    if fmt == "markdown":
        click.echo("\n---\n\n".join(summaries), nl=False)
        return

    click.echo(_dump({"path": path, "structure": facts.model_dump(mode="json"), "endpoints": endpoints}, fmt), nl=False)
