"""Documentation assembler: LLM prose for one endpoint, parsed into five sections."""

import logging
import re
from pathlib import Path

from api_doc_agent.analyzer.base import SemanticResult
from api_doc_agent.errors import ServiceError
from api_doc_agent.generator.base import FALLBACK_TITLE, PLACEHOLDERS, DocumentationSections
from api_doc_agent.llm import LlmClient
from api_doc_agent.parser.base import EndpointCandidate

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"

TITLE_TEMPERATURE = 0.3
TITLE_MAX_TOKENS = 50
ANALYSIS_TEMPERATURE = 0.3
ANALYSIS_MAX_TOKENS = 2000
MAX_SOURCE_CHARS = 12000

SECTION_HEADERS = {
    "OVERVIEW": "overview",
    "TECHNICAL DETAILS": "technical_details",
    "PARAMETERS": "parameters",
    "RESPONSE FORMAT": "response_format",
    "ERROR HANDLING": "error_handling",
}

# Header keyword, optional SECTION, then a colon; tolerates "**", "#", "1." decoration.
_HEADER = re.compile(
    r"^(?P<lead>[ \t>#*_\d.)-]*)"
    r"(?P<name>OVERVIEW|TECHNICAL\s+DETAILS|PARAMETERS|RESPONSE\s+FORMAT|ERROR\s+HANDLING)"
    r"(?P<section>\s+SECTION)?[ \t]*(?P<trail>[*_]*)[ \t]*:[ \t*_]*",
    re.IGNORECASE | re.MULTILINE,
)
_QUOTES = re.compile(r"^[\"'`]+|[\"'`]+$")


def _is_decorated(match: re.Match) -> bool:
    """Bold, heading, numbered or ``SECTION`` headers, as the analysis prompt asks for."""
    lead = match.group("lead")
    return bool(
        match.group("section")
        or "*" in match.group("trail")
        or any(ch in lead for ch in "*#")
        or any(ch.isdigit() for ch in lead)
    )


def parse_sections(text: str) -> DocumentationSections:
    """Split an analysis response into its five sections.

    A section whose header is missing stays empty. When the response uses
    decorated headers, a bare ``Keyword:`` line is section prose, not a header.
    """
    found: dict[str, str] = {}
    headers = list(_HEADER.finditer(text or ""))
    if any(_is_decorated(m) for m in headers):
        headers = [m for m in headers if _is_decorated(m)]
    for i, match in enumerate(headers):
        key = SECTION_HEADERS[re.sub(r"\s+", " ", match.group("name")).upper()]
        end = headers[i + 1].start() if i + 1 < len(headers) else len(text)
        content = text[match.end():end].strip().rstrip("*#").strip()
        if content and key not in found:
            found[key] = content

    sections = DocumentationSections(**found)
    if len(sections.missing()) == len(PLACEHOLDERS):
        logger.warning("No documentation sections could be parsed from the response")
        logger.debug("Unparsed response: %s", text)
    elif sections.missing():
        logger.info("Sections missing after parsing: %s", ", ".join(sections.missing()))
    return sections


def with_placeholders(sections: DocumentationSections) -> DocumentationSections:
    """Copy of ``sections`` with every empty field replaced by its placeholder."""
    return sections.model_copy(update={name: PLACEHOLDERS[name] for name in sections.missing()})


def clean_title(text: str) -> str:
    lines = (text or "").strip().splitlines()
    return _QUOTES.sub("", lines[0].strip()).strip() if lines else ""


def _describe(candidate: EndpointCandidate) -> str:
    source = candidate.source_text
    if len(source) > MAX_SOURCE_CHARS:
        source = source[:MAX_SOURCE_CHARS] + "\n// ... truncated"
    return (
        f"Endpoint Information:\n"
        f"Type: {candidate.type.value}\n"
        f"Path: {candidate.path}\n"
        f"Methods: {', '.join(candidate.verbs)}\n\n"
        f"Source Code:\n```\n{source}\n```"
    )


def _summarize(semantic: SemanticResult) -> str:
    context, analysis = semantic.context, semantic.analysis
    lines = [
        f"- Version: {context.version}",
        f"- Security level: {analysis.security.level}"
        + (" (authentication required)" if analysis.security.requires_auth else ""),
        f"- Complexity: {analysis.complexity.level}",
    ]
    if context.path_params:
        lines.append(f"- Path parameters: {', '.join(context.path_params)}")
    if analysis.data_flow.async_operations:
        lines.append(f"- Async operations: {', '.join(analysis.data_flow.async_operations)}")
    return "Detected characteristics:\n" + "\n".join(lines)


class DocumentationAssembler:
    """Builds the title and five prose sections for endpoint candidates."""

    def __init__(self, model: str | None = None):
        self.client = LlmClient(model=model)

    async def generate_title(self, candidate: EndpointCandidate) -> str:
        system_prompt = (PROMPTS_DIR / "title.md").read_text(encoding="utf-8")
        try:
            response = await self.client.acall(
                system=system_prompt,
                user=f"Create a title for this API endpoint.\n\n{_describe(candidate)}",
                temperature=TITLE_TEMPERATURE,
                max_tokens=TITLE_MAX_TOKENS,
            )
        except ServiceError as e:
            logger.warning("Title generation failed for %s: %s", candidate.path, e)
            return FALLBACK_TITLE
        return clean_title(response) or FALLBACK_TITLE

    async def generate_sections(
        self, candidate: EndpointCandidate, semantic: SemanticResult | None = None
    ) -> DocumentationSections:
        """Ask for the long-form analysis and parse it. Raises ServiceError on an empty reply."""
        system_prompt = (PROMPTS_DIR / "analysis.md").read_text(encoding="utf-8")
        user_prompt = f"Document this API endpoint.\n\n{_describe(candidate)}"
        if semantic is not None:
            user_prompt += f"\n\n{_summarize(semantic)}"

        response = await self.client.acall(
            system=system_prompt,
            user=user_prompt,
            temperature=ANALYSIS_TEMPERATURE,
            max_tokens=ANALYSIS_MAX_TOKENS,
        )
        if not response.strip():
            raise ServiceError(f"Empty documentation response for {candidate.path}")
        return parse_sections(response)

    async def document(
        self, candidate: EndpointCandidate, semantic: SemanticResult | None = None
    ) -> tuple[str, DocumentationSections]:
        """Title and sections for one endpoint; every field is non-empty on return."""
        title = await self.generate_title(candidate)
        try:
            sections = await self.generate_sections(candidate, semantic)
        except ServiceError as e:
            logger.error("Documentation generation failed for %s: %s", candidate.path, e)
            return FALLBACK_TITLE, with_placeholders(DocumentationSections())
        return title, with_placeholders(sections)
