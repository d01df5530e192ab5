"""Documentation record models handed back to callers.

Everything serializes to plain nested dicts via ``model_dump(mode="json")``.
"""

from datetime import datetime

from pydantic import BaseModel

from api_doc_agent.analyzer.base import EndpointAnalysis, SemanticContext
from api_doc_agent.parser.base import EndpointType, StructuralFacts

FALLBACK_TITLE = "API Endpoint"

PLACEHOLDERS = {
    "overview": "Documentation generation in progress.",
    "technical_details": "Technical details are being processed.",
    "parameters": "Parameter documentation is being generated.",
    "response_format": "Response format documentation is being prepared.",
    "error_handling": "Error handling documentation is being created.",
}


class DocumentationSections(BaseModel):
    """The five prose sections of an endpoint's documentation."""

    overview: str = ""
    technical_details: str = ""
    parameters: str = ""
    response_format: str = ""
    error_handling: str = ""

    def missing(self) -> list[str]:
        return [name for name in PLACEHOLDERS if not getattr(self, name).strip()]


class CodeExamples(BaseModel):
    curl: str
    js: str
    python: str


class MethodExample(BaseModel):
    method: str
    examples: CodeExamples


class EndpointDocumentation(BaseModel):
    type: EndpointType
    path: str
    methods: list[str]
    title: str
    documentation: DocumentationSections
    examples: list[MethodExample]
    context: SemanticContext
    analysis: EndpointAnalysis


class FileDocumentation(BaseModel):
    path: str
    file_type: str
    endpoints: list[EndpointDocumentation]
    analysis: StructuralFacts


class RunMetadata(BaseModel):
    version: str
    ai_powered: bool = True
    files_scanned: int = 0
    files_skipped: int = 0


class RepositoryDocumentation(BaseModel):
    repository: str
    files: list[FileDocumentation]
    generated_at: datetime
    metadata: RunMetadata
