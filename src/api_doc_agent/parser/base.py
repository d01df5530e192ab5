"""Data models produced by the parser stage.

The structural analyzer and the endpoint extractor both turn raw source text
into these models for the semantic analyzer and the documentation stage.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

HTTP_VERBS = ("GET", "POST", "PUT", "DELETE", "PATCH")


class SourceFile(BaseModel):
    """One repository file under analysis."""

    model_config = ConfigDict(frozen=True)

    path: str
    content: str


class EndpointType(str, Enum):
    FRAMEWORK_HANDLER = "FrameworkHandler"  # file-per-route handler exporting verb functions
    ROUTE_REGISTRATION = "RouteRegistration"  # explicit app.get('/path', ...) call site


class EndpointCandidate(BaseModel):
    """A provisional detection of an HTTP endpoint inside one file."""

    type: EndpointType
    path: str
    verbs: list[str]  # canonical order, subset of HTTP_VERBS, never empty
    source_text: str = Field(default="", exclude=True, repr=False)

    @field_validator("verbs")
    @classmethod
    def _canonical_verbs(cls, value: list[str]) -> list[str]:
        wanted = {v.upper() for v in value}
        unknown = wanted - set(HTTP_VERBS)
        if unknown:
            raise ValueError(f"unsupported HTTP verbs: {sorted(unknown)}")
        if not wanted:
            raise ValueError("an endpoint candidate needs at least one verb")
        return [v for v in HTTP_VERBS if v in wanted]


class FunctionInfo(BaseModel):
    """A declared function and its parameter names."""

    name: str
    params: list[str] = []
    is_async: bool = False


class CapabilityFlags(BaseModel):
    """Call-site based capability detection; every flag starts False."""

    authentication: bool = False
    validation: bool = False
    database: bool = False
    caching: bool = False
    rate_limit: bool = False
    error_handling: bool = False


class StructuralFacts(BaseModel):
    """Everything the structural walk learned about one file."""

    imports: list[str] = []
    exports: list[str] = []
    functions: list[FunctionInfo] = []
    dependencies: list[str] = []
    flags: CapabilityFlags = Field(default_factory=CapabilityFlags)
    is_async: bool = False
    event_driven: bool = False
