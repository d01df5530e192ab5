"""Data models produced by the semantic analyzer."""

from typing import Literal

from pydantic import BaseModel, Field

ComplexityLevel = Literal["simple", "moderate", "complex"]
SecurityLevel = Literal["basic", "medium", "high"]


class SemanticContext(BaseModel):
    """What the endpoint path alone says about the endpoint."""

    domain: str | None
    is_admin: bool
    version: str = "v1"
    resource_type: str = "resource"
    path_params: list[str] = []


class PatternMatch(BaseModel):
    present: bool = False
    matches: int = 0


class CodePatterns(BaseModel):
    asynchronous: PatternMatch = Field(default_factory=PatternMatch)
    event_driven: PatternMatch = Field(default_factory=PatternMatch)
    stream_processing: PatternMatch = Field(default_factory=PatternMatch)
    error_boundary: PatternMatch = Field(default_factory=PatternMatch)
    validation: PatternMatch = Field(default_factory=PatternMatch)
    caching: PatternMatch = Field(default_factory=PatternMatch)
    monitoring: PatternMatch = Field(default_factory=PatternMatch)
    optimization: PatternMatch = Field(default_factory=PatternMatch)


class FunctionalPatterns(BaseModel):
    data_validation: bool = False
    state_management: bool = False
    business_logic: bool = False
    integration: bool = False


class MethodComplexity(BaseModel):
    """Per-verb weighted complexity; independent of the endpoint-level factor count."""

    method: str
    complexity: ComplexityLevel


class FunctionalityAnalysis(BaseModel):
    patterns: FunctionalPatterns = Field(default_factory=FunctionalPatterns)
    method_analysis: list[MethodComplexity] = []


class SecurityMeasures(BaseModel):
    authentication: bool = False
    authorization: bool = False
    encryption: bool = False
    sanitization: bool = False
    rate_limit: bool = False


class SecurityProfile(BaseModel):
    measures: SecurityMeasures = Field(default_factory=SecurityMeasures)
    requires_auth: bool = False
    level: SecurityLevel = "basic"


class DataFlow(BaseModel):
    has_input_stream: bool = False
    has_output_stream: bool = False
    data_transformations: list[str] = []
    async_operations: list[str] = []

    @property
    def streaming(self) -> bool:
        return self.has_input_stream or self.has_output_stream


class ComplexityAssessment(BaseModel):
    """Endpoint-level complexity: how many of five structural factors are present."""

    level: ComplexityLevel
    factors: int = Field(ge=0, le=5)


class EndpointAnalysis(BaseModel):
    patterns: CodePatterns
    functionality: FunctionalityAnalysis
    security: SecurityProfile
    data_flow: DataFlow
    complexity: ComplexityAssessment


class SemanticResult(BaseModel):
    context: SemanticContext
    analysis: EndpointAnalysis
