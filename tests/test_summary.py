from api_doc_agent.analyzer.base import (
    CodePatterns,
    ComplexityAssessment,
    DataFlow,
    EndpointAnalysis,
    FunctionalityAnalysis,
    MethodComplexity,
    PatternMatch,
    SecurityMeasures,
    SecurityProfile,
    SemanticContext,
    SemanticResult,
)
from api_doc_agent.generator.summary import format_endpoint_documentation

PRESENT = PatternMatch(present=True, matches=1)


def _result(
    patterns: CodePatterns | None = None,
    data_flow: DataFlow | None = None,
    security: SecurityProfile | None = None,
    level: str = "simple",
    domain: str | None = "billing",
) -> SemanticResult:
    return SemanticResult(
        context=SemanticContext(domain=domain, is_admin=False, version="v2", resource_type="invoices"),
        analysis=EndpointAnalysis(
            patterns=patterns or CodePatterns(),
            functionality=FunctionalityAnalysis(
                method_analysis=[
                    MethodComplexity(method="GET", complexity="simple"),
                    MethodComplexity(method="POST", complexity="moderate"),
                ]
            ),
            security=security or SecurityProfile(),
            data_flow=data_flow or DataFlow(),
            complexity=ComplexityAssessment(level=level, factors=5 if level == "complex" else 0),
        ),
    )


def _section(markdown: str, title: str) -> str:
    body = markdown.split(f"## {title}\n", 1)[1]
    return body.split("\n## ", 1)[0].strip()


class TestLayout:
    def test_heading_and_section_order(self):
        markdown = format_endpoint_documentation(_result())
        assert markdown.startswith("# invoices API\n")
        positions = [
            markdown.index(f"## {title}")
            for title in ("Overview", "Implementation Details", "Security Profile", "Usage Considerations")
        ]
        assert positions == sorted(positions)


class TestOverview:
    def test_simple_endpoint(self):
        overview = _section(format_endpoint_documentation(_result()), "Overview")
        assert "This v2 API endpoint manages invoices resources within the billing domain." in overview
        assert "a simple architecture with 2 core operations" in overview
        assert "straightforward implementation" in overview

    def test_complex_endpoint_without_domain(self):
        overview = _section(format_endpoint_documentation(_result(level="complex", domain=None)), "Overview")
        assert "within the main domain" in overview
        assert "careful attention to error handling" in overview


class TestImplementationDetails:
    def test_nothing_detected(self):
        assert _section(format_endpoint_documentation(_result()), "Implementation Details") == ""

    def test_async_stream_and_transformations(self):
        result = _result(
            patterns=CodePatterns(asynchronous=PRESENT, stream_processing=PRESENT),
            data_flow=DataFlow(
                has_input_stream=True,
                has_output_stream=True,
                data_transformations=["mapping", "sorting"],
                async_operations=["database operations"],
            ),
        )
        details = _section(format_endpoint_documentation(result), "Implementation Details")
        assert details.split("\n\n") == [
            "Implements asynchronous processing with database operations",
            "Utilizes stream-based data handling for input and output",
            "Performs data transformations: mapping, sorting",
        ]

    def test_async_without_operations(self):
        result = _result(patterns=CodePatterns(asynchronous=PRESENT))
        assert _section(format_endpoint_documentation(result), "Implementation Details") == (
            "Implements asynchronous processing"
        )


class TestSecurityProfile:
    def test_basic(self):
        profile = _section(format_endpoint_documentation(_result()), "Security Profile")
        assert profile == "Security Level: basic\nBasic security implementation with standard measures"

    def test_implemented_measures_listed(self):
        security = SecurityProfile(
            measures=SecurityMeasures(authentication=True, rate_limit=True),
            requires_auth=True,
            level="medium",
        )
        profile = _section(format_endpoint_documentation(_result(security=security)), "Security Profile")
        assert profile == "Security Level: medium\nImplemented measures:\n- authentication\n- rate_limit"


class TestUsageConsiderations:
    def test_empty(self):
        assert _section(format_endpoint_documentation(_result()), "Usage Considerations") == ""

    def test_caching_async_and_monitoring(self):
        result = _result(
            patterns=CodePatterns(caching=PRESENT, monitoring=PRESENT),
            data_flow=DataFlow(async_operations=["external API calls", "cache operations"]),
        )
        usage = _section(format_endpoint_documentation(result), "Usage Considerations")
        assert usage.split("\n\n") == [
            "Response caching available for performance optimization",
            "Asynchronous operations: external API calls, cache operations",
            "Performance metrics and monitoring enabled",
        ]
