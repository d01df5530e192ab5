"""Markdown summary of an endpoint's semantic analysis.

Built from the heuristic analysis alone, no LLM involved, so it is available
offline (``api-doc-agent inspect --format markdown``).
"""

from api_doc_agent.analyzer.base import EndpointAnalysis, SecurityProfile, SemanticContext, SemanticResult


def _overview(context: SemanticContext, analysis: EndpointAnalysis) -> str:
    level = analysis.complexity.level
    operations = len(analysis.functionality.method_analysis)
    if level == "complex":
        advice = (
            "Due to its sophisticated implementation, careful attention to error handling "
            "and input validation is recommended."
        )
    else:
        advice = "The straightforward implementation allows for easy integration and usage."
    return (
        f"This {context.version} API endpoint manages {context.resource_type} resources "
        f"within the {context.domain or 'main'} domain.\n"
        f"It implements a {level} architecture with {operations} core operations.\n\n"
        f"{advice}"
    )


def _implementation_details(analysis: EndpointAnalysis) -> str:
    patterns, flow = analysis.patterns, analysis.data_flow
    details = []
    if patterns.asynchronous.present:
        line = "Implements asynchronous processing"
        if flow.async_operations:
            line += f" with {', '.join(flow.async_operations)}"
        details.append(line)
    if patterns.stream_processing.present:
        directions = [name for name, on in (("input", flow.has_input_stream), ("output", flow.has_output_stream)) if on]
        line = "Utilizes stream-based data handling"
        if directions:
            line += f" for {' and '.join(directions)}"
        details.append(line)
    if flow.data_transformations:
        details.append(f"Performs data transformations: {', '.join(flow.data_transformations)}")
    return "\n\n".join(details)


def _security_profile(security: SecurityProfile) -> str:
    implemented = [name for name, on in security.measures.model_dump().items() if on]
    if implemented:
        measures = "Implemented measures:\n" + "\n".join(f"- {name}" for name in implemented)
    else:
        measures = "Basic security implementation with standard measures"
    return f"Security Level: {security.level}\n{measures}"


def _usage_considerations(analysis: EndpointAnalysis) -> str:
    considerations = []
    if analysis.patterns.caching.present:
        considerations.append("Response caching available for performance optimization")
    if analysis.data_flow.async_operations:
        considerations.append(f"Asynchronous operations: {', '.join(analysis.data_flow.async_operations)}")
    if analysis.patterns.monitoring.present:
        considerations.append("Performance metrics and monitoring enabled")
    return "\n\n".join(considerations)


def format_endpoint_documentation(result: SemanticResult) -> str:
    """Render the analysis as markdown: overview, implementation, security, usage."""
    context, analysis = result.context, result.analysis
    return (
        f"# {context.resource_type} API\n\n"
        f"## Overview\n{_overview(context, analysis)}\n\n"
        f"## Implementation Details\n{_implementation_details(analysis)}\n\n"
        f"## Security Profile\n{_security_profile(analysis.security)}\n\n"
        f"## Usage Considerations\n{_usage_considerations(analysis)}\n"
    )
