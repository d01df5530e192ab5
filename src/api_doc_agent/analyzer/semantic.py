"""Endpoint semantic analyzer.

Every detector here is a regular expression run against the endpoint's source
text, so results are best-effort hints, not facts. All functions are pure and
none of them raise on unexpected input: a non-match simply reads as False/empty.
"""

import re

from api_doc_agent.analyzer.base import (
    CodePatterns,
    ComplexityAssessment,
    ComplexityLevel,
    DataFlow,
    EndpointAnalysis,
    FunctionalityAnalysis,
    FunctionalPatterns,
    MethodComplexity,
    PatternMatch,
    SecurityLevel,
    SecurityMeasures,
    SecurityProfile,
    SemanticContext,
    SemanticResult,
)
from api_doc_agent.parser.base import EndpointCandidate, StructuralFacts

CONTEXT_STOPLIST = {"api", "admin", "v1", "index.ts"}
VERSION_SEGMENT = re.compile(r"v\d+")
PATH_PARAM = re.compile(r"\[(.*?)\]")

CODE_PATTERNS = {
    "asynchronous": re.compile(r"async|await|Promise"),
    "event_driven": re.compile(r"emit|on\(|addEventListener"),
    "stream_processing": re.compile(r"pipe|stream|transform"),
    "error_boundary": re.compile(r"try|catch|finally"),
    "validation": re.compile(r"validate|schema|assert"),
    "caching": re.compile(r"cache|memoize|store"),
    "monitoring": re.compile(r"metrics|monitor|track"),
    "optimization": re.compile(r"optimize|index|aggregate"),
}

FUNCTIONAL_PATTERNS = {
    "data_validation": re.compile(r"validate|sanitize|check"),
    "state_management": re.compile(r"state|store|context"),
    "business_logic": re.compile(r"calculate|process|transform"),
    "integration": re.compile(r"connect|sync|integrate"),
}

AUTHENTICATION = re.compile(r"authenticate|login|session")
AUTHORIZATION = re.compile(r"authorize|permission|role")
ENCRYPTION = re.compile(r"encrypt|cipher|hash")
SANITIZATION = re.compile(r"sanitize|escape|clean")
RATE_LIMIT = re.compile(r"rate|throttle|limit")
REQUIRES_AUTH = re.compile(r"auth|login|session")

# Plain substring counts: "forEach" is a loop, "document" contains "do", and
# `\\?:` is an optional backslash before a colon, so every colon is a conditional.
CONDITIONALS = re.compile(r"if|switch|\\?:")
LOOPS = re.compile(r"for|while|do")
AWAITS = re.compile(r"await")

INPUT_STREAM = re.compile(r"readStream|createReadStream")
OUTPUT_STREAM = re.compile(r"writeStream|createWriteStream")
TRANSFORMATIONS = (
    ("mapping", re.compile(r"map\(")),
    ("filtering", re.compile(r"filter\(")),
    ("reduction", re.compile(r"reduce\(")),
    ("sorting", re.compile(r"sort\(")),
)
ASYNC_OPERATIONS = (
    ("external API calls", re.compile(r"fetch\(")),
    ("database operations", re.compile(r"query|findBy")),
    ("cache operations", re.compile(r"cache")),
)


# -- path context -------------------------------------------------------------

def derive_context(path: str) -> SemanticContext:
    """Read domain, admin flag, version, resource and path params off a path."""
    segments = [s for s in path.split("/") if s]
    version = next((s for s in segments if VERSION_SEGMENT.fullmatch(s)), "v1")
    domain = next((s for s in segments if s not in CONTEXT_STOPLIST), None)
    resource_type = segments[-1].removesuffix(".ts") if segments else ""
    return SemanticContext(
        domain=domain,
        is_admin="/admin/" in path,
        version=version,
        resource_type=resource_type or "resource",
        path_params=PATH_PARAM.findall(path),
    )


# -- pattern detectors ---------------------------------------------------------

def detect_code_patterns(source: str) -> CodePatterns:
    results = {}
    for name, pattern in CODE_PATTERNS.items():
        count = len(pattern.findall(source))
        results[name] = PatternMatch(present=count > 0, matches=count)
    return CodePatterns(**results)


def extract_method_section(source: str, method: str) -> str:
    """Text between the first mention of ``method`` and the first closing brace after it.

    Approximate: nested braces are not balanced, the non-greedy match stops
    at the first ``}``. Kept that way so scores stay reproducible.
    """
    pattern = re.compile(rf"{re.escape(method.lower())}.*?\{{([\s\S]*?)\}}", re.IGNORECASE)
    match = pattern.search(source)
    return match.group(1) if match else ""


def method_complexity_score(section: str) -> float:
    lines = section.count("\n") + 1
    conditionals = len(CONDITIONALS.findall(section))
    loops = len(LOOPS.findall(section))
    awaits = len(AWAITS.findall(section))
    return lines * 0.1 + conditionals * 2 + loops * 3 + awaits * 1.5


def complexity_level(score: float) -> ComplexityLevel:
    if score < 5:
        return "simple"
    if score < 15:
        return "moderate"
    return "complex"


def assess_method_complexity(source: str, method: str) -> ComplexityLevel:
    return complexity_level(method_complexity_score(extract_method_section(source, method)))


def analyze_functionality(source: str, verbs: list[str]) -> FunctionalityAnalysis:
    patterns = FunctionalPatterns(**{
        name: bool(pattern.search(source)) for name, pattern in FUNCTIONAL_PATTERNS.items()
    })
    return FunctionalityAnalysis(
        patterns=patterns,
        method_analysis=[
            MethodComplexity(method=verb, complexity=assess_method_complexity(source, verb))
            for verb in verbs
        ],
    )


# -- security -----------------------------------------------------------------

def security_score(source: str, is_admin: bool) -> int:
    """Weighted 0-8 score; weights are independent of the measures map."""
    return (
        (2 if is_admin else 0)
        + (2 if AUTHENTICATION.search(source) else 0)
        + (2 if AUTHORIZATION.search(source) else 0)
        + (1 if ENCRYPTION.search(source) else 0)
        + (1 if SANITIZATION.search(source) else 0)
    )


def security_level(score: int) -> SecurityLevel:
    if score >= 6:
        return "high"
    if score >= 3:
        return "medium"
    return "basic"


def analyze_security(source: str, is_admin: bool) -> SecurityProfile:
    measures = SecurityMeasures(
        authentication=bool(AUTHENTICATION.search(source)),
        authorization=bool(AUTHORIZATION.search(source)),
        encryption=bool(ENCRYPTION.search(source)),
        sanitization=bool(SANITIZATION.search(source)),
        rate_limit=bool(RATE_LIMIT.search(source)),
    )
    return SecurityProfile(
        measures=measures,
        requires_auth=is_admin or bool(REQUIRES_AUTH.search(source)),
        level=security_level(security_score(source, is_admin)),
    )


# -- data flow ----------------------------------------------------------------

def analyze_data_flow(source: str) -> DataFlow:
    return DataFlow(
        has_input_stream=bool(INPUT_STREAM.search(source)),
        has_output_stream=bool(OUTPUT_STREAM.search(source)),
        data_transformations=[name for name, p in TRANSFORMATIONS if p.search(source)],
        async_operations=[name for name, p in ASYNC_OPERATIONS if p.search(source)],
    )


def assess_complexity(patterns: CodePatterns, functionality: FunctionalityAnalysis) -> ComplexityAssessment:
    factors = sum([
        patterns.asynchronous.present,
        patterns.event_driven.present,
        patterns.stream_processing.present,
        functionality.patterns.state_management,
        functionality.patterns.integration,
    ])
    if factors <= 2:
        level = "simple"
    elif factors <= 4:
        level = "moderate"
    else:
        level = "complex"
    return ComplexityAssessment(level=level, factors=factors)


def with_structure(patterns: CodePatterns, structure: StructuralFacts) -> CodePatterns:
    """Mark async and event-driven patterns present when the syntax tree saw them.

    Match counts stay the textual ones.
    """
    return patterns.model_copy(update={
        "asynchronous": PatternMatch(
            present=patterns.asynchronous.present or structure.is_async,
            matches=patterns.asynchronous.matches,
        ),
        "event_driven": PatternMatch(
            present=patterns.event_driven.present or structure.event_driven,
            matches=patterns.event_driven.matches,
        ),
    })


def analyze_endpoint(candidate: EndpointCandidate, structure: StructuralFacts | None = None) -> SemanticResult:
    """Full semantic profile of one endpoint candidate.

    ``structure`` is the structural analysis of the candidate's file, when known.
    """
    source = candidate.source_text
    context = derive_context(candidate.path)
    patterns = detect_code_patterns(source)
    if structure is not None:
        patterns = with_structure(patterns, structure)
    functionality = analyze_functionality(source, candidate.verbs)
    return SemanticResult(
        context=context,
        analysis=EndpointAnalysis(
            patterns=patterns,
            functionality=functionality,
            security=analyze_security(source, context.is_admin),
            data_flow=analyze_data_flow(source),
            complexity=assess_complexity(patterns, functionality),
        ),
    )
