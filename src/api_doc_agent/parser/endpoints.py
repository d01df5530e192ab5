"""Heuristic endpoint extractor.

Works on raw text, no syntax tree. Two independent detectors run over every
file and their results are concatenated:

- framework handlers: a file that exports a default or a named constant and
  mentions one or more HTTP verbs is treated as a file-per-route handler;
- route registrations: every ``.get('/path'`` style call site.

Candidates are not deduplicated across detectors.
"""

import logging
import re

from api_doc_agent.parser.base import HTTP_VERBS, EndpointCandidate, EndpointType

logger = logging.getLogger(__name__)

MODULE_EXPORT = re.compile(r"\bexport\s+(?:default|const)\b")
ROUTE_REGISTRATION = re.compile(r"\.(get|post|put|delete|patch)\s*\(\s*(['\"`][^'\"`]+['\"`])", re.IGNORECASE)


def _framework_handler(content: str, file_path: str) -> EndpointCandidate | None:
    if not MODULE_EXPORT.search(content):
        return None
    lowered = content.lower()
    verbs = [verb for verb in HTTP_VERBS if verb.lower() in lowered]
    if not verbs:
        return None
    return EndpointCandidate(
        type=EndpointType.FRAMEWORK_HANDLER,
        path=file_path,
        verbs=verbs,
        source_text=content,
    )


def _route_registrations(content: str) -> list[EndpointCandidate]:
    candidates = []
    for match in ROUTE_REGISTRATION.finditer(content):
        verb, literal = match.groups()
        path = re.sub(r"['\"`,]", "", literal).strip()
        if not path:
            continue
        candidates.append(
            EndpointCandidate(
                type=EndpointType.ROUTE_REGISTRATION,
                path=path,
                verbs=[verb.upper()],
                source_text=content,
            )
        )
    return candidates


def extract_endpoints(content: str, file_path: str) -> list[EndpointCandidate]:
    """Find endpoint candidates in one file. Never raises."""
    try:
        endpoints = []
        handler = _framework_handler(content, file_path)
        if handler is not None:
            endpoints.append(handler)
        endpoints.extend(_route_registrations(content))
    except Exception:
        logger.exception("Error extracting endpoints from %s", file_path)
        return []

    logger.debug("Found %d endpoint candidates in %s", len(endpoints), file_path)
    return endpoints
