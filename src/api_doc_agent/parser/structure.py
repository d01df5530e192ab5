"""Structural analyzer: tree-sitter walk over one TypeScript/JavaScript file.

Collects imports, exported function names, declared functions and a set of
capability flags. Capability detection matches callee *names* only; nothing is
resolved, so a local helper called ``validate`` counts the same as an imported
validator.
"""

import logging

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from api_doc_agent.errors import ParseFailure
from api_doc_agent.parser.base import CapabilityFlags, FunctionInfo, StructuralFacts

logger = logging.getLogger(__name__)

TYPESCRIPT = Language(tree_sitter_typescript.language_typescript())
TSX = Language(tree_sitter_typescript.language_tsx())

CAPABILITY_CALLEES = {
    "authentication": {"authenticate", "requireAuth", "isAuthenticated"},
    "validation": {"validate", "validateInput", "schema"},
    "database": {"query", "findOne", "findMany", "create", "update", "delete"},
    "caching": {"cache", "getCache", "setCache"},
    "rate_limit": {"rateLimit", "throttle"},
}

EVENT_MEMBERS = {"emit", "on", "addEventListener"}

FUNCTION_DECLARATIONS = {"function_declaration", "generator_function_declaration"}
ASYNC_CAPABLE = FUNCTION_DECLARATIONS | {
    "function_expression",
    "function",
    "arrow_function",
    "method_definition",
}
PARAMETER_NODES = {"required_parameter", "optional_parameter"}


TYPESCRIPT_ONLY = (".ts", ".mts", ".cts")


def _grammar_for(path: str | None) -> Language:
    """TypeScript for .ts files (angle-bracket casts), TSX for everything else so JSX parses."""
    if path is None or path.lower().endswith(TYPESCRIPT_ONLY):
        return TYPESCRIPT
    return TSX


def _text(node: Node) -> str:
    return node.text.decode("utf-8", errors="replace")


def _is_async(node: Node) -> bool:
    return any(child.type == "async" for child in node.children)


def _param_name(param: Node) -> str:
    """Name of a simple identifier parameter, "unknown" for anything else."""
    if param.type == "identifier":
        return _text(param)
    if param.type in PARAMETER_NODES:
        pattern = param.child_by_field_name("pattern")
        if pattern is not None and pattern.type == "identifier" and param.child_by_field_name("value") is None:
            return _text(pattern)
    return "unknown"


def _function_info(node: Node) -> FunctionInfo | None:
    name = node.child_by_field_name("name")
    if name is None:
        return None
    params_node = node.child_by_field_name("parameters")
    params = []
    if params_node is not None:
        params = [_param_name(p) for p in params_node.named_children if p.type != "comment"]
    return FunctionInfo(name=_text(name), params=params, is_async=_is_async(node))


def _exported_function_name(node: Node) -> str | None:
    if any(child.type == "default" for child in node.children):
        return None
    declaration = node.child_by_field_name("declaration")
    if declaration is None or declaration.type not in FUNCTION_DECLARATIONS:
        return None
    name = declaration.child_by_field_name("name")
    return _text(name) if name is not None else None


def _record_call(node: Node, facts: StructuralFacts) -> None:
    callee = node.child_by_field_name("function")
    if callee is None:
        return
    if callee.type == "identifier":
        name = _text(callee)
        for capability, names in CAPABILITY_CALLEES.items():
            if name in names:
                setattr(facts.flags, capability, True)
        if name == "addEventListener":
            facts.event_driven = True
    elif callee.type == "member_expression":
        prop = callee.child_by_field_name("property")
        if prop is not None and _text(prop) in EVENT_MEMBERS:
            facts.event_driven = True


def _visit(node: Node, facts: StructuralFacts) -> None:
    kind = node.type
    if kind == "import_statement":
        source = node.child_by_field_name("source")
        if source is not None:
            specifier = _text(source)[1:-1]
            facts.imports.append(specifier)
            facts.dependencies.append(specifier)
    elif kind == "export_statement":
        name = _exported_function_name(node)
        if name:
            facts.exports.append(name)
    elif kind == "call_expression":
        _record_call(node, facts)
    elif kind == "try_statement":
        facts.flags.error_handling = True
    elif kind == "await_expression":
        facts.is_async = True

    if kind in FUNCTION_DECLARATIONS:
        info = _function_info(node)
        if info is not None:
            facts.functions.append(info)
    if kind in ASYNC_CAPABLE and _is_async(node):
        facts.is_async = True


def analyze_structure(source: str, path: str | None = None) -> StructuralFacts:
    """Parse ``source`` and collect its StructuralFacts.

    Raises ParseFailure when the text is not a syntactically valid module.
    """
    parser = Parser(_grammar_for(path))
    tree = parser.parse(source.encode("utf-8"))
    root = tree.root_node
    if root.has_error:
        raise ParseFailure(f"Syntax error in {path or '<source>'}")

    facts = StructuralFacts(flags=CapabilityFlags())
    # Explicit stack instead of recursion; children pushed reversed to keep source order.
    stack = [root]
    while stack:
        node = stack.pop()
        _visit(node, facts)
        stack.extend(reversed(node.children))

    logger.debug(
        "Parsed %s: %d imports, %d exports, %d functions",
        path or "<source>", len(facts.imports), len(facts.exports), len(facts.functions),
    )
    return facts
