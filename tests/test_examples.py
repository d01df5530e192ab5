import ast

from api_doc_agent.analyzer.base import DataFlow, SecurityMeasures, SecurityProfile
from api_doc_agent.generator.examples import BASE_URL, examples_for, render_examples


def _profile(requires_auth=False, rate_limit=False) -> SecurityProfile:
    return SecurityProfile(
        measures=SecurityMeasures(rate_limit=rate_limit),
        requires_auth=requires_auth,
    )


class TestHeaders:
    def test_auth_header_when_required(self):
        examples = render_examples("GET", "/users", security=_profile(requires_auth=True)).examples
        assert "Authorization: Bearer your-api-key" in examples.curl
        assert "Bearer your-api-key" in examples.js
        assert "Bearer your-api-key" in examples.python

    def test_no_auth_header_for_public_endpoint(self):
        examples = render_examples("GET", "/health", security=_profile()).examples
        assert "Authorization" not in examples.curl
        assert "Authorization" not in examples.js
        assert "Authorization" not in examples.python
        assert "Content-Type: application/json" in examples.curl

    def test_auth_header_without_profile(self):
        assert "Authorization" in render_examples("GET", "/users").examples.curl

    def test_rate_limit_header(self):
        examples = render_examples("GET", "/search", security=_profile(rate_limit=True)).examples
        assert "X-Rate-Limit-Strategy: adaptive" in examples.curl
        assert "X-Rate-Limit-Strategy" not in render_examples("GET", "/search", security=_profile()).examples.curl


class TestCurl:
    def test_url_and_method(self):
        curl = render_examples("delete", "/users/:id").examples.curl
        assert curl.startswith("curl -X DELETE \\")
        assert f'"{BASE_URL}/users/:id"' in curl

    def test_leading_slash_added(self):
        assert f'"{BASE_URL}/src/app/api/route.ts"' in render_examples("GET", "src/app/api/route.ts").examples.curl

    def test_body_only_for_write_methods(self):
        assert render_examples("POST", "/orders").examples.curl.endswith("-d '{}'")
        assert "-d" not in render_examples("GET", "/orders").examples.curl


class TestStreaming:
    def test_streaming_examples(self):
        flow = DataFlow(has_output_stream=True)
        examples = render_examples("GET", "/events", data_flow=flow).examples
        assert "getReader()" in examples.js
        assert "stream=True" in examples.python
        assert "iter_content" in examples.python

    def test_standard_examples(self):
        examples = render_examples("GET", "/events", data_flow=DataFlow()).examples
        assert "response.json()" in examples.js
        assert "getReader" not in examples.js
        assert "requests.get(" in examples.python


class TestPythonExample:
    def test_is_valid_python(self):
        for method in ("GET", "POST", "PUT", "PATCH", "DELETE"):
            for flow in (DataFlow(), DataFlow(has_input_stream=True)):
                for security in (None, _profile(rate_limit=True)):
                    python = render_examples(method, "/api/users/[id]", security, flow).examples.python
                    ast.parse(python)

    def test_function_name_from_path(self):
        tree = ast.parse(render_examples("POST", "/orders").examples.python)
        names = [node.name for node in tree.body if isinstance(node, ast.FunctionDef)]
        assert names == ["post_orders"]


class TestExamplesFor:
    def test_one_example_per_verb(self):
        examples = examples_for(["GET", "POST"], "/users")
        assert [e.method for e in examples] == ["GET", "POST"]

    def test_deterministic(self):
        flow = DataFlow(has_input_stream=True)
        assert render_examples("PUT", "/a", _profile(True, True), flow) == render_examples(
            "PUT", "/a", _profile(True, True), flow
        )
