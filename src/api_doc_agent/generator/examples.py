"""Request examples (curl, JavaScript fetch, Python requests) for an endpoint.

Pure string templating: the same inputs always give byte-identical output.
"""

import json
import re
import textwrap

from api_doc_agent.analyzer.base import DataFlow, SecurityProfile
from api_doc_agent.generator.base import CodeExamples, MethodExample

BASE_URL = "https://api.example.com"
AUTH_HEADER = ("Authorization", "Bearer your-api-key")
RATE_LIMIT_HEADER = ("X-Rate-Limit-Strategy", "adaptive")
BODY_METHODS = ("POST", "PUT", "PATCH")


def _url(path: str) -> str:
    return BASE_URL + (path if path.startswith("/") else "/" + path)


def _headers(security: SecurityProfile | None) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    # Without a profile, assume the endpoint is protected.
    if security is None or security.requires_auth:
        headers[AUTH_HEADER[0]] = AUTH_HEADER[1]
    if security is not None and security.measures.rate_limit:
        headers[RATE_LIMIT_HEADER[0]] = RATE_LIMIT_HEADER[1]
    return headers


def _resource_name(path: str) -> str:
    last = path.rstrip("/").split("/")[-1]
    return re.sub(r"[^a-zA-Z]", "", last)


def _literal(obj, indent: int) -> str:
    """JSON rendering of ``obj`` whose continuation lines sit at ``indent`` spaces."""
    return textwrap.indent(json.dumps(obj, indent=4), " " * indent).lstrip()


def render_curl(method: str, path: str, headers: dict[str, str]) -> str:
    lines = [f"curl -X {method} \\", f'  "{_url(path)}" \\']
    header_lines = [f'  -H "{name}: {value}"' for name, value in headers.items()]
    lines.extend(line + " \\" for line in header_lines[:-1])
    lines.append(header_lines[-1])
    if method in BODY_METHODS:
        lines[-1] += " \\"
        lines.append("  -d '{}'")
    return "\n".join(lines)


def render_js(method: str, path: str, headers: dict[str, str], streaming: bool) -> str:
    name = _resource_name(path)
    func = method.lower() + (name[:1].upper() + name[1:] if name else "Resource")
    url = json.dumps(_url(path))
    if streaming:
        body = f"""\
    const response = await fetch({url}, {{
      method: '{method}',
      headers: {_literal(headers, 6)},
    }});
    const reader = response.body.getReader();
    const decoder = new TextDecoder();

    while (true) {{
      const {{ done, value }} = await reader.read();
      if (done) break;
      console.log('Received:', decoder.decode(value));
    }}"""
    else:
        payload = "\n      body: JSON.stringify({}),  // request payload" if method in BODY_METHODS else ""
        body = f"""\
    const response = await fetch({url}, {{
      method: '{method}',
      headers: {_literal(headers, 6)},{payload}
    }});

    if (!response.ok) {{
      throw new Error(`HTTP error! status: ${{response.status}}`);
    }}

    const data = await response.json();
    console.log('Success:', data);"""
    return f"""\
// Example with error handling and {'streaming ' if streaming else ''}data
const {func} = async () => {{
  try {{
{body}
  }} catch (error) {{
    console.error('Error:', error.message);
  }}
}};"""


def render_python(method: str, path: str, headers: dict[str, str], streaming: bool) -> str:
    func = f"{method.lower()}_{_resource_name(path).lower() or 'resource'}"
    url = json.dumps(_url(path))
    if streaming:
        body = f"""\
        with requests.request(
            "{method}",
            {url},
            headers={_literal(headers, 12)},
            stream=True,
        ) as response:
            response.raise_for_status()
            for chunk in response.iter_content(chunk_size=8192):
                if chunk:
                    print("Received chunk:", len(chunk), "bytes")"""
    else:
        payload = "\n            json={},  # request payload" if method in BODY_METHODS else ""
        body = f"""\
        response = requests.{method.lower()}(
            {url},
            headers={_literal(headers, 12)},{payload}
        )
        response.raise_for_status()
        data = response.json()
        print("Success:", data)"""
    return f"""\
import requests


def {func}():
    try:
{body}
    except requests.exceptions.RequestException as error:
        print("Error:", error)
"""


def render_examples(
    method: str,
    path: str,
    security: SecurityProfile | None = None,
    data_flow: DataFlow | None = None,
) -> MethodExample:
    """Examples for one verb; auth/rate-limit headers and streaming follow the profiles."""
    method = method.upper()
    headers = _headers(security)
    streaming = data_flow is not None and data_flow.streaming
    return MethodExample(
        method=method,
        examples=CodeExamples(
            curl=render_curl(method, path, headers),
            js=render_js(method, path, headers, streaming),
            python=render_python(method, path, headers, streaming),
        ),
    )


def examples_for(
    verbs: list[str],
    path: str,
    security: SecurityProfile | None = None,
    data_flow: DataFlow | None = None,
) -> list[MethodExample]:
    return [render_examples(verb, path, security, data_flow) for verb in verbs]
