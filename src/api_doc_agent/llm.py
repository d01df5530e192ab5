"""LLM client wrapper around litellm.

Provides a unified async interface for calling any LLM model supported by
litellm. Provider failures surface as ServiceError.
"""

from litellm import acompletion

from api_doc_agent import config
from api_doc_agent.errors import ServiceError

DEFAULT_MODEL = "gpt-4o-mini"


class LlmClient:
    """Wrapper for LLM API calls via litellm."""

    def __init__(self, model: str | None = None):
        self.model = model or config.model_name() or DEFAULT_MODEL

    def _request(self, system: str, user: str, temperature: float | None, max_tokens: int | None) -> dict:
        kwargs = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        return kwargs

    async def acall(self, system: str, user: str, temperature: float | None = None, max_tokens: int | None = None) -> str:
        """Send a system+user message to the LLM and return the response text."""
        try:
            response = await acompletion(**self._request(system, user, temperature, max_tokens))
        except Exception as e:
            raise ServiceError(f"{self.model} completion failed: {e}") from e
        return _content(response)


def _content(response) -> str:
    try:
        return response.choices[0].message.content or ""
    except (AttributeError, IndexError) as e:
        raise ServiceError(f"Malformed completion response: {e}") from e
