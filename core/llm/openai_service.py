"""
OpenAI Service - LLM implementation over any OpenAI-compatible API.

Single-shot by construction: the client is built with ``max_retries=0`` and
a request timeout. Retry policy belongs to the matching engine.
"""
from typing import Dict, Any, Optional, Tuple
import json
import logging
import copy

import openai
from openai import OpenAI

from core.llm.interfaces import LLMProvider
from core.llm.system_prompts import DEFAULT_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


TRANSIENT_ERRORS = (
    openai.RateLimitError,
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.InternalServerError,
)


def is_retryable(exc: BaseException) -> bool:
    """Return True for transient errors that are worth retrying."""
    return isinstance(exc, TRANSIENT_ERRORS)


def _unwrap_schema_spec(spec: Dict[str, Any]) -> Tuple[str, bool, Dict[str, Any]]:
    """Unwrap a schema spec to extract name, strict flag, and raw JSON schema.

    Args:
        spec: Either a wrapped spec {'name': str, 'strict': bool, 'schema': {...}}
              or a raw JSON schema dict

    Returns:
        Tuple of (name, strict, raw_schema)
    """
    if isinstance(spec, dict) and "schema" in spec and "name" in spec:
        return spec.get("name", "structured_response"), bool(spec.get("strict", False)), spec["schema"]
    return "structured_response", False, spec


class OpenAIService(LLMProvider):
    """
    OpenAI-compatible LLM Service.

    Requests JSON Schema constrained output and returns the decoded object.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: str = "deepseek-chat",
        temperature: float = 0.3,
        timeout_seconds: float = 15.0
    ):
        client_kwargs: Dict[str, Any] = {
            'timeout': timeout_seconds,
            'max_retries': 0,
        }
        # The SDK refuses to build a client without a key; a placeholder lets
        # the service start and every call fail over to the fallback scorer.
        client_kwargs['api_key'] = api_key or "not-configured"
        if base_url:
            client_kwargs['base_url'] = base_url

        if not api_key:
            logger.warning("LLM API key not configured. Matching will use the fallback scorer.")

        self.client = OpenAI(**client_kwargs)
        self.model = model
        self.temperature = temperature
        self.timeout_seconds = timeout_seconds

    def generate_structured(
        self,
        system_prompt: str,
        user_message: str,
        schema_spec: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Generate structured data using JSON Schema mode."""
        name, strict, raw_schema = _unwrap_schema_spec(schema_spec)
        runtime_schema = copy.deepcopy(raw_schema)

        if runtime_schema.get("type") != "object" or "properties" not in runtime_schema:
            raise ValueError(f"Not a valid JSON Schema object. Top-level keys: {list(runtime_schema.keys())}")

        messages = [
            {"role": "system", "content": system_prompt or DEFAULT_SYSTEM_PROMPT},
            {"role": "user", "content": user_message},
        ]

        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=self.temperature,
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": name,
                    "schema": runtime_schema,
                    "strict": strict,
                },
            },
        )

        try:
            content = response.choices[0].message.content
            data = json.loads(content)
        except (json.JSONDecodeError, IndexError, AttributeError, TypeError) as e:
            logger.error(f"Failed to parse structured response: {e}")
            raise

        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

        logger.debug(f"Structured response from {self.model}: keys={list(data.keys())}")
        return data
