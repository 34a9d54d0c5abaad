"""
Unit tests for OpenAI service schema handling.

Tests verify:
- Schema unwrapping helper works correctly
- generate_structured sends the JSON schema response format
- The client is single-shot (no SDK retries)
- Guardrails catch invalid schemas and non-object responses
"""
import pytest
from unittest.mock import MagicMock, patch
import json

from core.llm.openai_service import OpenAIService, _unwrap_schema_spec
from core.llm.schema_models import MATCH_SCORE_SCHEMA


def _response_with(content: str) -> MagicMock:
    mock_message = MagicMock()
    mock_message.content = content
    mock_choice = MagicMock()
    mock_choice.message = mock_message
    mock_response = MagicMock()
    mock_response.choices = [mock_choice]
    return mock_response


class TestUnwrapSchemaSpec:
    """Tests for the schema unwrapping helper."""

    def test_wrapper_schema_returns_name_strict_and_inner_schema(self):
        name, strict, raw_schema = _unwrap_schema_spec(MATCH_SCORE_SCHEMA)

        assert name == "match_score_schema"
        assert strict is True
        assert raw_schema.get("type") == "object"
        assert "score" in raw_schema["properties"]

    def test_raw_schema_passes_through_unchanged(self):
        raw = {"type": "object", "properties": {"foo": {"type": "string"}}}
        name, strict, result = _unwrap_schema_spec(raw)

        assert name == "structured_response"
        assert strict is False
        assert result == raw

    def test_wrapper_missing_strict_defaults_to_false(self):
        wrapped = {"name": "test", "schema": {"type": "object", "properties": {}}}
        name, strict, raw_schema = _unwrap_schema_spec(wrapped)

        assert name == "test"
        assert strict is False


class TestClientConstruction:

    def test_client_has_timeout_and_no_retries(self):
        with patch("core.llm.openai_service.OpenAI") as mock_openai:
            OpenAIService(api_key="key", base_url="https://api.deepseek.com/v1", timeout_seconds=7.5)

        kwargs = mock_openai.call_args.kwargs
        assert kwargs["timeout"] == 7.5
        assert kwargs["max_retries"] == 0
        assert kwargs["api_key"] == "key"
        assert kwargs["base_url"] == "https://api.deepseek.com/v1"

    def test_missing_key_uses_placeholder(self):
        with patch("core.llm.openai_service.OpenAI") as mock_openai:
            OpenAIService(api_key=None)

        kwargs = mock_openai.call_args.kwargs
        assert kwargs["api_key"] == "not-configured"
        assert "base_url" not in kwargs


class TestGenerateStructured:

    @pytest.fixture
    def service(self):
        svc = OpenAIService(api_key="test", model="deepseek-chat", temperature=0.3)
        svc.client = MagicMock()
        svc.client.chat.completions.create.return_value = _response_with(json.dumps({"score": 70}))
        return svc

    def test_sends_unwrapped_json_schema(self, service):
        result = service.generate_structured("system", "user", MATCH_SCORE_SCHEMA)

        assert result == {"score": 70}
        call_kwargs = service.client.chat.completions.create.call_args.kwargs
        assert call_kwargs["model"] == "deepseek-chat"
        assert call_kwargs["temperature"] == 0.3
        response_format = call_kwargs["response_format"]
        assert response_format["type"] == "json_schema"
        assert response_format["json_schema"]["name"] == "match_score_schema"
        assert response_format["json_schema"]["strict"] is True
        assert "properties" in response_format["json_schema"]["schema"]

    def test_messages_carry_prompts(self, service):
        service.generate_structured("system text", "user text", MATCH_SCORE_SCHEMA)

        messages = service.client.chat.completions.create.call_args.kwargs["messages"]
        assert messages == [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "user text"},
        ]

    def test_schema_is_not_mutated(self, service):
        before = json.dumps(MATCH_SCORE_SCHEMA, sort_keys=True)
        service.generate_structured("system", "user", MATCH_SCORE_SCHEMA)
        assert json.dumps(MATCH_SCORE_SCHEMA, sort_keys=True) == before

    def test_invalid_schema_raises(self, service):
        with pytest.raises(ValueError, match="Not a valid JSON Schema"):
            service.generate_structured("system", "user", {"type": "array"})
        service.client.chat.completions.create.assert_not_called()

    def test_invalid_json_raises(self, service):
        service.client.chat.completions.create.return_value = _response_with("not json")
        with pytest.raises(json.JSONDecodeError):
            service.generate_structured("system", "user", MATCH_SCORE_SCHEMA)

    def test_non_object_json_raises(self, service):
        service.client.chat.completions.create.return_value = _response_with("[1, 2]")
        with pytest.raises(ValueError, match="Expected a JSON object"):
            service.generate_structured("system", "user", MATCH_SCORE_SCHEMA)
