import yaml
import os
from typing import Optional, Dict, Any, Literal
from pydantic import BaseModel, Field


# Known OpenAI-compatible providers. "custom" uses llm.base_url/llm.model as given.
LLM_PROVIDER_PRESETS: Dict[str, Dict[str, str]] = {
    "deepseek": {"base_url": "https://api.deepseek.com/v1", "model": "deepseek-chat"},
    "openrouter": {"base_url": "https://openrouter.ai/api/v1", "model": "deepseek/deepseek-chat"},
    "openai": {"base_url": "https://api.openai.com/v1", "model": "gpt-3.5-turbo"},
}


class DatabaseConfig(BaseModel):
    url: str = "sqlite:///labmatch.db"


class WebConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080


class LlmConfig(BaseModel):
    provider: str = "deepseek"
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    model: Optional[str] = None
    temperature: float = 0.3
    request_timeout_seconds: float = 15.0

    def resolved_base_url(self) -> Optional[str]:
        if self.base_url:
            return self.base_url
        return LLM_PROVIDER_PRESETS.get(self.provider.lower(), {}).get("base_url")

    def resolved_model(self) -> str:
        if self.model:
            return self.model
        preset = LLM_PROVIDER_PRESETS.get(self.provider.lower())
        return preset["model"] if preset else "deepseek-chat"


class CacheConfig(BaseModel):
    """
    Match cache configuration.

    Fallback-derived scores get a shorter TTL than model-derived ones so a
    transient model outage is retried sooner.
    """
    backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"
    redis_password: Optional[str] = None

    model_ttl_seconds: int = 6 * 60 * 60
    fallback_ttl_seconds: int = 10 * 60
    batch_ttl_seconds: int = 60 * 60
    batch_fallback_ttl_seconds: int = 10 * 60

    # Redis keeps expired entries this long past expires_at so stats() can see them
    retention_grace_seconds: int = 24 * 60 * 60


class MatchingConfig(BaseModel):
    """
    Matching engine configuration.

    max_concurrency bounds both the batch fan-out pool and the number of
    simultaneous remote model calls.
    """
    max_concurrency: int = Field(default=8, ge=1)
    task_timeout_seconds: float = Field(default=20.0, gt=0)
    model_max_attempts: int = Field(default=2, ge=1)
    retry_initial_wait_seconds: float = 0.5
    retry_max_wait_seconds: float = 4.0
    singleflight_enabled: bool = True

    default_student_limit: int = 10
    default_project_limit: int = 20


class AppConfig(BaseModel):
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    llm: LlmConfig = Field(default_factory=LlmConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    web: WebConfig = Field(default_factory=WebConfig)


def _set_nested(data: Dict[str, Any], section: str, key: str, value: Any) -> None:
    if section not in data or data[section] is None:
        data[section] = {}
    data[section][key] = value


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides on top of the YAML data."""
    overrides = [
        ("DATABASE_URL", "database", "url", str),
        ("REDIS_URL", "cache", "redis_url", str),
        ("LLM_PROVIDER", "llm", "provider", str),
        ("LLM_API_KEY", "llm", "api_key", str),
        ("LLM_BASE_URL", "llm", "base_url", str),
        ("LLM_MODEL", "llm", "model", str),
        ("LLM_TIMEOUT_SECONDS", "llm", "request_timeout_seconds", float),
        ("WEB_HOST", "web", "host", str),
        ("WEB_PORT", "web", "port", int),
    ]
    for env_name, section, key, cast in overrides:
        value = os.environ.get(env_name)
        if value:
            _set_nested(data, section, key, cast(value))

    # A Redis URL in the environment implies the Redis backend
    if os.environ.get("REDIS_URL"):
        data["cache"].setdefault("backend", "redis")

    return data


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from another dir), try the project root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    data: Dict[str, Any] = {}
    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

    data = _apply_env_overrides(data)

    return AppConfig(**data)
