"""
LLM Provider Interface - Abstract base for text-generation providers.

This module defines the interface the model scorer talks to (OpenAI-compatible
endpoints such as DeepSeek, OpenRouter, OpenAI).
"""
from abc import ABC, abstractmethod
from typing import Dict, Any


class LLMProvider(ABC):
    """
    Abstract Interface for AI Service Providers.
    """

    @abstractmethod
    def generate_structured(
        self,
        system_prompt: str,
        user_message: str,
        schema_spec: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Generate a JSON object adhering to a schema.

        Args:
            system_prompt: Instructions for the model
            user_message: The rendered prompt
            schema_spec: Either a wrapped spec {'name', 'strict', 'schema'} or raw JSON schema

        Raises whatever the transport raises; callers translate failures.
        """
        pass
