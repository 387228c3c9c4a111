"""
LLM Client - Unified interface for multiple LLM providers.
Supports OpenAI, Mistral, OpenRouter, Ollama and an offline mock.
"""
from openai import AsyncOpenAI
from typing import Optional
import json
import re

from ..config import Settings, get_llm_config, settings as default_settings


class LLMClient:
    """Async LLM client with OpenAI-compatible API."""

    def __init__(self, config: Optional[Settings] = None):
        config = config or default_settings
        llm_config = get_llm_config(config)

        # Use mock client if provider is 'mock'
        if config.llm_provider == "mock":
            from .mock_llm import MockLLMClient
            self._mock = MockLLMClient()
            self.model = "mock-lookup"
            self.temperature = 0.0
            self.max_tokens = llm_config["max_tokens"]
            self.client = None
        else:
            self._mock = None
            self.client = AsyncOpenAI(
                api_key=llm_config["api_key"],
                base_url=llm_config["base_url"],
                timeout=llm_config["timeout"]
            )
            self.model = llm_config["model"]
            self.temperature = llm_config["temperature"]
            self.max_tokens = llm_config["max_tokens"]

    async def chat(
        self,
        messages: list[dict],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_mode: bool = False
    ) -> str:
        """
        Send a chat completion request.

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Override default temperature
            max_tokens: Override default max tokens
            json_mode: If True, request JSON response format

        Returns:
            The assistant's response content
        """
        # Use mock client if available
        if self._mock is not None:
            return await self._mock.chat(messages, temperature, max_tokens, json_mode)
        kwargs = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature if temperature is not None else self.temperature,
            "max_tokens": max_tokens or self.max_tokens,
        }

        # JSON mode support (not all providers support this)
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(**kwargs)
            return response.choices[0].message.content or ""
        except Exception:
            # If JSON mode fails, retry without it
            if json_mode and "response_format" in kwargs:
                del kwargs["response_format"]
                response = await self.client.chat.completions.create(**kwargs)
                return response.choices[0].message.content or ""
            raise

    async def chat_json(
        self,
        messages: list[dict],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> dict:
        """
        Send a chat request and parse JSON response.

        Returns:
            Parsed JSON dict (empty if the reply holds no JSON object)
        """
        response = await self.chat(
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            json_mode=True
        )

        return self._parse_json_response(response)

    def _parse_json_response(self, text: str) -> dict:
        """Parse a JSON object from an LLM reply, handling markdown code blocks."""
        text = text.strip()
        candidates = [text]

        code_block = re.search(r'```(?:json)?\s*([\s\S]*?)```', text)
        if code_block:
            candidates.append(code_block.group(1).strip())

        brace_start = text.find('{')
        brace_end = text.rfind('}')
        if brace_start != -1 and brace_end > brace_start:
            candidates.append(text[brace_start:brace_end + 1])

        for candidate in candidates:
            try:
                parsed = json.loads(candidate)
            except json.JSONDecodeError:
                continue
            if isinstance(parsed, dict):
                return parsed

        return {}
