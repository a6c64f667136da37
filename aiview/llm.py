from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Protocol

import httpx

logger = logging.getLogger(__name__)

PROVIDER_ENDPOINTS: Dict[str, str] = {
    "openai": "https://api.openai.com/v1/chat/completions",
    "openrouter": "https://openrouter.ai/api/v1/chat/completions",
}


@dataclass
class LLMMessage:
    role: str
    content: str


@dataclass
class LLMResponse:
    content: str
    usage: Dict[str, Any] = field(default_factory=dict)


class LLMClient(Protocol):
    """Chat-completion style model client."""

    async def generate(self, messages: Iterable[LLMMessage], **kwargs: Any) -> LLMResponse:
        ...


class ChatCompletionsClient:
    """Client for any OpenAI-compatible ``/chat/completions`` endpoint.

    ``transport`` is handed to ``httpx.AsyncClient``; tests pass an
    ``httpx.MockTransport`` to answer without a network.
    """

    def __init__(
        self,
        model: str,
        api_key: str,
        endpoint: str = PROVIDER_ENDPOINTS["openai"],
        timeout: float = 40.0,
        extra_headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not model:
            raise ValueError("A model name is required.")
        if not api_key:
            raise ValueError("An API key is required.")
        self.model = model
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout
        self.extra_headers = dict(extra_headers or {})
        self.transport = transport

    async def generate(self, messages: Iterable[LLMMessage], **kwargs: Any) -> LLMResponse:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            **kwargs,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            **self.extra_headers,
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(self.endpoint, json=payload, headers=headers)
            response.raise_for_status()
            data = response.json()
        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content") or ""
        return LLMResponse(content=content, usage=data.get("usage") or {})


class EchoClient:
    """Offline client: answers with the user's query as a single prose item."""

    def __init__(self, tag: str = "echo"):
        self.tag = tag

    async def generate(self, messages: Iterable[LLMMessage], **_: Any) -> LLMResponse:
        user_turns = [m.content for m in messages if m.role == "user"]
        logger.warning("EchoClient answering locally because no LLM provider is configured.")
        items = [{"type": "text", "content": f"**{self.tag}** {user_turns[-1] if user_turns else ''}"}]
        return LLMResponse(content=json.dumps(items))


class LLMClientFactory:
    """Builds LLM clients from the ``models`` config section."""

    def __init__(self, config: Dict[str, Any], transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.transport = transport

    def build(self, section: str) -> LLMClient:
        section_cfg = self.config.get(section) or {}
        provider = section_cfg.get("provider", "echo")
        if provider == "echo":
            return EchoClient(tag=section)
        if provider not in PROVIDER_ENDPOINTS:
            raise ValueError(f"Unsupported LLM provider: {provider}")
        model = section_cfg.get("model")
        api_key = section_cfg.get("api_key")
        if not model or not api_key:
            raise ValueError(f"{provider} configuration requires model and api_key for {section}.")
        headers = {"X-Title": "AI Assistance View"} if provider == "openrouter" else {}
        return ChatCompletionsClient(
            model=model,
            api_key=api_key,
            endpoint=section_cfg.get("endpoint") or PROVIDER_ENDPOINTS[provider],
            timeout=float(section_cfg.get("timeout", 40.0)),
            extra_headers=headers,
            transport=self.transport,
        )
