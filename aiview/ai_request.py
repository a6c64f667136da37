from __future__ import annotations

import json
import logging
import re
from typing import Any, List, Optional, Protocol, Sequence

import httpx

from .llm import LLMClient, LLMClientFactory, LLMMessage

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a coding assistant embedded in a collaborative editor. "
    "Answer with a JSON array only. Each element is an object with a "
    '"type" of either "code" or "text" and a string "content". '
    "Put every code snippet in its own code element and every explanation "
    "in text elements. Use **double asterisks** for headings and *single "
    "asterisks* around list points."
)

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)
_WRAPPER_KEYS = ("items", "response")


class AIRequestError(RuntimeError):
    """Raised when the model reply cannot be turned into raw items."""


class AIRequester(Protocol):
    async def send(self, query: str) -> Sequence[Any]:
        ...


def parse_raw_items(reply: str) -> List[Any]:
    """Decode a model reply into the list of raw items it carries.

    Items themselves are not checked here; a fenced ``json`` block and a
    top-level ``{"items": [...]}`` wrapper are both accepted.
    """

    fenced = _FENCE_PATTERN.search(reply)
    candidate = fenced.group(1) if fenced else reply
    try:
        data = json.loads(candidate.strip())
    except json.JSONDecodeError as exc:
        raise AIRequestError(f"AI reply is not valid JSON: {exc}") from exc
    if isinstance(data, dict):
        for key in _WRAPPER_KEYS:
            if isinstance(data.get(key), list):
                data = data[key]
                break
    if not isinstance(data, list):
        raise AIRequestError(f"AI reply must be a JSON array, got {type(data).__name__}.")
    return data


class AIRequestService:
    """Turns a free-text query into the raw answer items of one model call."""

    def __init__(self, llm: LLMClient, system_prompt: str = SYSTEM_PROMPT, temperature: float = 0.2):
        self._llm = llm
        self.system_prompt = system_prompt
        self.temperature = temperature

    @classmethod
    def from_config(
        cls,
        models_config: dict,
        section: str = "assistant",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "AIRequestService":
        return cls(LLMClientFactory(models_config, transport=transport).build(section))

    async def send(self, query: str) -> List[Any]:
        messages = [
            LLMMessage(role="system", content=self.system_prompt),
            LLMMessage(role="user", content=query),
        ]
        response = await self._llm.generate(messages, temperature=self.temperature)
        items = parse_raw_items(response.content)
        logger.debug("AI reply carried %s raw items.", len(items))
        return items


def build_requester(config: Optional[dict] = None) -> AIRequestService:
    models = (config or {}).get("models", {})
    return AIRequestService.from_config(models)
