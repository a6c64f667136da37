import json

import httpx
import pytest

from aiview.ai_request import AIRequestError, AIRequestService, parse_raw_items
from aiview.controller import RequestController
from aiview.llm import (
    PROVIDER_ENDPOINTS,
    ChatCompletionsClient,
    EchoClient,
    LLMClientFactory,
    LLMResponse,
)
from aiview.types import NotificationLevel, RequestStatus


class CannedLLM:
    def __init__(self, content: str):
        self.content = content
        self.messages = []

    async def generate(self, messages, **kwargs):
        self.messages = list(messages)
        return LLMResponse(content=self.content)


def test_parse_plain_array():
    assert parse_raw_items('[{"type": "code", "content": "x"}]') == [{"type": "code", "content": "x"}]


def test_parse_fenced_block_and_wrapper():
    reply = 'Sure:\n```json\n{"items": [{"type": "text", "content": "hi"}]}\n```'
    assert parse_raw_items(reply) == [{"type": "text", "content": "hi"}]


def test_items_are_not_filtered_here():
    assert parse_raw_items('[{"type": "note"}, 3]') == [{"type": "note"}, 3]


@pytest.mark.parametrize("reply", ["not json", '{"type": "text"}', '"text"'])
def test_unusable_reply_raises(reply):
    with pytest.raises(AIRequestError):
        parse_raw_items(reply)


@pytest.mark.asyncio
async def test_send_puts_query_in_user_turn():
    llm = CannedLLM('[{"type": "text", "content": "answer"}]')
    service = AIRequestService(llm)

    items = await service.send("what is *this*?")

    assert items == [{"type": "text", "content": "answer"}]
    assert llm.messages[0].role == "system"
    assert llm.messages[-1].role == "user"
    assert llm.messages[-1].content == "what is *this*?"


@pytest.mark.asyncio
async def test_echo_client_round_trip():
    service = AIRequestService(EchoClient(tag="assistant"))
    items = await service.send("hello")
    assert items == [{"type": "text", "content": "**assistant** hello"}]


def test_factory_providers():
    factory = LLMClientFactory(
        {
            "assistant": {"provider": "echo"},
            "router": {"provider": "openrouter", "model": "m", "api_key": "k"},
            "broken": {"provider": "openrouter", "model": "m"},
            "unknown": {"provider": "carrier-pigeon"},
        }
    )
    assert isinstance(factory.build("assistant"), EchoClient)
    assert isinstance(factory.build("missing"), EchoClient)
    router = factory.build("router")
    assert isinstance(router, ChatCompletionsClient)
    assert router.endpoint == PROVIDER_ENDPOINTS["openrouter"]
    assert router.extra_headers == {"X-Title": "AI Assistance View"}
    with pytest.raises(ValueError):
        factory.build("broken")
    with pytest.raises(ValueError):
        factory.build("unknown")


def _completion(content: str) -> dict:
    return {
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"total_tokens": 12},
    }


@pytest.mark.asyncio
async def test_chat_completions_reply_becomes_raw_items():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        items = [{"type": "code", "content": "print(1)"}, {"type": "text", "content": "done"}]
        return httpx.Response(200, json=_completion(json.dumps(items)))

    factory = LLMClientFactory(
        {"assistant": {"provider": "openai", "model": "gpt-test", "api_key": "sk-test"}},
        transport=httpx.MockTransport(handler),
    )
    service = AIRequestService(factory.build("assistant"))

    items = await service.send("print one")

    assert items == [{"type": "code", "content": "print(1)"}, {"type": "text", "content": "done"}]
    assert seen["url"] == PROVIDER_ENDPOINTS["openai"]
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"]["model"] == "gpt-test"
    assert seen["body"]["temperature"] == 0.2
    assert seen["body"]["messages"][-1] == {"role": "user", "content": "print one"}


@pytest.mark.asyncio
async def test_chat_completions_server_error_is_a_request_failure(notifier):
    transport = httpx.MockTransport(lambda request: httpx.Response(502, json={"error": "bad gateway"}))
    service = AIRequestService.from_config(
        {"assistant": {"provider": "openrouter", "model": "m", "api_key": "k"}},
        transport=transport,
    )
    controller = RequestController(service, notifier)

    state = await controller.submit("anything")

    assert state.status is RequestStatus.ERROR
    assert state.blocks == ()
    assert [(n.level, n.message) for n in notifier.notifications] == [
        (NotificationLevel.ERROR, "Failed to get AI response")
    ]


def test_chat_completions_client_requires_credentials():
    with pytest.raises(ValueError):
        ChatCompletionsClient(model="m", api_key="")
    with pytest.raises(ValueError):
        ChatCompletionsClient(model="", api_key="k")
