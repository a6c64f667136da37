"""Shared fixtures: fake collaborators for the request pipeline."""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path
from typing import Any, List, Sequence

import pytest

# Ensure project root is importable and the bundled config is used regardless
# of the directory pytest is invoked from.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
os.environ.setdefault("AIVIEW_CONFIG", str(PROJECT_ROOT / "configs" / "app.yaml"))

from aiview.clipboard import ClipboardError, ClipboardExporter, MemoryClipboard  # noqa: E402
from aiview.controller import RequestController  # noqa: E402
from aiview.notify import RecordingNotifier  # noqa: E402


class StaticRequester:
    """Answers every query with the same raw items, or raises."""

    def __init__(self, items: Sequence[Any] = (), error: Exception | None = None):
        self.items = list(items)
        self.error = error
        self.queries: List[str] = []

    async def send(self, query: str) -> List[Any]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.items)


class PendingRequester:
    """Parks every call on a future so tests decide the resolution order."""

    def __init__(self) -> None:
        self.pending: List[asyncio.Future] = []
        self.queries: List[str] = []

    async def send(self, query: str) -> List[Any]:
        future = asyncio.get_running_loop().create_future()
        self.queries.append(query)
        self.pending.append(future)
        return await future

    async def wait_for(self, count: int) -> None:
        while len(self.pending) < count:
            await asyncio.sleep(0)


class FailingClipboard:
    def write(self, text: str) -> None:
        raise ClipboardError("clipboard unavailable")


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def clipboard() -> MemoryClipboard:
    return MemoryClipboard()


@pytest.fixture
def make_controller(notifier, clipboard):
    def factory(requester, config=None) -> RequestController:
        return RequestController(
            requester,
            notifier,
            clipboard=ClipboardExporter(clipboard, notifier),
            config=config,
        )

    return factory
