from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .ai_request import AIRequester, build_requester
from .clipboard import ClipboardError, ClipboardExporter, SystemClipboard
from .config import DEFAULT_MESSAGES, load_app_config, messages
from .notify import LoggingNotifier, Notifier
from .types import BlockType, RequestState, RequestStatus, ResponseBlock
from .validate import validate_items

logger = logging.getLogger(__name__)

StateListener = Callable[[RequestState], None]


class CommitPolicy(str, Enum):
    """Which of several overlapping requests may publish its result."""

    LAST_RESOLVED = "last_resolved"
    LAST_SUBMITTED = "last_submitted"


@dataclass
class ControllerConfig:
    commit_policy: CommitPolicy = CommitPolicy.LAST_RESOLVED
    failure_message: str = DEFAULT_MESSAGES["request_failed"]

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "ControllerConfig":
        section = config.get("controller") or {}
        return cls(
            commit_policy=CommitPolicy(section.get("commit_policy", CommitPolicy.LAST_RESOLVED.value)),
            failure_message=messages(config)["request_failed"],
        )


class RequestController:
    """Owns the query/response lifecycle and publishes it as one state value.

    ``submit`` has no in-flight guard: it may be awaited concurrently and no
    call cancels another. Under ``LAST_RESOLVED`` whichever call finishes last
    wins; under ``LAST_SUBMITTED`` only the most recently issued generation
    may commit.
    """

    def __init__(
        self,
        requester: AIRequester,
        notifier: Notifier,
        clipboard: Optional[ClipboardExporter] = None,
        config: Optional[ControllerConfig] = None,
    ):
        self.requester = requester
        self.notifier = notifier
        self.clipboard = clipboard
        self.config = config or ControllerConfig()
        self._state = RequestState()
        self._generation = 0
        self._listeners: List[StateListener] = []

    @classmethod
    def from_config(
        cls,
        config: Optional[Dict[str, Any]] = None,
        notifier: Optional[Notifier] = None,
    ) -> "RequestController":
        config = load_app_config() if config is None else config
        notifier = notifier or LoggingNotifier()
        text = messages(config)
        clipboard = ClipboardExporter(
            SystemClipboard((config.get("clipboard") or {}).get("command")),
            notifier,
            copied_message=text["copied"],
            failed_message=text["copy_failed"],
        )
        return cls(
            build_requester(config),
            notifier,
            clipboard=clipboard,
            config=ControllerConfig.from_dict(config),
        )

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def blocks(self) -> Tuple[ResponseBlock, ...]:
        return self._state.blocks

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, state: RequestState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _is_stale(self, generation: int) -> bool:
        return (
            self.config.commit_policy is CommitPolicy.LAST_SUBMITTED
            and generation != self._generation
        )

    async def submit(self, query: str) -> RequestState:
        self._generation += 1
        generation = self._generation
        self._publish(
            self._state.model_copy(
                update={"status": RequestStatus.LOADING, "query": query, "generation": generation}
            )
        )
        try:
            raw_items = await self.requester.send(query)
        except asyncio.CancelledError:
            # No toast: the caller cancelled, the collaborator did not fail.
            if not self._is_stale(generation):
                logger.info("AI request %s cancelled.", generation)
                self._publish(self._state.model_copy(update={"status": RequestStatus.ERROR}))
            raise
        except Exception:
            logger.exception("AI request %s failed.", generation)
            if self._is_stale(generation):
                logger.info("Ignoring failure of superseded request %s.", generation)
                return self._state
            self._publish(self._state.model_copy(update={"status": RequestStatus.ERROR}))
            self.notifier.error(self.config.failure_message)
            return self._state

        blocks = tuple(validate_items(raw_items))
        if self._is_stale(generation):
            logger.info("Discarding result of superseded request %s.", generation)
            return self._state
        self._publish(
            self._state.model_copy(update={"status": RequestStatus.SUCCESS, "blocks": blocks})
        )
        logger.info("Request %s produced %s blocks.", generation, len(blocks))
        return self._state

    def code_blocks(self) -> List[ResponseBlock]:
        return [block for block in self._state.blocks if block.type is BlockType.CODE]

    def copy_block(self, index: int) -> bool:
        """Copy the raw content of the ``index``-th code block."""

        if self.clipboard is None:
            raise ClipboardError("No clipboard exporter configured.")
        code = self.code_blocks()
        if not 0 <= index < len(code):
            raise IndexError(f"No code block at index {index}.")
        content = code[index].content
        return self.clipboard.copy("" if content is None else str(content))
