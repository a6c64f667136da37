from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class BlockType(str, Enum):
    """Tags a validated response block may carry."""

    CODE = "code"
    TEXT = "text"


class RawItem(BaseModel):
    """Untrusted item as produced by the AI collaborator."""

    model_config = ConfigDict(extra="allow")

    type: Any = None
    content: Any = None


class ResponseBlock(BaseModel):
    """Validated block ready for rendering."""

    model_config = ConfigDict(frozen=True)

    type: BlockType
    content: Any = None


class RequestStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class RequestState(BaseModel):
    """Single published value of the request lifecycle.

    ``blocks`` always holds the last committed collection: during
    ``LOADING`` and after ``ERROR`` it is the collection that was displayed
    before the request started.
    """

    model_config = ConfigDict(frozen=True)

    status: RequestStatus = RequestStatus.IDLE
    blocks: Tuple[ResponseBlock, ...] = ()
    query: Optional[str] = None
    generation: int = 0

    @property
    def is_loading(self) -> bool:
        return self.status is RequestStatus.LOADING


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class Notification(BaseModel):
    level: NotificationLevel
    message: str


class CodeBlockView(BaseModel):
    """Code block paired with the copy action bound to its raw content."""

    content: Any = None
    copy_index: int


class TextContainerView(BaseModel):
    """All prose blocks grouped into one container, already formatted."""

    paragraphs: List[str] = Field(default_factory=list)


class ResponseView(BaseModel):
    """What the rendering surface draws for a given state."""

    status: RequestStatus
    loading: bool = False
    placeholder: Optional[str] = None
    code_blocks: List[CodeBlockView] = Field(default_factory=list)
    text_container: Optional[TextContainerView] = None


class AskRequest(BaseModel):
    """Incoming query payload for the HTTP surface."""

    query: str = Field(..., description="Free-text question, forwarded as typed.")


class AskResponse(BaseModel):
    state: RequestState
    view: ResponseView
    notifications: List[Notification] = Field(default_factory=list)
