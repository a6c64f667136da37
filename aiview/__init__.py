"""
Query-to-answer pipeline for the AI assistance view.

The package validates raw AI answer items into typed blocks, formats
prose markup, copies code blocks to the clipboard and tracks the request
lifecycle for a rendering surface.
"""

from .types import (
    BlockType,
    Notification,
    NotificationLevel,
    RawItem,
    RequestState,
    RequestStatus,
    ResponseBlock,
    ResponseView,
)
from .validate import validate_items
from .formatter import format_text, parse_text
from .clipboard import ClipboardExporter
from .controller import CommitPolicy, RequestController
from .render import build_view, render_html

__all__ = [
    "BlockType",
    "Notification",
    "NotificationLevel",
    "RawItem",
    "RequestState",
    "RequestStatus",
    "ResponseBlock",
    "ResponseView",
    "validate_items",
    "format_text",
    "parse_text",
    "ClipboardExporter",
    "CommitPolicy",
    "RequestController",
    "build_view",
    "render_html",
]
