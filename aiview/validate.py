from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Tuple

from .types import BlockType, ResponseBlock

logger = logging.getLogger(__name__)

_MISSING = object()
_ALLOWED_TAGS = {tag.value: tag for tag in BlockType}


def _fields(item: Any) -> Tuple[Any, Any]:
    if isinstance(item, Mapping):
        return item.get("type", _MISSING), item.get("content")
    return getattr(item, "type", _MISSING), getattr(item, "content", None)


def parse_block(item: Any) -> Optional[ResponseBlock]:
    """Parse one raw item into a tagged block, or ``None`` if it is not one.

    Only the exact strings ``"code"`` and ``"text"`` are recognised; other
    spellings, enums and non-string tags are rejected. ``content`` is carried
    through untouched.
    """

    tag, content = _fields(item)
    if type(tag) is not str or tag not in _ALLOWED_TAGS:
        return None
    return ResponseBlock(type=_ALLOWED_TAGS[tag], content=content)


def validate_items(items: Optional[Iterable[Any]]) -> List[ResponseBlock]:
    """Keep the code and text items of a raw answer, in order.

    Never raises. An answer that is not a sequence of items (``None``, a
    mapping, a string or a scalar) yields an empty collection, so a request
    returning one still succeeds with nothing to show. ``AIRequestService``
    rejects such replies before they get here; only custom requesters can
    hand one over.
    """

    blocks: List[ResponseBlock] = []
    skipped = 0
    if items is None or isinstance(items, (str, bytes, Mapping)):
        items = ()
    try:
        iterator = iter(items)
    except TypeError:
        logger.debug("Raw answer of type %s is not a sequence.", type(items).__name__)
        return blocks
    for item in iterator:
        block = parse_block(item)
        if block is None:
            skipped += 1
            continue
        blocks.append(block)
    if skipped:
        logger.debug("Dropped %s raw items with unsupported type.", skipped)
    return blocks
