from __future__ import annotations

import logging
from typing import Any

from bs4 import BeautifulSoup

from .config import DEFAULT_MESSAGES
from .formatter import format_text
from .types import (
    BlockType,
    CodeBlockView,
    RequestState,
    ResponseView,
    TextContainerView,
)

logger = logging.getLogger(__name__)


def _as_text(content: Any) -> str:
    return "" if content is None else str(content)


def build_view(
    state: RequestState,
    trust_markup: bool = False,
    placeholder: str = DEFAULT_MESSAGES["loading"],
) -> ResponseView:
    """Compose what the surface should draw for ``state``.

    Code blocks come first, each with a copy action indexed into the code
    blocks only. Prose blocks follow, formatted and grouped in a single
    container that is omitted when there is no prose.
    """

    if state.is_loading:
        return ResponseView(status=state.status, loading=True, placeholder=placeholder)

    code_blocks = [
        CodeBlockView(content=block.content, copy_index=index)
        for index, block in enumerate(b for b in state.blocks if b.type is BlockType.CODE)
    ]
    paragraphs = [
        format_text(_as_text(block.content), escape=not trust_markup)
        for block in state.blocks
        if block.type is BlockType.TEXT
    ]
    return ResponseView(
        status=state.status,
        code_blocks=code_blocks,
        text_container=TextContainerView(paragraphs=paragraphs) if paragraphs else None,
    )


def render_html(view: ResponseView) -> str:
    """Render a view into an HTML fragment."""

    soup = BeautifulSoup("", "html.parser")
    root = soup.new_tag("div", attrs={"class": "ai-response"})
    soup.append(root)

    if view.loading:
        placeholder = soup.new_tag("div", attrs={"class": "ai-loading"})
        placeholder.string = view.placeholder or ""
        root.append(placeholder)
        return str(soup)

    for block in view.code_blocks:
        wrapper = soup.new_tag("div", attrs={"class": "ai-code"})
        button = soup.new_tag(
            "button",
            attrs={
                "class": "ai-copy",
                "title": "Copy Code",
                "data-copy-index": str(block.copy_index),
            },
        )
        button.string = "Copy"
        pre = soup.new_tag("pre")
        code = soup.new_tag("code")
        code.string = _as_text(block.content)
        pre.append(code)
        wrapper.append(button)
        wrapper.append(pre)
        root.append(wrapper)

    if view.text_container is not None:
        container = soup.new_tag("div", attrs={"class": "ai-text"})
        for paragraph in view.text_container.paragraphs:
            p = soup.new_tag("p")
            p.append(BeautifulSoup(paragraph, "html.parser"))
            container.append(p)
        root.append(container)

    logger.debug(
        "Rendered %s code blocks and %s paragraphs.",
        len(view.code_blocks),
        len(view.text_container.paragraphs) if view.text_container else 0,
    )
    return str(soup)


def render_page(view: ResponseView, script_url: str = "/ui/app.js") -> str:
    """Render the full assistance page around the current response.

    The query input, Submit button and copy buttons are driven by the
    script at ``script_url``, which talks to ``/ask``, ``/fragment`` and
    ``/copy/{index}``.
    """

    soup = BeautifulSoup("<!DOCTYPE html><html><head></head><body></body></html>", "html.parser")
    meta = soup.new_tag("meta", attrs={"charset": "utf-8"})
    title = soup.new_tag("title")
    title.string = "AI Assistance"
    soup.head.append(meta)
    soup.head.append(title)

    heading = soup.new_tag("h1", attrs={"class": "view-title"})
    heading.string = "AI Assistance"
    form = soup.new_tag("form", attrs={"id": "ai-form"})
    form.append(
        soup.new_tag(
            "input",
            attrs={
                "id": "ai-query",
                "name": "query",
                "type": "text",
                "placeholder": "Ask something...",
                "autocomplete": "off",
            },
        )
    )
    submit = soup.new_tag("button", attrs={"id": "ai-submit", "type": "submit"})
    submit.string = "Submit"
    form.append(submit)

    output = soup.new_tag("div", attrs={"id": "ai-output"})
    output.append(BeautifulSoup(render_html(view), "html.parser"))
    toasts = soup.new_tag("div", attrs={"id": "ai-toasts", "aria-live": "polite"})
    script = soup.new_tag("script", attrs={"src": script_url, "defer": ""})

    for element in (heading, form, output, toasts, script):
        soup.body.append(element)
    return str(soup)
