"""Inline markup for prose blocks.

``**X**`` becomes emphasis and a remaining ``*Y*`` becomes a bullet marker
followed by ``Y``. Bold spans must be consumed before the single-asterisk
rule runs, otherwise bullets end up inside bold spans.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

BULLET_MARKER = "• "

# Spans stop at line terminators, including \r, U+2028 and U+2029.
_LINE_BREAKS = "\n\r\u2028\u2029"
_SPAN = r"([^\n\r\u2028\u2029]*?)"
_BOLD_PATTERN = re.compile(r"\*\*" + _SPAN + r"\*\*")
_BULLET_PATTERN = re.compile(r"\*" + _SPAN + r"\*")


def format_text(text: str, escape: bool = False) -> str:
    """Rewrite inline markup into HTML.

    With ``escape=False`` the input is trusted and any markup it contains
    reaches the page untouched. With ``escape=True`` the text is HTML-escaped
    first; escaping never adds or removes asterisks, so the emphasis and
    bullets come out the same.

    Not idempotent: do not run it over its own output.
    """

    if escape:
        text = html.escape(text)
    text = _BOLD_PATTERN.sub(lambda match: f"<strong>{match.group(1)}</strong>", text)
    return _BULLET_PATTERN.sub(lambda match: f"{BULLET_MARKER}{match.group(1)}", text)


class TextNodeKind(str, Enum):
    PLAIN = "plain"
    BOLD = "bold"
    BULLET = "bullet"


@dataclass(frozen=True)
class TextNode:
    kind: TextNodeKind
    text: str = ""


Atom = Union[str, TextNode]


def _closing_star(atoms: List[Atom], start: int) -> Optional[int]:
    for index in range(start, len(atoms)):
        atom = atoms[index]
        if atom == "*":
            return index
        if isinstance(atom, str) and atom in _LINE_BREAKS:
            return None
    return None


def parse_text(text: str) -> List[TextNode]:
    """Split prose into plain, bold and bullet-marker nodes.

    Bold spans are treated as opaque atoms while bullet spans are matched,
    so a bullet may enclose bold text. A ``BULLET`` node is only the marker;
    the span it introduces follows as ordinary nodes.
    """

    atoms: List[Atom] = []
    position = 0
    for match in _BOLD_PATTERN.finditer(text):
        atoms.extend(text[position:match.start()])
        atoms.append(TextNode(TextNodeKind.BOLD, match.group(1)))
        position = match.end()
    atoms.extend(text[position:])

    nodes: List[TextNode] = []
    plain: List[str] = []

    def flush() -> None:
        if plain:
            nodes.append(TextNode(TextNodeKind.PLAIN, "".join(plain)))
            plain.clear()

    close_at: Optional[int] = None
    for index, atom in enumerate(atoms):
        if index == close_at:
            close_at = None
            continue
        if atom == "*" and close_at is None:
            close_at = _closing_star(atoms, index + 1)
            if close_at is not None:
                flush()
                nodes.append(TextNode(TextNodeKind.BULLET, BULLET_MARKER))
                continue
        if isinstance(atom, TextNode):
            flush()
            nodes.append(atom)
        else:
            plain.append(atom)
    flush()
    return nodes


def render_nodes(nodes: List[TextNode]) -> str:
    """Render parsed nodes to HTML, escaping all text."""

    parts: List[str] = []
    for node in nodes:
        if node.kind is TextNodeKind.BOLD:
            parts.append(f"<strong>{html.escape(node.text)}</strong>")
        else:
            parts.append(html.escape(node.text))
    return "".join(parts)
