"""Ask the configured AI collaborator one question and print the answer."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

# Ensure project root is on sys.path when executed via `python scripts/...`
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from aiview.config import load_app_config
from aiview.controller import RequestController
from aiview.formatter import TextNodeKind, parse_text
from aiview.logger import setup_logging
from aiview.types import BlockType, RequestStatus


def _plain(text: str) -> str:
    parts: List[str] = []
    for node in parse_text(text):
        parts.append(node.text.upper() if node.kind is TextNodeKind.BOLD else node.text)
    return "".join(parts)


async def run_query(question: str, copy_index: Optional[int], config_path: Optional[str]) -> int:
    controller = RequestController.from_config(load_app_config(config_path))
    state = await controller.submit(question)
    if state.status is RequestStatus.ERROR:
        return 1

    code_blocks = [block for block in state.blocks if block.type is BlockType.CODE]
    for index, block in enumerate(code_blocks):
        print(f"=== code [{index}] ===")
        print(block.content)
    text_blocks = [block for block in state.blocks if block.type is BlockType.TEXT]
    if text_blocks:
        print("=== explanation ===")
        for block in text_blocks:
            print(_plain("" if block.content is None else str(block.content)))

    if copy_index is not None:
        if not 0 <= copy_index < len(code_blocks):
            print(f"No code block at index {copy_index}.", file=sys.stderr)
            return 1
        return 0 if controller.copy_block(copy_index) else 1
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Send one query to the AI assistant.")
    parser.add_argument("question", help="Free-text question, sent as typed.")
    parser.add_argument("--copy", type=int, default=None, help="Copy the Nth code block to the clipboard.")
    parser.add_argument("--config", default=None, help="Path to app.yaml.")
    parser.add_argument("--log-level", default=None, help="Override the configured log level.")
    args = parser.parse_args()
    setup_logging(args.log_level)
    sys.exit(asyncio.run(run_query(args.question, args.copy, args.config)))
