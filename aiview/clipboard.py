from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from typing import List, Optional, Protocol, Sequence

from .config import DEFAULT_MESSAGES
from .notify import Notifier

logger = logging.getLogger(__name__)


class ClipboardError(RuntimeError):
    """Raised when text cannot be written to the clipboard."""


class ClipboardWriter(Protocol):
    def write(self, text: str) -> None:
        ...


class MemoryClipboard:
    """In-process clipboard, used headless and in tests."""

    def __init__(self) -> None:
        self.value: Optional[str] = None

    def write(self, text: str) -> None:
        self.value = text


def _platform_command() -> Optional[List[str]]:
    if sys.platform == "darwin":
        return ["pbcopy"]
    if shutil.which("wl-copy"):
        return ["wl-copy"]
    if shutil.which("xclip"):
        return ["xclip", "-selection", "clipboard"]
    if shutil.which("xsel"):
        return ["xsel", "--clipboard", "--input"]
    if sys.platform == "win32":
        return ["clip"]
    return None


class SystemClipboard:
    """Pipes text into the platform clipboard tool."""

    def __init__(self, command: Optional[Sequence[str]] = None, timeout: float = 5.0):
        self.command = list(command) if command else None
        self.timeout = timeout

    def write(self, text: str) -> None:
        command = self.command or _platform_command()
        if not command:
            raise ClipboardError("No clipboard tool found (pbcopy/wl-copy/xclip/xsel).")
        try:
            subprocess.run(
                command,
                input=text.encode("utf-8"),
                check=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            raise ClipboardError(f"Clipboard copy failed: {exc}") from exc


class ClipboardExporter:
    """Copies a block's raw content and reports the outcome as a toast."""

    def __init__(
        self,
        writer: ClipboardWriter,
        notifier: Notifier,
        copied_message: str = DEFAULT_MESSAGES["copied"],
        failed_message: str = DEFAULT_MESSAGES["copy_failed"],
    ):
        self.writer = writer
        self.notifier = notifier
        self.copied_message = copied_message
        self.failed_message = failed_message

    def copy(self, content: str) -> bool:
        try:
            self.writer.write(content)
        except ClipboardError as exc:
            logger.warning("Clipboard write failed: %s", exc)
            self.notifier.error(self.failed_message)
            return False
        self.notifier.success(self.copied_message)
        return True
