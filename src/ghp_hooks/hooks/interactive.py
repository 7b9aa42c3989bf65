from __future__ import annotations

import asyncio
import os
import shlex
import sys
from enum import Enum

from loguru import logger
from rich.console import Console

BOX_WIDTH = 60
DEFAULT_PAGER = "less"
NO_OUTPUT = "(no output)"

console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)


class UserDecision(str, Enum):
    """Answer to an interactive hook prompt."""

    CONTINUE = "continue"
    ABORT = "abort"
    VIEW = "view"


def format_box(title: str, text: str, max_lines: int = 10) -> str:
    """Render ``text`` inside a bordered box titled ``title``.

    Lines longer than the box are cut with ``...``; output beyond ``max_lines``
    lines is replaced by a truncation marker row.
    """
    max_title = BOX_WIDTH - 6
    if len(title) > max_title:
        title = title[: max_title - 3] + "..."

    lines = text.replace("\r\n", "\n").split("\n")
    truncated = len(lines) > max_lines
    if truncated:
        lines = lines[:max_lines]

    rows: list[str] = []
    for line in lines:
        line = line.expandtabs(4)
        if len(line) > BOX_WIDTH - 4:
            line = line[: BOX_WIDTH - 7] + "..."
        rows.append(f"│ {line.ljust(BOX_WIDTH - 2)} │")
    if truncated:
        rows.append(f"│ {'... (truncated)'.ljust(BOX_WIDTH - 2)} │")

    top = f"┌─ {title} {'─' * (BOX_WIDTH - len(title) - 3)}┐"
    bottom = f"└{'─' * BOX_WIDTH}┘"
    return "\n".join([top, *rows, bottom])


def parse_decision(answer: str) -> UserDecision:
    normalized = answer.strip().lower()
    if normalized in ("y", "yes"):
        return UserDecision.CONTINUE
    if normalized in ("v", "view"):
        return UserDecision.VIEW
    return UserDecision.ABORT


class InteractiveController:
    """Shows hook output to the user and asks whether the workflow may continue."""

    def show_box(self, title: str, text: str, *, stderr: bool = False) -> None:
        target = err_console if stderr else console
        target.print(format_box(title, text or NO_OUTPUT), markup=False, emoji=False)

    async def prompt_user(self, prompt_text: str) -> UserDecision:
        """Ask ``prompt_text`` on the terminal.

        Without an interactive stdin (piped input, scripts) this returns
        ``UserDecision.ABORT`` without asking.
        """
        if not sys.stdin.isatty():
            logger.debug("stdin is not a TTY, aborting without prompting")
            return UserDecision.ABORT

        try:
            answer = await asyncio.to_thread(
                console.input, f"{prompt_text} (y/N/v) ", markup=False, emoji=False
            )
        except (EOFError, KeyboardInterrupt):
            return UserDecision.ABORT
        return parse_decision(answer)

    async def show_full(self, text: str) -> None:
        """Page ``text`` through ``$PAGER``, printing it directly if that fails."""
        pager = os.environ.get("PAGER") or DEFAULT_PAGER
        try:
            argv = shlex.split(pager)
            if not argv:
                raise ValueError("empty pager command")
            proc = await asyncio.create_subprocess_exec(*argv, stdin=asyncio.subprocess.PIPE)
            await proc.communicate(text.encode("utf-8", errors="replace"))
        except (OSError, ValueError) as e:
            logger.debug("Pager {pager} unavailable: {error}", pager=pager, error=e)
            console.print(text, markup=False, emoji=False)
