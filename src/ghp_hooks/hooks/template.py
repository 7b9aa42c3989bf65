"""Template variable substitution for hook commands.

Every substituted value is a single-quoted shell literal, so titles, bodies and
other text coming from external systems cannot inject shell syntax. Hook
commands themselves are written by trusted operators and are not sanitized.
"""

from __future__ import annotations

import json
import os
import re
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel

from ghp_hooks.hooks.models import BaseEventPayload

EVENT_FILE_VARIABLE = "_event_file"

TEMPLATE_VARIABLES: dict[str, str] = {
    "repo": "Repository in owner/name format",
    "branch": "Branch name",
    "base": "Base branch the PR was merged into (pr-merged)",
    "issue.number": "Issue number",
    "issue.title": "Issue title",
    "issue.body": "Issue body",
    "issue.url": "Issue URL",
    "issue.json": "Full issue JSON",
    "pr.number": "PR number",
    "pr.title": "PR title",
    "pr.body": "PR body",
    "pr.url": "PR URL",
    "pr.merged_at": "ISO timestamp when the PR was merged (pr-merged)",
    "pr.json": "Full PR JSON",
    "worktree.path": "Absolute path to the worktree",
    "worktree.name": "Directory name of the worktree",
    EVENT_FILE_VARIABLE: "Path to a temporary file holding the whole payload as JSON",
}

_PLACEHOLDER = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_.]*)\}")


def shell_escape(value: str) -> str:
    """Quote ``value`` as a POSIX shell literal.

    Embedded single quotes become ``'\\''`` (close quote, escaped quote, reopen).
    """
    return "'" + value.replace("'", "'\\''") + "'"


def uses_event_file(command: str) -> bool:
    return "${" + EVENT_FILE_VARIABLE + "}" in command


def _to_json(model: BaseModel) -> str:
    return json.dumps(
        model.model_dump(mode="json", exclude_none=True),
        ensure_ascii=False,
        separators=(",", ":"),
    )


def _collect_variables(payload: BaseEventPayload) -> dict[str, str]:
    """Map variable names to raw values for the fields present in ``payload``."""
    variables: dict[str, str] = {"repo": payload.repo}

    for key in ("branch", "base"):
        value = getattr(payload, key, None)
        if value is not None:
            variables[key] = value

    issue = getattr(payload, "issue", None)
    if issue is not None:
        variables.update(
            {
                "issue.number": str(issue.number),
                "issue.title": issue.title or "",
                "issue.body": issue.body or "",
                "issue.url": issue.url or "",
                "issue.json": _to_json(issue),
            }
        )

    pr = getattr(payload, "pr", None)
    if pr is not None:
        variables.update(
            {
                "pr.number": str(pr.number),
                "pr.title": pr.title or "",
                "pr.body": pr.body or "",
                "pr.url": pr.url or "",
                "pr.merged_at": pr.merged_at or "",
                "pr.json": _to_json(pr),
            }
        )

    worktree = getattr(payload, "worktree", None)
    if worktree is not None:
        variables["worktree.path"] = worktree.path
        variables["worktree.name"] = worktree.name

    return variables


def substitute(
    command: str,
    payload: BaseEventPayload,
    *,
    event_file: str | os.PathLike[str] | None = None,
) -> str:
    """Replace ``${...}`` placeholders in ``command`` with escaped payload values.

    Placeholders for unknown variables, or for fields the payload does not carry,
    are left untouched. Substituted text is not scanned again.

    Args:
        command: Hook command template.
        payload: Event payload providing the values.
        event_file: Path substituted for ``${_event_file}``; the placeholder is
            left as is when not given.
    """
    variables = _collect_variables(payload)
    if event_file is not None:
        variables[EVENT_FILE_VARIABLE] = os.fspath(event_file)

    def _replace(match: re.Match[str]) -> str:
        value = variables.get(match.group(1))
        if value is None:
            return match.group(0)
        return shell_escape(value)

    return _PLACEHOLDER.sub(_replace, command)


@contextmanager
def event_file(payload: BaseEventPayload | dict[str, Any]) -> Iterator[Path]:
    """Write ``payload`` as JSON to a private temporary file for one hook run.

    The file is removed when the context exits, whatever happened inside it.
    """
    # mkstemp creates the file with 0600 permissions
    fd, name = tempfile.mkstemp(prefix="ghp-event-", suffix=".json")
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            if isinstance(payload, BaseModel):
                f.write(payload.model_dump_json(exclude_none=True))
            else:
                json.dump(payload, f, ensure_ascii=False)
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to remove event file {path}: {error}", path=path, error=e)
