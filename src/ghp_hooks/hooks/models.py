from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from ghp_hooks.hooks.config import EventType, HookMode


class IssueInfo(BaseModel):
    """Issue data carried by issue, PR and worktree events."""

    model_config = ConfigDict(extra="allow")

    number: int
    title: str = ""
    body: str | None = None
    url: str = ""


class PullRequestInfo(BaseModel):
    """Pull request data carried by PR events."""

    model_config = ConfigDict(extra="allow")

    number: int
    title: str = ""
    body: str | None = None
    url: str = ""
    merged_at: str | None = None
    """ISO timestamp of the merge (pr-merged only)."""


class WorktreeInfo(BaseModel):
    path: str
    """Absolute path to the worktree."""
    name: str
    """Directory name of the worktree."""


class BaseEventPayload(BaseModel):
    """Fields shared by every event payload."""

    model_config = ConfigDict(extra="ignore")

    repo: str
    """Repository in owner/name format."""


class IssueCreatedPayload(BaseEventPayload):
    issue: IssueInfo


class IssueStartedPayload(BaseEventPayload):
    issue: IssueInfo
    branch: str


class PrCreatedPayload(BaseEventPayload):
    pr: PullRequestInfo
    issue: IssueInfo | None = None
    branch: str


class PrMergedPayload(BaseEventPayload):
    pr: PullRequestInfo
    branch: str
    base: str
    """The base branch the PR was merged into."""


class WorktreeCreatedPayload(BaseEventPayload):
    issue: IssueInfo | None = None
    branch: str
    worktree: WorktreeInfo


class WorktreeRemovedPayload(BaseEventPayload):
    issue: IssueInfo | None = None
    branch: str
    worktree: WorktreeInfo


EventPayload = (
    IssueCreatedPayload
    | IssueStartedPayload
    | PrCreatedPayload
    | PrMergedPayload
    | WorktreeCreatedPayload
    | WorktreeRemovedPayload
)

PAYLOAD_TYPES: dict[EventType, type[BaseEventPayload]] = {
    EventType.ISSUE_CREATED: IssueCreatedPayload,
    EventType.ISSUE_STARTED: IssueStartedPayload,
    EventType.PR_CREATED: PrCreatedPayload,
    EventType.PR_MERGED: PrMergedPayload,
    EventType.WORKTREE_CREATED: WorktreeCreatedPayload,
    EventType.WORKTREE_REMOVED: WorktreeRemovedPayload,
}


def payload_for_event(event: EventType | str, data: Mapping[str, Any]) -> BaseEventPayload:
    """Validate raw payload data against the variant for ``event``.

    Raises:
        ValueError: If the event is unknown.
        pydantic.ValidationError: If the data does not fit the event's payload.
    """
    return PAYLOAD_TYPES[EventType(event)].model_validate(dict(data))


class HookOutcome(str, Enum):
    """Outcome of a hook based on its mode and exit code classification."""

    SUCCESS = "success"
    WARN = "warn"
    ABORT = "abort"
    CONTINUE = "continue"


@dataclass(frozen=True, slots=True, kw_only=True)
class HookResult:
    """Result of executing one event hook."""

    hook_name: str
    success: bool
    """True when the exit code classified as success or warn."""
    output: str
    stderr: str
    duration_ms: int
    exit_code: int | None
    """None when the process was killed by a signal (including timeout) or never ran."""
    mode: HookMode
    outcome: HookOutcome
    aborted: bool
    """The workflow that fired the event should stop."""
    error: str | None = None
