from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    field_validator,
    model_validator,
)

HOOK_NAME_PATTERN = r"^[A-Za-z0-9_-]{1,63}$"
DEFAULT_TIMEOUT_MS = 30000
DEFAULT_CONTINUE_PROMPT = "Continue?"


class EventType(str, Enum):
    """Lifecycle events that hooks can subscribe to."""

    ISSUE_CREATED = "issue-created"
    """After an issue is created."""
    ISSUE_STARTED = "issue-started"
    """After work starts on an issue (branch created or switched to)."""
    PR_CREATED = "pr-created"
    """After a pull request is opened."""
    PR_MERGED = "pr-merged"
    """After a pull request is merged."""
    WORKTREE_CREATED = "worktree-created"
    """After a parallel worktree is created."""
    WORKTREE_REMOVED = "worktree-removed"
    """After a worktree is removed."""


class HookMode(str, Enum):
    """Hook execution modes.

    - fire-and-forget: silent, never aborts the workflow
    - blocking: output shown on failure, failure aborts the workflow
    - interactive: output always shown, the user decides to continue or abort
    """

    FIRE_AND_FORGET = "fire-and-forget"
    BLOCKING = "blocking"
    INTERACTIVE = "interactive"


VALID_EVENTS: tuple[str, ...] = tuple(e.value for e in EventType)
VALID_MODES: tuple[str, ...] = tuple(m.value for m in HookMode)


class HookExitCodes(BaseModel):
    """Exit code classification overrides; unset lists keep their defaults."""

    model_config = ConfigDict(extra="ignore")

    success: list[StrictInt] | None = None
    abort: list[StrictInt] | None = None
    warn: list[StrictInt] | None = None


class EventHook(BaseModel):
    """A registered event hook."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(pattern=HOOK_NAME_PATTERN, description="Unique hook identifier")
    display_name: str | None = Field(default=None, alias="displayName")
    event: EventType
    command: str = Field(min_length=1, description="Shell command template")
    enabled: bool = True
    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        gt=0,
        alias="timeoutMs",
        validation_alias=AliasChoices("timeoutMs", "timeout", "timeout_ms"),
        description="Timeout in milliseconds",
    )
    mode: HookMode = HookMode.FIRE_AND_FORGET
    exit_codes: HookExitCodes | None = Field(default=None, alias="exitCodes")
    continue_prompt: str | None = Field(default=None, alias="continuePrompt")

    @field_validator("event", mode="before")
    @classmethod
    def _check_event(cls, value: Any) -> Any:
        if isinstance(value, EventType):
            return value
        if value not in VALID_EVENTS:
            raise ValueError(
                f"Invalid event type: {value}. Valid events: {', '.join(VALID_EVENTS)}"
            )
        return value

    @field_validator("mode", mode="before")
    @classmethod
    def _check_mode(cls, value: Any) -> Any:
        if value is None or value == "":
            return HookMode.FIRE_AND_FORGET
        if isinstance(value, HookMode):
            return value
        if value not in VALID_MODES:
            raise ValueError(f"Invalid mode: {value}. Valid modes: {', '.join(VALID_MODES)}")
        return value

    @field_validator("command")
    @classmethod
    def _check_command(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Hook must have a command")
        return value

    @field_validator("enabled", mode="before")
    @classmethod
    def _default_enabled(cls, value: Any) -> Any:
        return True if value is None else value

    @model_validator(mode="after")
    def _default_display_name(self) -> EventHook:
        if not self.display_name:
            self.display_name = self.name
        return self

    @property
    def label(self) -> str:
        return self.display_name or self.name

    def to_document(self) -> dict[str, Any]:
        """Serialize with the on-disk (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EventHookUpdate(BaseModel):
    """Fields to change on an existing hook. Only explicitly set fields apply."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")
    event: EventType | None = None
    command: str | None = None
    enabled: bool | None = None
    timeout_ms: int | None = Field(
        default=None,
        alias="timeoutMs",
        validation_alias=AliasChoices("timeoutMs", "timeout", "timeout_ms"),
    )
    mode: HookMode | None = None
    exit_codes: HookExitCodes | None = Field(default=None, alias="exitCodes")
    continue_prompt: str | None = Field(default=None, alias="continuePrompt")


class EventHooksConfig(BaseModel):
    """Event hooks configuration document."""

    hooks: list[EventHook] = Field(default_factory=list)

    def to_document(self) -> dict[str, Any]:
        return {"hooks": [hook.to_document() for hook in self.hooks]}
