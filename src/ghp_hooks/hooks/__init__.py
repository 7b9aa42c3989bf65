"""Event hooks for ghp lifecycle events.

Hooks are shell command templates bound to lifecycle events (issue started,
PR merged, worktree created, ...). When an event fires, payload fields are
substituted into the template as shell-quoted literals and the command runs
with a timeout; its exit code decides whether the workflow continues.
"""

from ghp_hooks.hooks.classifier import classify_exit_code
from ghp_hooks.hooks.config import (
    EventHook,
    EventHookUpdate,
    EventHooksConfig,
    EventType,
    HookExitCodes,
    HookMode,
)
from ghp_hooks.hooks.executor import CommandResult, run_command
from ghp_hooks.hooks.interactive import InteractiveController, UserDecision, format_box
from ghp_hooks.hooks.manager import HookManager, should_abort
from ghp_hooks.hooks.models import (
    BaseEventPayload,
    EventPayload,
    HookOutcome,
    HookResult,
    IssueCreatedPayload,
    IssueInfo,
    IssueStartedPayload,
    PrCreatedPayload,
    PrMergedPayload,
    PullRequestInfo,
    WorktreeCreatedPayload,
    WorktreeInfo,
    WorktreeRemovedPayload,
    payload_for_event,
)
from ghp_hooks.hooks.store import HookStore
from ghp_hooks.hooks.template import event_file, shell_escape, substitute

__all__ = [
    # Config
    "EventType",
    "HookMode",
    "HookExitCodes",
    "EventHook",
    "EventHookUpdate",
    "EventHooksConfig",
    # Payloads and results
    "BaseEventPayload",
    "EventPayload",
    "IssueInfo",
    "PullRequestInfo",
    "WorktreeInfo",
    "IssueCreatedPayload",
    "IssueStartedPayload",
    "PrCreatedPayload",
    "PrMergedPayload",
    "WorktreeCreatedPayload",
    "WorktreeRemovedPayload",
    "payload_for_event",
    "HookOutcome",
    "HookResult",
    # Store
    "HookStore",
    # Template
    "substitute",
    "shell_escape",
    "event_file",
    # Execution
    "run_command",
    "CommandResult",
    "classify_exit_code",
    "InteractiveController",
    "UserDecision",
    "format_box",
    # Orchestration
    "HookManager",
    "should_abort",
]
