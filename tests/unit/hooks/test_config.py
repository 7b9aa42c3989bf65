from __future__ import annotations

import pytest
from inline_snapshot import snapshot
from pydantic import ValidationError

from ghp_hooks.hooks.config import (
    EventHook,
    EventHookUpdate,
    EventType,
    HookExitCodes,
    HookMode,
)


class TestEventType:
    def test_enum_values(self):
        assert [e.value for e in EventType] == [
            "issue-created",
            "issue-started",
            "pr-created",
            "pr-merged",
            "worktree-created",
            "worktree-removed",
        ]


class TestHookMode:
    def test_enum_values(self):
        assert HookMode.FIRE_AND_FORGET.value == "fire-and-forget"
        assert HookMode.BLOCKING.value == "blocking"
        assert HookMode.INTERACTIVE.value == "interactive"


class TestEventHook:
    def test_defaults(self):
        hook = EventHook(name="notify", event="pr-merged", command="echo hi")
        assert hook.display_name == "notify"
        assert hook.enabled is True
        assert hook.timeout_ms == 30000
        assert hook.mode is HookMode.FIRE_AND_FORGET
        assert hook.exit_codes is None
        assert hook.continue_prompt is None
        assert hook.event is EventType.PR_MERGED

    def test_document_uses_camel_case_keys(self):
        hook = EventHook(name="notify", event="pr-merged", command="echo hi")
        assert hook.to_document() == snapshot(
            {
                "name": "notify",
                "displayName": "notify",
                "event": "pr-merged",
                "command": "echo hi",
                "enabled": True,
                "timeoutMs": 30000,
                "mode": "fire-and-forget",
            }
        )

    def test_reads_camel_case_and_legacy_timeout(self):
        hook = EventHook.model_validate(
            {
                "name": "ctx",
                "displayName": "Context",
                "event": "issue-started",
                "command": "ragtime ${issue.number}",
                "timeout": 5000,
                "exitCodes": {"warn": [3]},
                "continuePrompt": "Go on?",
            }
        )
        assert hook.display_name == "Context"
        assert hook.timeout_ms == 5000
        assert hook.exit_codes == HookExitCodes(warn=[3])
        assert hook.continue_prompt == "Go on?"

    def test_null_mode_and_enabled_normalize_to_defaults(self):
        hook = EventHook.model_validate(
            {"name": "a", "event": "pr-created", "command": "true", "mode": None, "enabled": None}
        )
        assert hook.mode is HookMode.FIRE_AND_FORGET
        assert hook.enabled is True

    @pytest.mark.parametrize(
        "name", ["has space", "", "semi;colon", "x" * 64, "ünïcode", "dot.name"]
    )
    def test_invalid_names(self, name: str):
        with pytest.raises(ValidationError):
            EventHook(name=name, event="pr-merged", command="true")

    def test_name_length_limit(self):
        assert EventHook(name="x" * 63, event="pr-merged", command="true").name == "x" * 63

    def test_invalid_event_message(self):
        with pytest.raises(ValidationError, match="Invalid event type: pr-closed"):
            EventHook(name="a", event="pr-closed", command="true")

    def test_invalid_mode_message(self):
        with pytest.raises(ValidationError, match="Invalid mode: sometimes"):
            EventHook(name="a", event="pr-merged", command="true", mode="sometimes")

    @pytest.mark.parametrize("command", ["", "   "])
    def test_empty_command(self, command: str):
        with pytest.raises(ValidationError):
            EventHook(name="a", event="pr-merged", command=command)

    def test_non_positive_timeout(self):
        with pytest.raises(ValidationError):
            EventHook(name="a", event="pr-merged", command="true", timeout_ms=0)

    @pytest.mark.parametrize(
        "exit_codes",
        [{"success": "0"}, {"abort": [1, "2"]}, {"warn": [1.5]}, {"success": [True]}],
    )
    def test_exit_codes_must_be_integer_lists(self, exit_codes):
        with pytest.raises(ValidationError):
            EventHook(name="a", event="pr-merged", command="true", exit_codes=exit_codes)


class TestEventHookUpdate:
    def test_only_set_fields_are_dumped(self):
        update = EventHookUpdate(enabled=False)
        assert update.model_dump(exclude_unset=True) == {"enabled": False}

    def test_accepts_aliases(self):
        update = EventHookUpdate.model_validate({"timeoutMs": 10, "continuePrompt": "?"})
        assert update.model_dump(exclude_unset=True) == {"timeout_ms": 10, "continue_prompt": "?"}
