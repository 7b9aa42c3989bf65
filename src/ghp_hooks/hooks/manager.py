from __future__ import annotations

import time
from collections.abc import Sequence
from contextlib import ExitStack
from pathlib import Path

from loguru import logger

from ghp_hooks.hooks.classifier import classify_exit_code
from ghp_hooks.hooks.config import DEFAULT_CONTINUE_PROMPT, EventHook, EventType, HookMode
from ghp_hooks.hooks.executor import CommandResult, run_command
from ghp_hooks.hooks.interactive import NO_OUTPUT, InteractiveController, UserDecision
from ghp_hooks.hooks.models import BaseEventPayload, HookOutcome, HookResult
from ghp_hooks.hooks.store import HookStore
from ghp_hooks.hooks.template import event_file, substitute, uses_event_file


def should_abort(results: Sequence[HookResult]) -> bool:
    """Whether any hook asked the workflow to stop."""
    return any(result.aborted for result in results)


class HookManager:
    """Runs the hooks registered for lifecycle events.

    Hooks for an event run one after another in registration order, never in
    parallel, so hooks touching the same files cannot race. Processing stops at
    the first hook whose mode turns a failure into an abort.
    """

    def __init__(
        self,
        store: HookStore | None = None,
        controller: InteractiveController | None = None,
    ) -> None:
        self._store = store or HookStore()
        self._controller = controller or InteractiveController()

    @property
    def store(self) -> HookStore:
        return self._store

    def has_hooks_for_event(self, event: EventType | str) -> bool:
        return bool(self._store.hooks_for_event(event))

    async def execute_hooks_for_event(
        self,
        event: EventType | str,
        payload: BaseEventPayload,
        *,
        cwd: str | Path | None = None,
    ) -> list[HookResult]:
        """Execute all enabled hooks for ``event``.

        Check ``aborted`` on the last result (or use ``should_abort``) to decide
        whether the calling workflow should stop.

        Args:
            event: The lifecycle event that occurred.
            payload: Event data used to fill in command templates.
            cwd: Working directory for the hooks, e.g. a freshly created worktree.
        """
        event = EventType(event)
        hooks = self._store.hooks_for_event(event)
        if not hooks:
            return []

        logger.debug(
            "Executing {count} hooks for event {event}", count=len(hooks), event=event.value
        )
        results: list[HookResult] = []
        for hook in hooks:
            result = await self.execute_hook(hook, payload, cwd=cwd)
            results.append(result)
            if result.aborted:
                logger.info(
                    "Hook {name} aborted event {event}; skipping remaining hooks",
                    name=hook.name,
                    event=event.value,
                )
                break
        return results

    async def _run(
        self, hook: EventHook, payload: BaseEventPayload, cwd: str | Path | None
    ) -> CommandResult:
        with ExitStack() as stack:
            path = None
            if uses_event_file(hook.command):
                try:
                    path = stack.enter_context(event_file(payload))
                except OSError as e:
                    logger.warning(
                        "Failed to write event file for hook {name}: {error}",
                        name=hook.name,
                        error=e,
                    )
                    return CommandResult(
                        stdout="", stderr=f"Failed to write event file: {e}", exit_code=None
                    )
            command = substitute(hook.command, payload, event_file=path)
            return await run_command(command, hook.timeout_ms, cwd=cwd)

    async def execute_hook(
        self,
        hook: EventHook,
        payload: BaseEventPayload,
        *,
        cwd: str | Path | None = None,
    ) -> HookResult:
        """Execute a single hook and apply its mode's behavior."""
        start_time = time.monotonic()
        logger.debug("Running hook {name} ({mode})", name=hook.name, mode=hook.mode.value)

        result = await self._run(hook, payload, cwd)
        duration_ms = int((time.monotonic() - start_time) * 1000)

        if result.timed_out:
            outcome = HookOutcome.ABORT
        else:
            outcome = classify_exit_code(result.exit_code, hook.exit_codes)
        success = outcome in (HookOutcome.SUCCESS, HookOutcome.WARN)

        error: str | None = None
        if result.timed_out:
            error = f"Hook timed out after {hook.timeout_ms}ms"
            logger.warning(
                "Hook {name} timed out after {timeout}ms", name=hook.name, timeout=hook.timeout_ms
            )
        elif result.exit_code is None:
            error = result.stderr or "Hook was killed by a signal"
        elif not success:
            error = f"Hook exited with code {result.exit_code}"

        aborted = False
        match hook.mode:
            case HookMode.FIRE_AND_FORGET:
                pass
            case HookMode.BLOCKING:
                if not success:
                    self._controller.show_box(
                        hook.label, result.stderr or result.stdout, stderr=True
                    )
                    aborted = True
            case HookMode.INTERACTIVE:
                decision = await self._ask(hook, result.stderr or result.stdout or NO_OUTPUT)
                aborted = decision is not UserDecision.CONTINUE
                outcome = HookOutcome.ABORT if aborted else HookOutcome.CONTINUE

        logger.info(
            "Hook {name} finished: outcome={outcome} exit_code={exit_code} duration={duration}ms",
            name=hook.name,
            outcome=outcome.value,
            exit_code=result.exit_code,
            duration=duration_ms,
        )
        return HookResult(
            hook_name=hook.name,
            success=success,
            output=result.stdout,
            stderr=result.stderr,
            duration_ms=duration_ms,
            exit_code=result.exit_code,
            mode=hook.mode,
            outcome=outcome,
            aborted=aborted,
            error=error,
        )

    async def _ask(self, hook: EventHook, display_output: str) -> UserDecision:
        """Show the hook's output and prompt until the user continues or aborts."""
        self._controller.show_box(hook.label, display_output)
        prompt_text = hook.continue_prompt or DEFAULT_CONTINUE_PROMPT
        decision = await self._controller.prompt_user(prompt_text)
        while decision is UserDecision.VIEW:
            await self._controller.show_full(display_output)
            decision = await self._controller.prompt_user(prompt_text)
        return decision
