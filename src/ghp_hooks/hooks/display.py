"""Display and formatting utilities for event hooks (rich markup)."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from rich.markup import escape

from ghp_hooks.hooks.config import EventHook, EventType
from ghp_hooks.hooks.models import HookOutcome, HookResult
from ghp_hooks.hooks.template import TEMPLATE_VARIABLES

RESULT_PREVIEW_LINES = 3


def format_hook_summary(hook: EventHook) -> list[str]:
    if hook.enabled:
        head = f"  [green]●[/green] {escape(hook.name)}"
    else:
        head = f"  [dim]○ {escape(hook.name)}[/dim]"
    return [head, f"    [dim]{escape(hook.command)}[/dim]"]


def format_hook_details(hook: EventHook) -> list[str]:
    status = "[green]enabled[/green]" if hook.enabled else "[dim]disabled[/dim]"
    lines = [
        f"[bold]{escape(hook.label)}[/bold] [dim]({escape(hook.name)})[/dim]",
        "",
        f"  Status:  {status}",
        f"  Event:   {hook.event.value}",
        f"  Mode:    {hook.mode.value}",
        f"  Command: [cyan]{escape(hook.command)}[/cyan]",
        f"  Timeout: {hook.timeout_ms}ms",
    ]
    if hook.exit_codes is not None:
        codes = hook.exit_codes
        for label, values in (
            ("success", codes.success),
            ("warn", codes.warn),
            ("abort", codes.abort),
        ):
            if values is not None:
                lines.append(f"  Exit codes ({label}): {', '.join(str(v) for v in values)}")
    if hook.continue_prompt:
        lines.append(f"  Prompt:  {escape(hook.continue_prompt)}")
    return lines


def format_empty_hooks_state(config_path: Path) -> list[str]:
    """Format the 'no hooks registered' state with instructions."""
    return [
        "[dim]No hooks registered.[/dim]",
        "",
        "Add a hook with:",
        '[cyan]  ghp-hooks add <name> --event <event> --command "<cmd>"[/cyan]',
        "",
        f"Available events: {', '.join(e.value for e in EventType)}",
        "",
        "Example:",
        "[dim]  ghp-hooks add ragtime-context --event issue-started[/dim]",
        "[dim]    --command 'ragtime new-branch ${issue.number} --issue-json ${issue.json}'[/dim]",
        "",
        f"Config file: [dim]{escape(str(config_path))}[/dim]",
    ]


def format_hook_list(hooks: Sequence[EventHook], config_path: Path) -> list[str]:
    """Format registered hooks grouped by event."""
    lines = ["[bold]Event Hooks[/bold]", "[dim]" + "─" * 60 + "[/dim]", ""]
    if not hooks:
        lines.extend(format_empty_hooks_state(config_path))
        return lines

    for event in EventType:
        event_hooks = [hook for hook in hooks if hook.event == event]
        if not event_hooks:
            continue
        lines.append(f"[bold]{event.value}[/bold]")
        for hook in event_hooks:
            lines.extend(format_hook_summary(hook))
        lines.append("")

    lines.append(f"[dim]Config: {escape(str(config_path))}[/dim]")
    return lines


def format_template_variables() -> list[str]:
    width = max(len(name) for name in TEMPLATE_VARIABLES) + 3
    lines = ["[bold]Template variables[/bold] (values are shell-quoted):"]
    for name, description in TEMPLATE_VARIABLES.items():
        placeholder = "${" + name + "}"
        lines.append(f"  [cyan]{placeholder.ljust(width)}[/cyan] {description}")
    return lines


def format_events() -> list[str]:
    lines = ["[bold]Events[/bold]"]
    lines.extend(f"  {event.value}" for event in EventType)
    return lines


def format_results(results: Sequence[HookResult]) -> list[str]:
    """Format a per-hook report after firing an event."""
    lines: list[str] = []
    for result in results:
        name = escape(result.hook_name)
        if result.success or result.outcome is HookOutcome.CONTINUE:
            suffix = " [yellow](warning)[/yellow]" if result.outcome is HookOutcome.WARN else ""
            lines.append(f'[green]✓[/green] Hook "{name}" completed{suffix}')
            if result.output:
                output_lines = result.output.split("\n")
                for line in output_lines[:RESULT_PREVIEW_LINES]:
                    lines.append(f"[dim]  {escape(line)}[/dim]")
                if len(output_lines) > RESULT_PREVIEW_LINES:
                    lines.append("[dim]  ...[/dim]")
        else:
            lines.append(f'[yellow]⚠[/yellow] Hook "{name}" failed')
            if result.error:
                lines.append(f"[dim]  {escape(result.error)}[/dim]")
        if result.aborted:
            lines.append(f'[red]✗[/red] Workflow aborted by hook "{name}"')
    return lines
