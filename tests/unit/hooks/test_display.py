from __future__ import annotations

from pathlib import Path

from ghp_hooks.hooks.config import EventHook, HookMode
from ghp_hooks.hooks.display import (
    format_hook_details,
    format_hook_list,
    format_results,
    format_template_variables,
)
from ghp_hooks.hooks.models import HookOutcome, HookResult


def _result(**kwargs) -> HookResult:
    defaults = dict(
        hook_name="ctx",
        success=True,
        output="",
        stderr="",
        duration_ms=5,
        exit_code=0,
        mode=HookMode.FIRE_AND_FORGET,
        outcome=HookOutcome.SUCCESS,
        aborted=False,
    )
    defaults.update(kwargs)
    return HookResult(**defaults)


def test_hook_list_groups_by_event():
    hooks = [
        EventHook(name="merged", event="pr-merged", command="echo m"),
        EventHook(name="ctx", event="issue-started", command="echo c", enabled=False),
    ]
    lines = format_hook_list(hooks, Path("/cfg/event-hooks.json"))

    assert lines[0] == "[bold]Event Hooks[/bold]"
    assert lines.index("[bold]issue-started[/bold]") < lines.index("[bold]pr-merged[/bold]")
    assert "  [dim]○ ctx[/dim]" in lines
    assert "  [green]●[/green] merged" in lines
    assert lines[-1] == "[dim]Config: /cfg/event-hooks.json[/dim]"


def test_empty_hook_list():
    lines = format_hook_list([], Path("/cfg/event-hooks.json"))
    assert "[dim]No hooks registered.[/dim]" in lines
    assert any("issue-created, issue-started" in line for line in lines)


def test_details_escape_markup():
    hook = EventHook(
        name="ctx",
        event="issue-started",
        command="echo [red]${issue.title}",
        exit_codes={"warn": [2, 3]},
        continue_prompt="Go?",
    )
    lines = format_hook_details(hook)
    assert "  Command: [cyan]echo \\[red]${issue.title}[/cyan]" in lines
    assert "  Exit codes (warn): 2, 3" in lines
    assert "  Prompt:  Go?" in lines
    assert "  Timeout: 30000ms" in lines


def test_template_variables_listed():
    text = "\n".join(format_template_variables())
    assert "${issue.json}" in text
    assert "${_event_file}" in text


def test_results_report():
    lines = format_results(
        [
            _result(hook_name="ok", output="a\nb\nc\nd"),
            _result(hook_name="meh", outcome=HookOutcome.WARN, exit_code=2),
            _result(
                hook_name="bad",
                success=False,
                exit_code=1,
                outcome=HookOutcome.ABORT,
                aborted=True,
                error="Hook exited with code 1",
            ),
        ]
    )
    assert lines == [
        '[green]✓[/green] Hook "ok" completed',
        "[dim]  a[/dim]",
        "[dim]  b[/dim]",
        "[dim]  c[/dim]",
        "[dim]  ...[/dim]",
        '[green]✓[/green] Hook "meh" completed [yellow](warning)[/yellow]',
        '[yellow]⚠[/yellow] Hook "bad" failed',
        "[dim]  Hook exited with code 1[/dim]",
        '[red]✗[/red] Workflow aborted by hook "bad"',
    ]
