import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError
from rich.markup import escape

from ghp_hooks.constant import VERSION
from ghp_hooks.exception import GhpHooksError
from ghp_hooks.hooks.config import DEFAULT_TIMEOUT_MS, VALID_EVENTS, VALID_MODES, EventHookUpdate
from ghp_hooks.hooks.display import (
    format_events,
    format_hook_details,
    format_hook_list,
    format_results,
    format_template_variables,
)
from ghp_hooks.hooks.interactive import console
from ghp_hooks.hooks.manager import HookManager, should_abort
from ghp_hooks.hooks.models import payload_for_event
from ghp_hooks.hooks.store import HookStore, format_validation_error

_LOG_LEVEL_OPTION = "--log-level"
_DEFAULT_LOG_LEVEL_KEY = "default"


def _print_lines(lines: list[str]) -> None:
    for line in lines:
        console.print(line)


def _parse_exit_codes(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> list[int] | None:
    if value is None:
        return None
    try:
        return [int(part) for part in value.split(",") if part.strip()]
    except ValueError:
        raise click.BadParameter("expected a comma-separated list of integers") from None


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(VERSION)
@click.option(
    "--config-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Event hooks file to use. Default: ~/.config/ghp-cli/event-hooks.json.",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Log debug information. Default: no.",
)
@click.option(
    "--log-level",
    "-L",
    "log_level_override",
    multiple=True,
    help=(
        "Override log level per module. Use `module=LEVEL` to target a specific module "
        "(e.g. `-L ghp_hooks.hooks.executor=DEBUG`) or just `LEVEL` to change the default level."
    ),
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: Path | None,
    debug: bool,
    log_level_override: tuple[str, ...],
):
    """Manage hooks that run on ghp lifecycle events."""
    from ghp_hooks.share import get_log_dir
    from ghp_hooks.utils.logging import configure_file_logging

    try:
        configure_file_logging(
            get_log_dir() / "ghp-hooks.log",
            base_level="TRACE" if debug else "INFO",
            module_levels=_parse_log_level_overrides(log_level_override),
        )
    except ValueError as exc:
        raise click.BadOptionUsage(_LOG_LEVEL_OPTION, str(exc)) from exc

    ctx.obj = HookStore(config_file)


@cli.command("list")
@click.pass_obj
def list_hooks(store: HookStore):
    """List all registered event hooks."""
    _print_lines(format_hook_list(store.list(), store.path))


@cli.command()
@click.argument("name")
@click.pass_obj
def show(store: HookStore, name: str):
    """Show details of a hook."""
    hook = store.get(name)
    if hook is None:
        raise click.ClickException(f'Hook "{name}" not found')
    _print_lines(format_hook_details(hook))


@cli.command()
@click.argument("name")
@click.option(
    "--event", "-e", type=click.Choice(VALID_EVENTS), required=True, help="Event to hook."
)
@click.option("--command", "-c", "command", required=True, help="Shell command template.")
@click.option("--display-name", default=None, help="Human-readable name. Default: NAME.")
@click.option(
    "--timeout",
    type=click.IntRange(min=1),
    default=DEFAULT_TIMEOUT_MS,
    show_default=True,
    help="Timeout in milliseconds.",
)
@click.option(
    "--mode",
    type=click.Choice(VALID_MODES),
    default=VALID_MODES[0],
    show_default=True,
    help="Execution mode.",
)
@click.option("--continue-prompt", default=None, help="Prompt text for interactive mode.")
@click.option("--success-codes", callback=_parse_exit_codes, help="Comma-separated exit codes.")
@click.option("--warn-codes", callback=_parse_exit_codes, help="Comma-separated exit codes.")
@click.option("--abort-codes", callback=_parse_exit_codes, help="Comma-separated exit codes.")
@click.option("--disabled", is_flag=True, default=False, help="Register the hook disabled.")
@click.pass_obj
def add(
    store: HookStore,
    name: str,
    event: str,
    command: str,
    display_name: str | None,
    timeout: int,
    mode: str,
    continue_prompt: str | None,
    success_codes: list[int] | None,
    warn_codes: list[int] | None,
    abort_codes: list[int] | None,
    disabled: bool,
):
    """Register a new event hook."""
    console.print(
        "[yellow]Note:[/yellow] Hooks execute shell commands. "
        "Only add commands from trusted sources."
    )
    console.print()

    data: dict[str, Any] = {
        "name": name,
        "displayName": display_name,
        "event": event,
        "command": command,
        "enabled": not disabled,
        "timeoutMs": timeout,
        "mode": mode,
        "continuePrompt": continue_prompt,
    }
    exit_codes = {
        key: codes
        for key, codes in (
            ("success", success_codes),
            ("warn", warn_codes),
            ("abort", abort_codes),
        )
        if codes is not None
    }
    if exit_codes:
        data["exitCodes"] = exit_codes

    try:
        hook = store.add(data)
    except GhpHooksError as e:
        raise click.ClickException(e.message) from e

    console.print(f'[green]✓[/green] Added hook "{hook.name}"')
    console.print()
    _print_lines(format_hook_details(hook))
    console.print()
    console.print("[dim]Template variables available (see `ghp-hooks events`):[/dim]")
    console.print("[dim]  ${issue.number}, ${issue.json}, ${issue.title}, ${issue.body}[/dim]")
    console.print("[dim]  ${branch}, ${repo}, ${pr.number}, ${pr.json}, ${_event_file}[/dim]")


@cli.command()
@click.argument("name")
@click.pass_obj
def remove(store: HookStore, name: str):
    """Remove a hook."""
    try:
        store.remove(name)
    except GhpHooksError as e:
        raise click.ClickException(e.message) from e
    console.print(f'[green]✓[/green] Removed hook "{escape(name)}"')


@cli.command()
@click.argument("name")
@click.pass_obj
def enable(store: HookStore, name: str):
    """Enable a hook."""
    try:
        hook = store.enable(name)
    except GhpHooksError as e:
        raise click.ClickException(e.message) from e
    console.print(f'[green]✓[/green] Enabled hook "{hook.name}"')


@cli.command()
@click.argument("name")
@click.pass_obj
def disable(store: HookStore, name: str):
    """Disable a hook."""
    try:
        hook = store.disable(name)
    except GhpHooksError as e:
        raise click.ClickException(e.message) from e
    console.print(f'[yellow]○[/yellow] Disabled hook "{hook.name}"')


@cli.command()
@click.argument("name")
@click.option("--mode", type=click.Choice(VALID_MODES), default=None, help="New execution mode.")
@click.option("--timeout", type=click.IntRange(min=1), default=None, help="New timeout (ms).")
@click.option("--command", "-c", "command", default=None, help="New command template.")
@click.option("--continue-prompt", default=None, help="New interactive prompt text.")
@click.pass_obj
def edit(
    store: HookStore,
    name: str,
    mode: str | None,
    timeout: int | None,
    command: str | None,
    continue_prompt: str | None,
):
    """Change settings of an existing hook."""
    changes: dict[str, Any] = {
        key: value
        for key, value in (
            ("mode", mode),
            ("timeout_ms", timeout),
            ("command", command),
            ("continue_prompt", continue_prompt),
        )
        if value is not None
    }
    if not changes:
        raise click.UsageError("Nothing to change")
    try:
        hook = store.update(name, EventHookUpdate.model_validate(changes))
    except GhpHooksError as e:
        raise click.ClickException(e.message) from e
    console.print(f'[green]✓[/green] Updated hook "{hook.name}"')
    console.print()
    _print_lines(format_hook_details(hook))


@cli.command()
def events():
    """List events and template variables."""
    _print_lines(format_events())
    console.print()
    _print_lines(format_template_variables())


@cli.command()
@click.argument("event", type=click.Choice(VALID_EVENTS))
@click.option("--payload", "payload_json", default=None, help="Event payload as JSON.")
@click.option(
    "--payload-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="File containing the event payload as JSON.",
)
@click.option(
    "--cwd",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Working directory for the hooks. Default: current directory.",
)
@click.pass_obj
def run(
    store: HookStore,
    event: str,
    payload_json: str | None,
    payload_file: Path | None,
    cwd: Path | None,
):
    """Fire EVENT with a payload and run its hooks."""
    if (payload_json is None) == (payload_file is None):
        raise click.UsageError("Exactly one of --payload or --payload-file is required")

    try:
        if payload_file is not None:
            raw = json.loads(payload_file.read_text(encoding="utf-8"))
        else:
            raw = json.loads(payload_json or "")
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"Invalid JSON: {e}", param_hint="payload") from e
    except (OSError, UnicodeDecodeError) as e:
        raise click.BadParameter(f"Cannot read payload file: {e}", param_hint="payload") from e
    if not isinstance(raw, dict):
        raise click.BadParameter("Payload must be a JSON object", param_hint="payload")

    try:
        payload = payload_for_event(event, raw)
    except ValidationError as e:
        raise click.BadParameter(format_validation_error(e), param_hint="payload") from e

    manager = HookManager(store)
    if not manager.has_hooks_for_event(event):
        console.print(f"[dim]No enabled hooks for {event}.[/dim]")
        return

    console.print(f"[dim]Running {event} hooks...[/dim]")
    results = asyncio.run(manager.execute_hooks_for_event(event, payload, cwd=cwd))
    _print_lines(format_results(results))
    if should_abort(results):
        sys.exit(1)


def _parse_log_level_overrides(values: tuple[str, ...]) -> dict[str, str]:
    """Turn ``-L`` values (``LEVEL`` or ``module=LEVEL``) into a level map."""
    overrides: dict[str, str] = {}
    for value in values:
        module, sep, level = value.strip().rpartition("=")
        module, level = module.strip(), level.strip()
        if sep and not module:
            raise click.BadOptionUsage(_LOG_LEVEL_OPTION, f"Missing module name in '{value}'")
        if not level:
            raise click.BadOptionUsage(_LOG_LEVEL_OPTION, f"Missing log level in '{value}'")
        key = module.rstrip(".").lower() if sep else _DEFAULT_LOG_LEVEL_KEY
        overrides[key or _DEFAULT_LOG_LEVEL_KEY] = level
    return overrides


def main():
    cli()


if __name__ == "__main__":
    main()
