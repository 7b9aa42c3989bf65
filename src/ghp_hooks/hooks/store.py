"""Persistent registry of event hooks.

Hooks live in a single JSON document (``{"hooks": [...]}``) readable and
writable by the owner only, since commands may embed secrets.
"""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from ghp_hooks.exception import DuplicateHookError, HookNotFoundError, HookValidationError
from ghp_hooks.hooks.config import EventHook, EventHooksConfig, EventHookUpdate, EventType
from ghp_hooks.share import get_event_hooks_config_path

FILE_MODE = 0o600


def format_validation_error(exc: ValidationError) -> str:
    """Summarize a pydantic error as ``field: message`` pairs."""
    parts: list[str] = []
    for error in exc.errors():
        location = ".".join(str(loc) for loc in error["loc"])
        message = error["msg"].removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def _validate_hook(data: Mapping[str, Any]) -> EventHook:
    try:
        return EventHook.model_validate(dict(data))
    except ValidationError as e:
        raise HookValidationError(f"Invalid hook: {format_validation_error(e)}") from e


def load_hooks(path: Path) -> list[EventHook]:
    """Load hooks from ``path``, dropping entries that fail validation."""
    if not path.exists():
        return []

    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error("Failed to load event hooks config {path}: {error}", path=path, error=e)
        return []

    raw_hooks = document.get("hooks") if isinstance(document, dict) else None
    if not isinstance(raw_hooks, list):
        return []

    hooks: list[EventHook] = []
    seen: set[str] = set()
    for index, raw in enumerate(raw_hooks):
        if not isinstance(raw, dict):
            logger.warning("Skipping hook #{index}: not an object", index=index)
            continue
        try:
            hook = EventHook.model_validate(raw)
        except ValidationError as e:
            logger.warning(
                "Skipping invalid hook #{index} ({name}): {error}",
                index=index,
                name=raw.get("name"),
                error=format_validation_error(e),
            )
            continue
        if hook.name in seen:
            logger.warning("Skipping duplicate hook {name}", name=hook.name)
            continue
        seen.add(hook.name)
        hooks.append(hook)
    return hooks


def save_hooks(path: Path, hooks: list[EventHook]) -> None:
    """Atomically replace ``path`` with ``hooks``, readable by the owner only."""
    path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(EventHooksConfig(hooks=hooks).to_document(), indent=2) + "\n"

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    try:
        os.chmod(path, FILE_MODE)
    except OSError as e:
        # Platforms without POSIX permissions
        logger.debug("Could not chmod {path}: {error}", path=path, error=e)
    logger.debug("Saved {count} event hooks to {path}", count=len(hooks), path=path)


class HookStore:
    """CRUD access to the event hooks document at ``path``.

    Every call re-reads the document so that concurrent edits from other
    processes are picked up; every mutation rewrites it completely.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or get_event_hooks_config_path()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> list[EventHook]:
        return load_hooks(self._path)

    def _save(self, hooks: list[EventHook]) -> None:
        save_hooks(self._path, hooks)

    @staticmethod
    def _index_of(hooks: list[EventHook], name: str) -> int:
        for index, hook in enumerate(hooks):
            if hook.name == name:
                return index
        raise HookNotFoundError(name)

    def list(self) -> list[EventHook]:
        """All registered hooks, in registration order."""
        return self._load()

    def get(self, name: str) -> EventHook | None:
        return next((hook for hook in self._load() if hook.name == name), None)

    def hooks_for_event(self, event: EventType | str) -> list[EventHook]:
        """Enabled hooks subscribed to ``event``, in registration order."""
        event = EventType(event)
        return [hook for hook in self._load() if hook.enabled and hook.event == event]

    def add(self, hook: EventHook | Mapping[str, Any]) -> EventHook:
        """Register a new hook.

        Raises:
            DuplicateHookError: If a hook with the same name exists.
            HookValidationError: If the hook definition is invalid.
        """
        if isinstance(hook, EventHook):
            hook = _validate_hook(hook.model_dump(by_alias=True))
        else:
            hook = _validate_hook(hook)

        hooks = self._load()
        if any(h.name == hook.name for h in hooks):
            raise DuplicateHookError(hook.name)

        hooks.append(hook)
        self._save(hooks)
        logger.info("Added event hook {name} for {event}", name=hook.name, event=hook.event.value)
        return hook

    def update(self, name: str, updates: EventHookUpdate | Mapping[str, Any]) -> EventHook:
        """Apply the explicitly set fields of ``updates`` to hook ``name``.

        Raises:
            HookNotFoundError: If ``name`` is not registered.
            DuplicateHookError: If renaming onto an existing hook's name.
            HookValidationError: If the updated hook is invalid.
        """
        if not isinstance(updates, EventHookUpdate):
            try:
                updates = EventHookUpdate.model_validate(dict(updates))
            except ValidationError as e:
                raise HookValidationError(
                    f"Invalid hook update: {format_validation_error(e)}"
                ) from e

        hooks = self._load()
        index = self._index_of(hooks, name)
        changes = updates.model_dump(exclude_unset=True)

        new_name = changes.get("name")
        if new_name and new_name != name and any(h.name == new_name for h in hooks):
            raise DuplicateHookError(new_name)

        merged = {**hooks[index].model_dump(), **changes}
        hooks[index] = _validate_hook(merged)
        self._save(hooks)
        logger.info("Updated event hook {name}", name=name)
        return hooks[index]

    def remove(self, name: str) -> EventHook:
        """Unregister hook ``name`` and return its last definition.

        Raises:
            HookNotFoundError: If ``name`` is not registered.
        """
        hooks = self._load()
        removed = hooks.pop(self._index_of(hooks, name))
        self._save(hooks)
        logger.info("Removed event hook {name}", name=name)
        return removed

    def enable(self, name: str) -> EventHook:
        return self.update(name, EventHookUpdate(enabled=True))

    def disable(self, name: str) -> EventHook:
        return self.update(name, EventHookUpdate(enabled=False))
