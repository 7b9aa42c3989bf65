from __future__ import annotations


class GhpHooksError(Exception):
    """Base exception class for ghp event hooks."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class HookStoreError(GhpHooksError):
    """Hook store error."""

    pass


class HookValidationError(HookStoreError, ValueError):
    """Invalid hook definition."""

    pass


class DuplicateHookError(HookValidationError):
    """A hook with the same name is already registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Hook "{name}" already exists')


class HookNotFoundError(HookStoreError, LookupError):
    """No hook is registered under the given name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Hook "{name}" not found')
