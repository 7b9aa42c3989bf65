from __future__ import annotations

from ghp_hooks.hooks.config import HookExitCodes
from ghp_hooks.hooks.models import HookOutcome

DEFAULT_SUCCESS_CODES: tuple[int, ...] = (0,)
DEFAULT_WARN_CODES: tuple[int, ...] = ()


def classify_exit_code(
    exit_code: int | None, exit_codes: HookExitCodes | None = None
) -> HookOutcome:
    """Classify a process exit code using the hook's exit code policy.

    Unset lists in ``exit_codes`` keep their defaults (success=[0], abort=[1],
    warn=[]). A ``None`` exit code (killed by a signal, including timeouts) always
    aborts. A code listed in several sets resolves success first, then warn, then
    abort. Codes not listed anywhere abort.
    """
    if exit_code is None:
        return HookOutcome.ABORT

    policy = exit_codes or HookExitCodes()
    success = DEFAULT_SUCCESS_CODES if policy.success is None else policy.success
    warn = DEFAULT_WARN_CODES if policy.warn is None else policy.warn

    if exit_code in success:
        return HookOutcome.SUCCESS
    if exit_code in warn:
        return HookOutcome.WARN
    # listed abort codes and unlisted codes alike
    return HookOutcome.ABORT
