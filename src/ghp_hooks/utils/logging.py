"""Logging setup for ghp-hooks.

The package logs through loguru and stays silent until a sink is configured,
so importing it from another tool never writes anything.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from loguru import Record

PACKAGE = "ghp_hooks"
DEFAULT_LEVEL_KEY = "default"

logger.remove()


def level_number(level: str) -> int:
    """Resolve a level name such as ``info`` to its loguru severity."""
    try:
        return logger.level(level.strip().upper()).no
    except ValueError:
        raise ValueError(f"Invalid log level '{level}'") from None


def module_of(record: Record) -> str | None:
    """Lowercased dotted module path of ``record``, starting at the package root."""
    parts = [part.lower() for part in Path(record["file"].path).with_suffix("").parts]
    if PACKAGE in parts:
        return ".".join(parts[parts.index(PACKAGE) :])
    module = record.get("module")
    return module.lower() if module else None


class ModuleLevelFilter:
    """Keeps records at or above the level configured for their module.

    ``levels`` maps dotted module prefixes to severities. The longest matching
    prefix wins; ``"default"`` applies to everything else.
    """

    def __init__(self, levels: Mapping[str, int]) -> None:
        self.default = levels[DEFAULT_LEVEL_KEY]
        self.prefixes = sorted(
            ((prefix, no) for prefix, no in levels.items() if prefix != DEFAULT_LEVEL_KEY),
            key=lambda item: len(item[0]),
            reverse=True,
        )

    def threshold(self, module: str | None) -> int:
        if module:
            for prefix, no in self.prefixes:
                if module == prefix or module.startswith(prefix + "."):
                    return no
        return self.default

    def __call__(self, record: Record) -> bool:
        return record["level"].no >= self.threshold(module_of(record))


def configure_file_logging(
    log_file: Path,
    *,
    base_level: str,
    module_levels: Mapping[str, str] | None = None,
    rotation: str = "1 week",
    retention: str = "4 weeks",
) -> None:
    """Route ghp-hooks logs to a rotating ``log_file``.

    Args:
        log_file: Destination file; its directory is created if needed.
        base_level: Level for modules without an override.
        module_levels: Level names keyed by module prefix
            (``ghp_hooks.hooks.executor``), or by ``"default"`` to replace
            ``base_level``.

    Raises:
        ValueError: If a level name is unknown. Existing sinks are kept.
    """
    levels = {DEFAULT_LEVEL_KEY: level_number(base_level)}
    for module, level in (module_levels or {}).items():
        levels[module.strip().rstrip(".").lower() or DEFAULT_LEVEL_KEY] = level_number(level)

    logger.remove()
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="TRACE",
        rotation=rotation,
        retention=retention,
        encoding="utf-8",
        filter=ModuleLevelFilter(levels),
    )
    logger.debug("Logging to {path} with levels {levels}", path=log_file, levels=levels)
