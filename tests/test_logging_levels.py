import types
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

import click
import pytest
from loguru import logger

from ghp_hooks.cli import _parse_log_level_overrides
from ghp_hooks.utils.logging import ModuleLevelFilter, configure_file_logging

if TYPE_CHECKING:
    from loguru import Record
else:  # pragma: no cover - typing fallback
    Record = dict[str, Any]  # type: ignore[assignment]


def _make_record(path: str, level_no: int) -> "Record":
    return cast(
        Record,
        {
            "file": types.SimpleNamespace(path=path, name=Path(path).name),
            "level": types.SimpleNamespace(name="X", no=level_no, icon=""),
            "module": Path(path).stem,
        },
    )


def test_parse_log_level_overrides_accepts_default_and_modules():
    overrides = _parse_log_level_overrides(
        (
            "debug",
            " ghp_hooks.hooks = warning ",
            "ghp_hooks.hooks.executor=TRACE",
        )
    )
    assert overrides == {
        "default": "debug",
        "ghp_hooks.hooks": "warning",
        "ghp_hooks.hooks.executor": "TRACE",
    }


def test_parse_log_level_overrides_is_case_insensitive():
    overrides = _parse_log_level_overrides(("GHP_HOOKS.Hooks=info",))
    assert overrides == {"ghp_hooks.hooks": "info"}


@pytest.mark.parametrize("value", ["=INFO", "", "ghp_hooks.hooks="])
def test_parse_log_level_overrides_rejects_incomplete_entries(value: str):
    with pytest.raises(click.BadOptionUsage):
        _parse_log_level_overrides((value,))


def test_module_level_filter_prefers_more_specific_prefix():
    levels = {
        "default": 30,
        "ghp_hooks.hooks": 20,
        "ghp_hooks.hooks.executor": 10,
    }
    module_filter = ModuleLevelFilter(levels)

    record = _make_record("/tmp/src/ghp_hooks/hooks/executor.py", 15)
    assert module_filter(record) is True  # threshold 10

    record_low = _make_record("/tmp/src/ghp_hooks/hooks/store.py", 15)
    assert module_filter(record_low) is False  # threshold 20

    record_default = _make_record("/tmp/src/ghp_hooks/cli.py", 25)
    assert module_filter(record_default) is False  # default threshold 30


def test_module_level_filter_is_case_insensitive():
    module_filter = ModuleLevelFilter({"default": 30, "ghp_hooks.hooks": 20})
    record = _make_record("/tmp/src/GHP_HOOKS/Hooks/store.py", 25)
    assert module_filter(record) is True


def test_configure_file_logging_writes_filtered_records(tmp_path: Path):
    log_file = tmp_path / "logs" / "ghp-hooks.log"
    configure_file_logging(log_file, base_level="WARNING")

    logger.info("quiet message")
    logger.warning("loud message")
    logger.complete()

    content = log_file.read_text(encoding="utf-8")
    assert "loud message" in content
    assert "quiet message" not in content


def test_configure_file_logging_rejects_unknown_level(tmp_path: Path):
    with pytest.raises(ValueError, match="Invalid log level 'LOUD'"):
        configure_file_logging(tmp_path / "x.log", base_level="INFO", module_levels={"a": "LOUD"})


def test_records_outside_the_package_use_their_module_name():
    module_filter = ModuleLevelFilter({"default": 30, "helpers": 10})
    assert module_filter(_make_record("/elsewhere/helpers.py", 15)) is True
    assert module_filter(_make_record("/elsewhere/other.py", 15)) is False
