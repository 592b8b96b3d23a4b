"""CLI verbose logging tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from audit_diff.cli import VERBOSE_HANDLER_NAME, main


@pytest.fixture
def package_logger() -> Iterator[logging.Logger]:
    logger = logging.getLogger("audit_diff")
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)


def _verbose_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if h.get_name() == VERBOSE_HANDLER_NAME]


def test_repeated_verbose_runs_install_a_single_handler(
    tmp_path: Path, package_logger: logging.Logger
) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("schema:\n  inline: '[]'\n", encoding="utf-8")
    argv = ["--verbose", "extract-metadata", "--config", str(config_path)]

    assert main(argv) == 0
    assert main(argv) == 0

    assert len(_verbose_handlers(package_logger)) == 1
    assert package_logger.level == logging.DEBUG


def test_verbose_flag_absent_installs_no_handler(
    tmp_path: Path, package_logger: logging.Logger
) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("schema:\n  inline: '[]'\n", encoding="utf-8")

    assert main(["extract-metadata", "--config", str(config_path)]) == 0

    assert _verbose_handlers(package_logger) == []
