"""Link the assistant configuration from this checkout into ~/.claude."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from .core.config import Config
from .core.errors import InstallError

logger = logging.getLogger("dotctl.install")

LINKED_FILES = ("CLAUDE.md", "settings.json")
LINKED_DIRS = ("hooks", "skills")


@dataclass
class LinkResult:
    name: str
    source: Path
    target: Path
    status: str  # "linked" | "skipped"


def _remove(target: Path, allow_tree: bool) -> None:
    if target.is_symlink() or target.is_file():
        target.unlink()
    elif target.is_dir():
        if not allow_tree:
            raise InstallError(f"refusing to replace directory {target} with a file link")
        shutil.rmtree(target)


def _link(source: Path, target: Path, allow_tree: bool) -> None:
    try:
        _remove(target, allow_tree)
        target.symlink_to(source, target_is_directory=source.is_dir())
    except OSError as e:
        raise InstallError(f"could not link {target} -> {source}: {e}") from e


def install_claude(config: Config) -> list[LinkResult]:
    """Symlink CLAUDE.md, settings.json, hooks/ and skills/ into the claude dir.

    Existing targets are replaced. Real directories are only replaced at the
    hooks/ and skills/ targets. Sources that do not exist in the checkout are
    skipped.
    """
    source_dir = config.source_dir.resolve()
    if not source_dir.is_dir():
        raise InstallError(f"configuration source not found: {source_dir}")

    target_dir = config.claude_dir
    if target_dir.resolve() == source_dir:
        raise InstallError(f"source and target are the same directory: {source_dir}")
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InstallError(f"could not create {target_dir}: {e}") from e

    results = []
    for name in (*LINKED_FILES, *LINKED_DIRS):
        source = source_dir / name
        target = target_dir / name
        expect_dir = name in LINKED_DIRS
        if not source.exists() or source.is_dir() != expect_dir:
            logger.info("skipping %s: not present in %s", name, source_dir)
            results.append(LinkResult(name, source, target, "skipped"))
            continue
        _link(source, target, allow_tree=expect_dir)
        logger.debug("linked %s -> %s", target, source)
        results.append(LinkResult(name, source, target, "linked"))
    return results
