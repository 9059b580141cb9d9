"""Configuration: env, settings.json layering, paths, version pins."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from dotctl.checks import EXPECTED_VERSIONS, TOOL_NAMES
from dotctl.checks.versions import DEFAULT_TIMEOUT

from .errors import ConfigError

logger = logging.getLogger("dotctl.config")

PROJECT_DIR_NAME = ".dotctl"
HOOK_LOG_NAME = "dotctl-hook-blocks.log"

# Repository checkout root: src/dotctl/core/config.py -> repo. Only meaningful
# for a source checkout or editable install.
REPO_ROOT = Path(__file__).resolve().parents[3]


def default_source_dir(cwd: Path) -> Path:
    """The checkout's claude/ directory, else claude/ under *cwd*."""
    checkout = REPO_ROOT / "claude"
    if checkout.is_dir():
        return checkout
    return cwd / "claude"


@dataclass
class Config:
    cwd: Path = field(default_factory=Path.cwd)
    home: Path = field(default_factory=lambda: Path.home())
    global_dir: Path | None = None
    project_dir: Path | None = None  # explicit override; None = auto-detect from cwd
    source_dir: Path | None = None
    claude_dir: Path | None = None
    expected_versions: dict[str, str] = field(default_factory=lambda: dict(EXPECTED_VERSIONS))
    version_timeout: int = DEFAULT_TIMEOUT
    log_file: Path | None = None
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.global_dir is None:
            self.global_dir = self.home / PROJECT_DIR_NAME
        if self.claude_dir is None:
            self.claude_dir = self.home / ".claude"
        if self.source_dir is None:
            self.source_dir = default_source_dir(self.cwd)

    @property
    def hook_log_path(self) -> Path:
        if self.log_file is not None:
            return self.log_file
        return self.claude_dir / "logs" / HOOK_LOG_NAME

    @property
    def project_dirs(self) -> list[Path]:
        if self.project_dir is not None:
            return [self.project_dir] if self.project_dir.is_dir() else []
        d = self.cwd / PROJECT_DIR_NAME
        if d.is_dir() and d != self.global_dir:
            return [d]
        return []

    def set_expected(self, tool: str, version: str) -> None:
        if tool not in TOOL_NAMES:
            logger.warning("ignoring version pin for unknown tool %r", tool)
            return
        if not isinstance(version, str) or not version:
            raise ConfigError(f"expected version for {tool} must be a non-empty string")
        self.expected_versions[tool] = version.lstrip("v")


def _resolve(config: Config, value: str) -> Path:
    return (config.cwd / Path(value).expanduser()).resolve()


def _apply_settings(config: Config, path: Path) -> None:
    """Apply a single settings.json file to config."""
    if not path.exists():
        return
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("ignoring unreadable settings file %s: %s", path, e)
        return
    if not isinstance(data, dict):
        logger.warning("ignoring settings file %s: not a JSON object", path)
        return

    pins = data.get("expectedVersions")
    if isinstance(pins, dict):
        for tool, version in pins.items():
            config.set_expected(tool, version)
    if "versionTimeout" in data:
        timeout = data["versionTimeout"]
        if not isinstance(timeout, int) or timeout <= 0:
            raise ConfigError(f"versionTimeout in {path} must be a positive integer")
        config.version_timeout = timeout
    if "sourceDir" in data:
        config.source_dir = _resolve(config, data["sourceDir"])
    if "claudeDir" in data:
        config.claude_dir = _resolve(config, data["claudeDir"])
    if "logFile" in data:
        config.log_file = _resolve(config, data["logFile"])


def _apply_env(config: Config) -> None:
    for tool in TOOL_NAMES:
        if version := os.getenv(f"DOTCTL_EXPECTED_{tool.upper()}_VERSION"):
            config.set_expected(tool, version)
    if source := os.getenv("DOTCTL_SOURCE_DIR"):
        config.source_dir = _resolve(config, source)
    if claude := os.getenv("DOTCTL_CLAUDE_DIR"):
        config.claude_dir = _resolve(config, claude)
    if log_file := os.getenv("DOTCTL_LOG_FILE"):
        config.log_file = _resolve(config, log_file)


def load_config(
    verbose: bool = False,
    source_dir: Path | None = None,
    claude_dir: Path | None = None,
    strict: bool = True,
) -> Config:
    """Load config with priority: CLI args > env > .env > settings.json > defaults.

    With ``strict=False`` a settings file holding an invalid value is logged
    and the rest of that file is skipped instead of raising ``ConfigError``.
    """
    load_dotenv(find_dotenv(usecwd=True))

    config = Config()
    config.verbose = verbose

    for path in [config.global_dir, *config.project_dirs]:
        try:
            _apply_settings(config, path / "settings.json")
        except ConfigError as e:
            if strict:
                raise
            logger.warning("%s -- skipping rest of file", e)

    _apply_env(config)

    if source_dir is not None:
        config.source_dir = source_dir.resolve()
    if claude_dir is not None:
        config.claude_dir = claude_dir.resolve()

    return config
