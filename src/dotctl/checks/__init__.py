"""Checks: pinned binary presence and versions."""

from .report import render_path_report, render_version_report
from .tools import EXPECTED_VERSIONS, TOOL_NAMES, TOOLS, ToolSpec
from .versions import (
    CheckReport,
    PathResult,
    VersionResult,
    check_paths,
    check_versions,
    extract_version,
    probe_version,
)

__all__ = [
    "EXPECTED_VERSIONS",
    "TOOLS",
    "TOOL_NAMES",
    "CheckReport",
    "PathResult",
    "ToolSpec",
    "VersionResult",
    "check_paths",
    "check_versions",
    "extract_version",
    "probe_version",
    "render_path_report",
    "render_version_report",
]
