"""Pinned binaries: how to ask each one for its version, and what to expect."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ToolSpec:
    name: str
    version_args: tuple[str, ...]
    line_filter: str | None = None  # only lines containing this count


TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec("kubectx", ("kubectx", "--version")),
    ToolSpec("kubens", ("kubens", "--version")),
    ToolSpec("stern", ("stern", "--version")),
    # k9s prints several versions (Go, commit date...); only the Version line counts
    ToolSpec("k9s", ("k9s", "version", "-s"), line_filter="Version"),
    ToolSpec("helm", ("helm", "version", "--short")),
    ToolSpec("istioctl", ("istioctl", "version", "--remote=false")),
)

# Keep in sync with VERSIONS.md
EXPECTED_VERSIONS: dict[str, str] = {
    "kubectx": "0.9.5",
    "kubens": "0.9.5",
    "stern": "1.33.0",
    "k9s": "0.50.16",
    "helm": "3.11.1",
    "istioctl": "1.27.3",
}

TOOL_NAMES = tuple(t.name for t in TOOLS)
