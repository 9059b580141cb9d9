"""PATH and version checks for the pinned binaries."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

from .tools import EXPECTED_VERSIONS, TOOLS, ToolSpec

logger = logging.getLogger("dotctl.checks")

SEMVER_RE = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+")
DEFAULT_TIMEOUT = 10

Which = Callable[[str], "str | None"]
Runner = Callable[[ToolSpec, str, int], str]


@dataclass
class PathResult:
    tool: str
    path: str | None = None

    @property
    def found(self) -> bool:
        return self.path is not None

    @property
    def ok(self) -> bool:
        return self.found


@dataclass
class VersionResult:
    tool: str
    expected: str
    actual: str = ""
    path: str | None = None

    @property
    def found(self) -> bool:
        return self.path is not None

    @property
    def ok(self) -> bool:
        return self.found and self.actual == self.expected


@dataclass
class CheckReport:
    results: list = field(default_factory=list)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)

    @property
    def ok(self) -> bool:
        return self.failed == 0


def extract_version(output: str, line_filter: str | None = None) -> str:
    """Return the first MAJOR.MINOR.PATCH in *output*, or ``""``."""
    if line_filter is not None:
        output = "\n".join(line for line in output.splitlines() if line_filter in line)
    m = SEMVER_RE.search(output)
    return m.group(0) if m else ""


def probe_version(spec: ToolSpec, path: str, timeout: int = DEFAULT_TIMEOUT) -> str:
    """Run *spec*'s version command (stderr merged) and extract its version."""
    argv = [path, *spec.version_args[1:]]
    try:
        r = subprocess.run(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning("%s: version command timed out after %ss", spec.name, timeout)
        return ""
    except OSError as e:
        logger.warning("%s: could not run version command: %s", spec.name, e)
        return ""
    return extract_version(r.stdout or "", spec.line_filter)


def check_paths(tools: Iterable[ToolSpec] = TOOLS, which: Which = shutil.which) -> CheckReport:
    return CheckReport([PathResult(t.name, which(t.name)) for t in tools])


def check_versions(
    tools: Iterable[ToolSpec] = TOOLS,
    expected: Mapping[str, str] | None = None,
    which: Which = shutil.which,
    runner: Runner = probe_version,
    timeout: int = DEFAULT_TIMEOUT,
) -> CheckReport:
    """Compare each tool's reported version to its pin by exact string equality.

    Tools missing from PATH fail without being probed.
    """
    expected = EXPECTED_VERSIONS if expected is None else expected
    report = CheckReport()
    for spec in tools:
        result = VersionResult(spec.name, expected.get(spec.name, ""), path=which(spec.name))
        if result.found:
            result.actual = runner(spec, result.path, timeout)
            logger.debug("%s: actual=%r expected=%r", spec.name, result.actual, result.expected)
        report.results.append(result)
    return report
