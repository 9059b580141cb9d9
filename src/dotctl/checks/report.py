"""Rich rendering for check reports."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from .versions import CheckReport, PathResult, VersionResult

PASS = "[green]✓[/green]"
FAIL = "[red]✗[/red]"


def _path_line(r: PathResult) -> str:
    if r.found:
        return f"  {PASS} {r.tool} found at {escape(r.path)}"
    return f"  {FAIL} {r.tool} not found in PATH"


def _version_line(r: VersionResult) -> str:
    if not r.found:
        return f"  {FAIL} {r.tool} not found in PATH"
    mark = PASS if r.ok else FAIL
    return f"  {mark} {r.tool} v{escape(r.actual)} (expected: v{escape(r.expected)})"


def render_path_report(console: Console, report: CheckReport) -> None:
    console.print("🔍 Checking binary availability in PATH...")
    console.print()
    for r in report.results:
        console.print(_path_line(r), highlight=False)
    console.print()
    if report.ok:
        console.print("[green]✅ All binaries found in PATH[/green]")
    else:
        console.print(f"[red]❌ {report.failed} binary(ies) missing from PATH[/red]")
        console.print(
            "[yellow]💡 Ensure ~/bin is in your PATH and binaries are installed[/yellow]"
        )


def render_version_report(console: Console, report: CheckReport) -> None:
    console.print("🔍 Checking binary versions against VERSIONS.md...")
    console.print()
    for r in report.results:
        console.print(f"Checking {r.tool}...", highlight=False)
        console.print(_version_line(r), highlight=False)
    console.print()
    if report.ok:
        console.print("[green]✅ All binary versions match VERSIONS.md[/green]")
    else:
        console.print(f"[red]❌ {report.failed} version mismatch(es) found[/red]")
        console.print("[yellow]💡 Check VERSIONS.md for expected versions[/yellow]")
