"""CLI entry point: binary checks, config install and PreToolUse guard hooks."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape

from .checks import (
    TOOLS,
    check_paths,
    check_versions,
    render_path_report,
    render_version_report,
)
from .core.config import Config, load_config
from .core.errors import DotctlError
from .core.log import hook_logger, setup_logging
from .core.utils import one_line, short_path
from .hooks import RULE_NAMES, get_rules, parse_registrations, registered_guards, run_hook
from .install import install_claude

console = Console(soft_wrap=True)

EPILOG = "Fair seas and following winds ⚓🌊⛵"


def _fail(e: Exception) -> NoReturn:
    console.print(f"error: {e}", style="bold")
    sys.exit(1)


# ── Checks ──────────────────────────────────────────────────────────


def _run_paths_check() -> bool:
    report = check_paths(TOOLS)
    render_path_report(console, report)
    return report.ok


def _run_version_check(config: Config) -> bool:
    report = check_versions(
        TOOLS, config.expected_versions, timeout=config.version_timeout
    )
    render_version_report(console, report)
    return report.ok


# ── CLI ─────────────────────────────────────────────────────────────


@click.group(epilog=EPILOG)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """dotctl: dotfiles checks, config install and assistant guard hooks."""
    setup_logging(verbose)
    # guards must keep answering even when a settings file is invalid
    strict = ctx.invoked_subcommand != "hook"
    try:
        ctx.obj = load_config(verbose=verbose, strict=strict)
    except DotctlError as e:
        _fail(e)


@cli.command("bin-version-check")
@click.pass_obj
def bin_version_check(config: Config):
    """Verify installed binary versions match VERSIONS.md"""
    if not _run_version_check(config):
        sys.exit(1)


@cli.command("bin-paths-check")
@click.pass_obj
def bin_paths_check(config: Config):
    """Verify all required binaries are in PATH"""
    if not _run_paths_check():
        sys.exit(1)


@cli.command("all-checks")
@click.pass_obj
def all_checks(config: Config):
    """Run all validation checks"""
    if not _run_paths_check():
        sys.exit(1)
    if not _run_version_check(config):
        sys.exit(1)
    console.print()
    console.print("[green]✅ All checks passed![/green]")


@cli.command("install-claude")
@click.option(
    "--source",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding CLAUDE.md, settings.json, hooks/ and skills/",
)
@click.option(
    "--target",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to link into (default ~/.claude)",
)
@click.pass_obj
def install_claude_cmd(config: Config, source: Path | None, target: Path | None):
    """Symlink Claude Code configuration to ~/.claude"""
    if source is not None:
        config.source_dir = source.resolve()
    if target is not None:
        config.claude_dir = target.resolve()

    console.print("🔧 Installing Claude Code configuration...")
    try:
        results = install_claude(config)
    except DotctlError as e:
        _fail(e)
    for r in results:
        if r.status == "skipped":
            console.print(f"  [dim]skipped {r.name} (not in {r.source.parent})[/dim]")
        elif config.verbose:
            console.print(f"  [dim]{r.target} -> {r.source}[/dim]", highlight=False)
    console.print(
        f"[green]✅ Claude Code configuration linked to {config.claude_dir}[/green]",
        highlight=False,
    )


@cli.command("hook")
@click.argument("names", nargs=-1, required=True, type=click.Choice([*RULE_NAMES, "all"]))
@click.pass_obj
def hook_cmd(config: Config, names: tuple[str, ...]):
    """Evaluate PreToolUse guards against the JSON payload on stdin.

    Prints a deny decision, or nothing when the command is allowed.
    """
    hook_logger(config.hook_log_path)
    stdin = click.get_text_stream("stdin").read()
    output = run_hook(get_rules(list(names)), stdin)
    if output:
        click.echo(output)


@cli.group("hooks")
def hooks_group():
    """Inspect guard hooks."""


@hooks_group.command("list")
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="settings.json to inspect (default: the installed one)",
)
@click.pass_obj
def hooks_list(config: Config, settings_path: Path | None):
    """List available guards and where settings.json registers them."""
    path = settings_path or config.claude_dir / "settings.json"
    registered: dict[str, list[str]] = {}
    unknown: list[str] = []
    if path.exists():
        try:
            data = json.loads(path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            _fail(DotctlError(f"cannot read {path}: {e}"))
        if not isinstance(data, dict):
            _fail(DotctlError(f"{path} is not a JSON object"))
        for reg, names in registered_guards(parse_registrations(data)):
            where = reg.matcher if reg.timeout is None else f"{reg.matcher} ({reg.timeout}s)"
            for name in names:
                if name == "all":
                    for rule_name in RULE_NAMES:
                        registered.setdefault(rule_name, []).append(where)
                elif name in RULE_NAMES:
                    registered.setdefault(name, []).append(where)
                else:
                    unknown.append(f"{name} ({one_line(reg.command, 60)})")

    console.print(f"[dim]{short_path(path)}[/dim]", highlight=False)
    for name in RULE_NAMES:
        matchers = registered.get(name)
        if matchers:
            status = f"[green]on[/green]  [dim]matcher: {escape(', '.join(matchers))}[/dim]"
        else:
            status = "[dim]off[/dim]"
        console.print(f"  [bold]{name:<26}[/bold] {status}", highlight=False)
    for entry in unknown:
        console.print(f"  [red]unknown guard:[/red] {escape(entry)}", highlight=False)
    if unknown:
        sys.exit(1)


def main():
    cli()


if __name__ == "__main__":
    main()
