"""Path and text display helpers."""

from __future__ import annotations

from pathlib import Path


def short_path(p: Path, home: Path | None = None) -> str:
    """Return *p* relative to the home directory, using ~ prefix."""
    try:
        rel = p.relative_to(home or Path.home())
        return f"~/{rel}" if str(rel) != "." else "~"
    except ValueError:
        return str(p)


def one_line(text: str, limit: int = 120) -> str:
    """Collapse whitespace runs (newlines included) and cap at *limit* chars."""
    flat = " ".join(text.split())
    if len(flat) <= limit:
        return flat
    return flat[: limit - 3] + "..."
