"""Hook input parsing: stdin payloads and settings.json hook registrations."""

from __future__ import annotations

import json
import shlex
from pathlib import Path

from ..core.errors import PayloadError
from .models import HookPayload, HookRegistration


def parse_payload(text: str) -> HookPayload:
    """Parse one ``{tool_name, tool_input: {command}}`` document."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError) as e:
        raise PayloadError(f"malformed hook input: {e}") from e
    if not isinstance(data, dict):
        raise PayloadError("hook input must be a JSON object")

    tool_input = data.get("tool_input")
    command = tool_input.get("command") if isinstance(tool_input, dict) else None
    tool_name = data.get("tool_name")
    return HookPayload(
        tool_name=tool_name if isinstance(tool_name, str) else "",
        command=command if isinstance(command, str) else "",
        raw=data,
    )


def parse_registrations(data: dict) -> list[HookRegistration]:
    """Collect the PreToolUse command hooks of a Claude Code settings.json.

    Accepts the whole settings document or a bare ``{"PreToolUse": [...]}``
    section. Prompt hooks and malformed entries are skipped.
    """
    section = data.get("hooks", data)
    entries = section.get("PreToolUse") if isinstance(section, dict) else None
    if not isinstance(entries, list):
        return []

    found = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        matcher = entry.get("matcher", "*")
        for hook in entry.get("hooks", []):
            if not isinstance(hook, dict) or hook.get("type", "command") != "command":
                continue
            timeout = hook.get("timeout")
            found.append(
                HookRegistration(
                    matcher=str(matcher),
                    command=str(hook.get("command", "")),
                    timeout=timeout if isinstance(timeout, int) else None,
                )
            )
    return found


def guard_names(command: str) -> list[str] | None:
    """Guard names passed to ``dotctl hook`` in *command*.

    Returns None when *command* does not run ``dotctl hook``.
    """
    try:
        words = shlex.split(command)
    except ValueError:
        words = command.split()
    for i, word in enumerate(words):
        if Path(word).name != "dotctl":
            continue
        rest = [w for w in words[i + 1 :] if not w.startswith("-")]
        if rest and rest[0] == "hook":
            return rest[1:]
        return None
    return None


def registered_guards(
    registrations: list[HookRegistration],
) -> list[tuple[HookRegistration, list[str]]]:
    """Pair each Bash registration that runs ``dotctl hook`` with its guard names."""
    found = []
    for reg in registrations:
        if not reg.applies_to("Bash"):
            continue
        names = guard_names(reg.command)
        if names is not None:
            found.append((reg, names))
    return found
