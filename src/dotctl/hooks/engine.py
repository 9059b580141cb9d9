"""Guard evaluation: evaluate, evaluate_all, repo_visibility, run_hook."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path

from ..core.errors import PayloadError
from ..core.utils import one_line
from .models import ALLOW, DENY, Decision, GuardRule, HookPayload
from .parser import parse_payload

logger = logging.getLogger("dotctl.hooks")

VisibilityLookup = Callable[[], str]


def repo_visibility(cwd: Path | None = None, timeout: int = 10) -> str:
    """Return ``"true"`` (private), ``"false"`` (public) or ``"unknown"``."""
    try:
        r = subprocess.run(
            ["gh", "repo", "view", "--json", "isPrivate", "-q", ".isPrivate"],
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=cwd,
        )
    except (OSError, subprocess.SubprocessError):
        return "unknown"
    if r.returncode != 0:
        return "unknown"
    value = r.stdout.strip()
    return value if value in ("true", "false") else "unknown"


def evaluate(
    rule: GuardRule,
    payload: HookPayload,
    visibility: VisibilityLookup = repo_visibility,
) -> Decision:
    """Evaluate one guard. Non-Bash tools and empty commands are always allowed."""
    command = payload.command
    if not payload.is_bash or not command:
        return Decision()
    if not rule.triggered_by(command) or not rule.violated_by(command):
        return Decision()

    if rule.private_repo_only and visibility() not in ("true", "unknown"):
        return Decision()
    return Decision(permission=DENY, reason=rule.reason, rule=rule.name)


def evaluate_all(
    rules: list[GuardRule],
    payload: HookPayload,
    visibility: VisibilityLookup = repo_visibility,
) -> Decision:
    """Evaluate guards in order; the first deny wins."""
    for rule in rules:
        decision = evaluate(rule, payload, visibility)
        if decision.denied:
            return decision
    return Decision(permission=ALLOW)


def run_hook(
    rules: list[GuardRule],
    stdin_text: str,
    visibility: VisibilityLookup = repo_visibility,
) -> str:
    """Read one payload, return the text to print (empty means allow).

    Malformed input fails open.
    """
    try:
        payload = parse_payload(stdin_text)
    except PayloadError as e:
        logger.warning("%s -- failing open", e)
        return ""

    decision = evaluate_all(rules, payload, visibility)
    if decision.denied:
        logger.info("DENY: %s | Rule: %s", one_line(payload.command, 500), decision.rule)
    else:
        logger.debug("ALLOW: %s", one_line(payload.command))
    return decision.to_output()
