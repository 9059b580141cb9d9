"""Hook data models: payloads, decisions, guard rules and settings.json registrations."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

ALLOW = "allow"
DENY = "deny"


@dataclass
class HookPayload:
    """One PreToolUse event as read from stdin."""

    tool_name: str = ""
    command: str = ""
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def is_bash(self) -> bool:
        return self.tool_name == "Bash"


@dataclass
class Decision:
    """Outcome of evaluating guards against a payload."""

    permission: str = ALLOW  # "allow" | "deny"
    reason: str = ""
    rule: str = ""

    @property
    def denied(self) -> bool:
        return self.permission == DENY

    def to_output(self) -> str:
        """Render the hook protocol JSON; allow renders nothing."""
        if not self.denied:
            return ""
        return json.dumps(
            {
                "hookSpecificOutput": {
                    "hookEventName": "PreToolUse",
                    "permissionDecision": DENY,
                    "permissionDecisionReason": self.reason,
                }
            },
            indent=2,
        )


@dataclass
class GuardRule:
    """A command guard.

    Fires on Bash commands matching ``trigger``. Once fired it denies when
    ``violation`` matches, or when ``requirement`` does not. Rules marked
    ``private_repo_only`` additionally need the repository to be private or
    of unknown visibility. Visibility is looked up last.
    """

    name: str
    trigger: re.Pattern
    reason: str
    violation: re.Pattern | None = None
    requirement: re.Pattern | None = None
    private_repo_only: bool = False

    def triggered_by(self, command: str) -> bool:
        return self.trigger.search(command) is not None

    def violated_by(self, command: str) -> bool:
        if self.violation is not None and self.violation.search(command) is None:
            return False
        if self.requirement is not None and self.requirement.search(command) is not None:
            return False
        return True


@dataclass
class HookRegistration:
    """A PreToolUse command hook as registered in settings.json."""

    matcher: str  # tool-name regex, "*" or "" for any tool
    command: str
    timeout: int | None = None

    def applies_to(self, tool_name: str) -> bool:
        if self.matcher in ("*", ""):
            return True
        try:
            return re.search(self.matcher, tool_name) is not None
        except re.error:
            return self.matcher == tool_name
