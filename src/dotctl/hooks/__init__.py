"""Hooks: Claude Code PreToolUse guards."""

from .engine import evaluate, evaluate_all, repo_visibility, run_hook
from .models import ALLOW, DENY, Decision, GuardRule, HookPayload, HookRegistration
from .parser import guard_names, parse_payload, parse_registrations, registered_guards
from .rules import GUARD_RULES, RULE_NAMES, get_rules

__all__ = [
    "ALLOW",
    "DENY",
    "GUARD_RULES",
    "RULE_NAMES",
    "Decision",
    "GuardRule",
    "HookPayload",
    "HookRegistration",
    "evaluate",
    "evaluate_all",
    "get_rules",
    "guard_names",
    "parse_payload",
    "parse_registrations",
    "registered_guards",
    "repo_visibility",
    "run_hook",
]
