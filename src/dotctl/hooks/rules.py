"""Built-in PreToolUse guards for git, gh, helm and kubectl commands."""

from __future__ import annotations

import re

from ..core.errors import ConfigError
from .models import GuardRule

_CLOSING_KEYWORD = re.compile(r"(Closes|Fixes|Resolves) #[0-9]+", re.IGNORECASE)
_GIT_COMMIT = re.compile(r"git commit", re.IGNORECASE)

KUBECTL_MUTATING_VERBS = (
    "apply",
    "delete",
    "patch",
    "edit",
    "create",
    "replace",
    "scale",
    "drain",
    "cordon",
    "uncordon",
    "exec",
    "rollout",
    "label",
    "annotate",
    "taint",
)

GUARD_RULES: tuple[GuardRule, ...] = (
    GuardRule(
        name="helm-version-required",
        trigger=re.compile(r"^\s*helm\s+(upgrade|install)\b", re.MULTILINE),
        requirement=re.compile(r"--version[ =]"),
        reason="helm upgrade/install requires --version flag. Pin chart version explicitly.",
    ),
    GuardRule(
        name="kubectl-context-required",
        trigger=re.compile(
            r"^\s*kubectl\s+(" + "|".join(KUBECTL_MUTATING_VERBS) + r")\b", re.MULTILINE
        ),
        requirement=re.compile(r"--context[ =]"),
        reason=(
            "kubectl mutating commands require --context flag. "
            "Verify target cluster before proceeding."
        ),
    ),
    GuardRule(
        name="no-closes-in-commits",
        trigger=_GIT_COMMIT,
        violation=_CLOSING_KEYWORD,
        reason=(
            'Use "Refs #N" instead of "Closes #N" in commit messages. '
            "Closing issues is a merge-time decision after peer review."
        ),
    ),
    GuardRule(
        name="no-closes-in-pr-body",
        trigger=re.compile(r"gh pr create", re.IGNORECASE),
        violation=_CLOSING_KEYWORD,
        reason=(
            'Use "Refs #N" or "Part of #N" instead of "Closes #N" in PR bodies. '
            "Closing issues is a merge-time decision after peer review."
        ),
    ),
    GuardRule(
        name="no-coauthor-private",
        trigger=_GIT_COMMIT,
        violation=re.compile(r"Co-Authored-By", re.IGNORECASE),
        private_repo_only=True,
        reason=(
            "NO Claude co-author on private or visibility-unknown repos. "
            "Remove the Co-Authored-By line."
        ),
    ),
    GuardRule(
        name="no-push-to-main",
        trigger=re.compile(r"git push", re.IGNORECASE),
        violation=re.compile(
            r"git push.*(origin|upstream)[^\S\n]+(main|master)\b", re.IGNORECASE
        ),
        reason="NEVER push to main or master. Push to a feature branch instead.",
    ),
    GuardRule(
        name="require-signed-commits",
        trigger=_GIT_COMMIT,
        requirement=re.compile(r"(--gpg-sign|-S)"),
        reason="All commits MUST be signed. Add --gpg-sign flag to git commit.",
    ),
)

RULE_NAMES = tuple(r.name for r in GUARD_RULES)


def get_rules(names: list[str] | tuple[str, ...] | None = None) -> list[GuardRule]:
    """Look up guards by name, in table order. ``None`` or ``"all"`` selects every guard."""
    if not names or "all" in names:
        return list(GUARD_RULES)
    unknown = [n for n in names if n not in RULE_NAMES]
    if unknown:
        raise ConfigError(f"unknown hook(s): {', '.join(unknown)}")
    return [r for r in GUARD_RULES if r.name in names]
