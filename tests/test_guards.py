"""Tests for the built-in guards and the evaluation engine."""

import json
import logging
import re
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from dotctl.core.errors import ConfigError
from dotctl.hooks import (
    GUARD_RULES,
    RULE_NAMES,
    GuardRule,
    HookPayload,
    evaluate,
    evaluate_all,
    get_rules,
    repo_visibility,
    run_hook,
)
from dotctl.hooks.rules import KUBECTL_MUTATING_VERBS


def _public():
    return "false"


def _decide(name, command, tool="Bash", visibility=_public):
    payload = HookPayload(tool_name=tool, command=command)
    return evaluate_all(get_rules([name]), payload, visibility)


def _denied(name, command, **kw):
    return _decide(name, command, **kw).denied


# ── helm ────────────────────────────────────────────────────────────


class TestHelmVersionRequired:
    NAME = "helm-version-required"

    def test_install_without_version_denied(self):
        d = _decide(self.NAME, "helm install web bitnami/nginx")
        assert d.denied
        assert "--version" in d.reason

    def test_upgrade_without_version_denied(self):
        assert _denied(self.NAME, "helm upgrade --install web bitnami/nginx -n web")

    def test_version_with_space_allowed(self):
        assert not _denied(self.NAME, "helm upgrade web bitnami/nginx --version 15.1.0")

    def test_version_with_equals_allowed(self):
        assert not _denied(self.NAME, "helm install web bitnami/nginx --version=15.1.0")

    def test_bare_trailing_version_flag_denied(self):
        assert _denied(self.NAME, "helm install web bitnami/nginx --version")

    def test_leading_whitespace(self):
        assert _denied(self.NAME, "   helm install web bitnami/nginx")

    def test_later_line_of_multiline_command(self):
        assert _denied(self.NAME, "helm repo update\nhelm upgrade web bitnami/nginx")

    def test_not_at_start_of_line_allowed(self):
        assert not _denied(self.NAME, "echo helm install web bitnami/nginx")

    def test_other_subcommands_allowed(self):
        assert not _denied(self.NAME, "helm template web bitnami/nginx")
        assert not _denied(self.NAME, "helm list -A")

    def test_word_boundary(self):
        assert not _denied(self.NAME, "helm installer web")


# ── kubectl ─────────────────────────────────────────────────────────


class TestKubectlContextRequired:
    NAME = "kubectl-context-required"

    @pytest.mark.parametrize("verb", KUBECTL_MUTATING_VERBS)
    def test_mutating_verbs_denied(self, verb):
        assert _denied(self.NAME, f"kubectl {verb} something")

    @pytest.mark.parametrize("verb", KUBECTL_MUTATING_VERBS)
    def test_mutating_verbs_with_context_allowed(self, verb):
        assert not _denied(self.NAME, f"kubectl {verb} something --context prod")

    def test_context_with_equals_allowed(self):
        assert not _denied(self.NAME, "kubectl apply -f deploy.yaml --context=staging")

    def test_read_only_allowed(self):
        assert not _denied(self.NAME, "kubectl get pods -A")
        assert not _denied(self.NAME, "kubectl logs -f web-0")

    def test_reason(self):
        d = _decide(self.NAME, "kubectl delete pod web-0")
        assert d.reason.startswith("kubectl mutating commands require --context flag")


# ── closing keywords ────────────────────────────────────────────────


class TestNoClosesInCommits:
    NAME = "no-closes-in-commits"

    def test_closes_denied(self):
        assert _denied(self.NAME, 'git commit -S -m "Fix parser\n\nCloses #12"')

    @pytest.mark.parametrize("keyword", ["fixes", "RESOLVES", "Closes"])
    def test_keywords_case_insensitive(self, keyword):
        assert _denied(self.NAME, f'git commit -S -m "{keyword} #7"')

    def test_trigger_case_insensitive(self):
        assert _denied(self.NAME, 'GIT COMMIT -m "closes #1"')

    def test_refs_allowed(self):
        assert not _denied(self.NAME, 'git commit -S -m "Parser fix\n\nRefs #12"')

    def test_requires_issue_number(self):
        assert not _denied(self.NAME, 'git commit -S -m "Closes #abc"')

    def test_non_commit_allowed(self):
        assert not _denied(self.NAME, 'git log --grep "Closes #12"')

    def test_reason_suggests_refs(self):
        assert '"Refs #N"' in _decide(self.NAME, 'git commit -m "Closes #1"').reason


class TestNoClosesInPrBody:
    NAME = "no-closes-in-pr-body"

    def test_closes_in_body_denied(self):
        d = _decide(self.NAME, 'gh pr create --title "Parser" --body "Closes #4"')
        assert d.denied
        assert "Part of #N" in d.reason

    def test_part_of_allowed(self):
        assert not _denied(self.NAME, 'gh pr create --title "Parser" --body "Part of #4"')

    def test_other_gh_commands_allowed(self):
        assert not _denied(self.NAME, 'gh pr edit 5 --body "Closes #4"')


# ── co-author ───────────────────────────────────────────────────────


class TestNoCoauthorPrivate:
    NAME = "no-coauthor-private"
    COMMAND = 'git commit -S -m "Parser\n\nCo-Authored-By: Someone <s@example.com>"'

    def test_private_repo_denied(self):
        assert _denied(self.NAME, self.COMMAND, visibility=lambda: "true")

    def test_unknown_visibility_denied(self):
        assert _denied(self.NAME, self.COMMAND, visibility=lambda: "unknown")

    def test_public_repo_allowed(self):
        assert not _denied(self.NAME, self.COMMAND, visibility=lambda: "false")

    def test_trailer_case_insensitive(self):
        cmd = 'git commit -S -m "x\n\nco-authored-by: a <a@b>"'
        assert _denied(self.NAME, cmd, visibility=lambda: "true")

    def test_visibility_not_queried_without_trailer(self):
        lookup = MagicMock(return_value="true")
        assert not _denied(self.NAME, 'git commit -S -m "plain"', visibility=lookup)
        lookup.assert_not_called()

    def test_visibility_not_queried_for_other_commands(self):
        lookup = MagicMock(return_value="true")
        assert not _denied(self.NAME, "echo Co-Authored-By", visibility=lookup)
        lookup.assert_not_called()


# ── push ────────────────────────────────────────────────────────────


class TestNoPushToMain:
    NAME = "no-push-to-main"

    @pytest.mark.parametrize(
        "command",
        [
            "git push origin main",
            "git push upstream master",
            "git push --force-with-lease origin main",
            "GIT PUSH ORIGIN MAIN",
            "echo start\ngit push origin main",
        ],
    )
    def test_denied(self, command):
        assert _denied(self.NAME, command)

    @pytest.mark.parametrize(
        "command",
        [
            "git push",
            "git push origin feature/parser",
            "git push -u origin mainline",
            "git push fork main",
            "git push origin\nmain",
            "git push upstream \n master",
        ],
    )
    def test_allowed(self, command):
        assert not _denied(self.NAME, command)


# ── signing ─────────────────────────────────────────────────────────


class TestRequireSignedCommits:
    NAME = "require-signed-commits"

    def test_unsigned_denied(self):
        d = _decide(self.NAME, 'git commit -m "Parser"')
        assert d.denied
        assert "--gpg-sign" in d.reason

    def test_short_flag_allowed(self):
        assert not _denied(self.NAME, 'git commit -S -m "Parser"')

    def test_long_flag_allowed(self):
        assert not _denied(self.NAME, 'git commit --gpg-sign -m "Parser"')

    def test_signoff_is_not_signing(self):
        assert _denied(self.NAME, 'git commit -s -m "Parser"')

    def test_non_commit_allowed(self):
        assert not _denied(self.NAME, "git status")


# ── Engine ──────────────────────────────────────────────────────────


class TestEvaluate:
    def test_non_bash_tool_allowed(self):
        for rule in GUARD_RULES:
            payload = HookPayload(tool_name="Write", command="git push origin main")
            assert not evaluate(rule, payload, _public).denied

    def test_empty_command_allowed(self):
        for rule in GUARD_RULES:
            assert not evaluate(rule, HookPayload(tool_name="Bash"), _public).denied

    def test_decision_names_rule(self):
        rule = get_rules(["no-push-to-main"])[0]
        d = evaluate(rule, HookPayload("Bash", "git push origin main"), _public)
        assert d.rule == "no-push-to-main"

    def test_trigger_only_rule_denies(self):
        rule = GuardRule(name="no-rm", trigger=re.compile(r"^rm\b"), reason="no rm")
        assert evaluate(rule, HookPayload("Bash", "rm -rf build"), _public).denied

    def test_private_repo_only_rule(self):
        rule = GuardRule(
            name="gated", trigger=re.compile("deploy"), reason="r", private_repo_only=True
        )
        payload = HookPayload("Bash", "deploy")
        assert not evaluate(rule, payload, _public).denied
        assert evaluate(rule, payload, lambda: "true").denied


class TestEvaluateAll:
    def test_first_deny_wins(self):
        payload = HookPayload("Bash", 'git commit -m "Closes #1"')
        d = evaluate_all(list(GUARD_RULES), payload, _public)
        assert d.rule == "no-closes-in-commits"

    def test_all_pass(self):
        payload = HookPayload("Bash", 'git commit --gpg-sign -m "Refs #1"')
        assert not evaluate_all(list(GUARD_RULES), payload, _public).denied


class TestGetRules:
    def test_all(self):
        assert [r.name for r in get_rules(["all"])] == list(RULE_NAMES)
        assert [r.name for r in get_rules()] == list(RULE_NAMES)

    def test_table_order_kept(self):
        names = [r.name for r in get_rules(["require-signed-commits", "helm-version-required"])]
        assert names == ["helm-version-required", "require-signed-commits"]

    def test_unknown_raises(self):
        with pytest.raises(ConfigError, match="nope"):
            get_rules(["nope"])


class TestRunHook:
    def _stdin(self, command, tool="Bash"):
        return json.dumps({"tool_name": tool, "tool_input": {"command": command}})

    def test_allow_prints_nothing(self):
        assert run_hook(list(GUARD_RULES), self._stdin("ls -la"), _public) == ""

    def test_deny_prints_decision(self):
        out = run_hook(get_rules(["no-push-to-main"]), self._stdin("git push origin main"))
        hso = json.loads(out)["hookSpecificOutput"]
        assert hso["permissionDecision"] == "deny"
        assert hso["hookEventName"] == "PreToolUse"

    def test_malformed_input_fails_open(self, caplog):
        caplog.set_level(logging.WARNING, logger="dotctl.hooks")
        assert run_hook(list(GUARD_RULES), "not json", _public) == ""
        assert "failing open" in caplog.text

    def test_deny_is_logged(self, caplog):
        caplog.set_level(logging.INFO, logger="dotctl.hooks")
        run_hook(get_rules(["no-push-to-main"]), self._stdin("git push origin main"))
        assert "DENY: git push origin main | Rule: no-push-to-main" in caplog.text


class TestRepoVisibility:
    def _completed(self, returncode=0, stdout=""):
        return MagicMock(returncode=returncode, stdout=stdout, stderr="")

    @pytest.mark.parametrize("value", ["true", "false"])
    def test_reported_value(self, value):
        completed = self._completed(0, value + "\n")
        with patch("dotctl.hooks.engine.subprocess.run", return_value=completed):
            assert repo_visibility() == value

    def test_gh_failure(self):
        with patch("dotctl.hooks.engine.subprocess.run", return_value=self._completed(1)):
            assert repo_visibility() == "unknown"

    def test_gh_missing(self):
        with patch("dotctl.hooks.engine.subprocess.run", side_effect=FileNotFoundError("gh")):
            assert repo_visibility() == "unknown"

    def test_gh_timeout(self):
        err = subprocess.TimeoutExpired(cmd="gh", timeout=10)
        with patch("dotctl.hooks.engine.subprocess.run", side_effect=err):
            assert repo_visibility() == "unknown"

    def test_unexpected_output(self):
        with patch("dotctl.hooks.engine.subprocess.run", return_value=self._completed(0, "null")):
            assert repo_visibility() == "unknown"

    def test_invokes_gh(self):
        with patch(
            "dotctl.hooks.engine.subprocess.run", return_value=self._completed(0, "false")
        ) as run:
            repo_visibility()
        argv = run.call_args[0][0]
        assert argv == ["gh", "repo", "view", "--json", "isPrivate", "-q", ".isPrivate"]
