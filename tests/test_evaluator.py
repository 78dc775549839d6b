"""Tests for commitwatch.matching.evaluator — tier precedence and attribution."""

import pytest

from commitwatch.config.models import FileRule, NotificationRule
from commitwatch.matching.evaluator import evaluate
from commitwatch.vcs.models import ChangedFile


@pytest.fixture
def rule_factory(repo_ref):
    def _make(file_rules=(), message_patterns=None):
        return NotificationRule(
            repository=repo_ref,
            file_rules=list(file_rules),
            message_patterns=message_patterns,
        )

    return _make


def _file(name, patch=None, additions=1, deletions=0):
    return ChangedFile(filename=name, additions=additions, deletions=deletions, patch=patch)


# ── scenarios ───────────────────────────────────────────────────────


class TestScenarios:
    def test_path_only_rule(self, rule_factory, make_commit):
        rule = rule_factory([FileRule(path_pattern="auth")])
        commit = make_commit("a1", files=[_file("src/auth/login.go")])

        results = evaluate(rule, commit)

        assert len(results) == 1
        assert results[0].matched_at == "file"
        assert results[0].patterns_matched == []
        assert results[0].file.filename == "src/auth/login.go"
        assert results[0].repository == rule.repository

    def test_path_and_content_rule(self, rule_factory, make_commit):
        rule = rule_factory([FileRule(path_pattern="config", content_patterns=["timeout"])])
        commit = make_commit(
            "b2", files=[_file("config/app.yaml", patch="+session_timeout=30")]
        )

        results = evaluate(rule, commit)

        assert len(results) == 1
        assert results[0].matched_at == "file"
        assert results[0].patterns_matched == ["timeout"]

    def test_message_rule_skips_file_tier(self, rule_factory, make_commit):
        rule = rule_factory([FileRule(path_pattern="auth")], message_patterns=["CVE-"])
        commit = make_commit(
            "c3", message="Fix CVE-2024-0001", files=[_file("src/auth/login.go")]
        )

        results = evaluate(rule, commit)

        assert len(results) == 1
        assert results[0].matched_at == "message"
        assert results[0].patterns_matched == ["CVE-"]
        assert results[0].file is None


# ── message tier ────────────────────────────────────────────────────


class TestMessageTier:
    def test_first_listed_pattern_wins(self, rule_factory, make_commit):
        rule = rule_factory(message_patterns=["security", "CVE-"])
        results = evaluate(rule, make_commit("m1", message="CVE-1: security fix"))
        assert [r.patterns_matched for r in results] == [["security"]]

    def test_message_miss_falls_through_to_files(self, rule_factory, make_commit):
        rule = rule_factory([FileRule(path_pattern="auth")], message_patterns=["CVE-"])
        commit = make_commit("m2", message="refactor", files=[_file("auth.py")])
        results = evaluate(rule, commit)
        assert [r.matched_at for r in results] == ["file"]

    def test_message_hit_without_files(self, rule_factory, make_commit):
        rule = rule_factory(message_patterns=["Merge"])
        results = evaluate(rule, make_commit("m3", message="Merge pull request #1", files=None))
        assert len(results) == 1


# ── file tier ───────────────────────────────────────────────────────


class TestFileTier:
    def test_no_changed_files_yields_nothing(self, rule_factory, make_commit):
        rule = rule_factory([FileRule(path_pattern="")])
        assert evaluate(rule, make_commit("f0", files=None)) == []

    def test_empty_changed_files_yields_nothing(self, rule_factory, make_commit):
        rule = rule_factory([FileRule(path_pattern="")])
        assert evaluate(rule, make_commit("f0", files=[])) == []

    def test_one_result_per_matching_file(self, rule_factory, make_commit):
        rule = rule_factory([FileRule(path_pattern="auth")])
        commit = make_commit(
            "f1",
            files=[_file("auth/a.py"), _file("docs/readme.md"), _file("auth/b.py")],
        )
        results = evaluate(rule, commit)
        assert [r.file.filename for r in results] == ["auth/a.py", "auth/b.py"]

    def test_first_matching_path_rule_wins(self, rule_factory, make_commit):
        rule = rule_factory(
            [
                FileRule(path_pattern="auth"),
                FileRule(path_pattern="login", content_patterns=["password"]),
            ]
        )
        commit = make_commit("f2", files=[_file("auth/login.py", patch="+password = x")])
        results = evaluate(rule, commit)
        assert len(results) == 1
        assert results[0].patterns_matched == []

    def test_content_rule_without_patch_falls_to_next_rule(self, rule_factory, make_commit):
        rule = rule_factory(
            [
                FileRule(path_pattern="config", content_patterns=["timeout"]),
                FileRule(path_pattern=".yaml"),
            ]
        )
        commit = make_commit("f3", files=[_file("config/app.yaml", patch=None)])
        results = evaluate(rule, commit)
        assert len(results) == 1
        assert results[0].patterns_matched == []

    def test_content_rule_without_patch_and_no_fallback(self, rule_factory, make_commit):
        rule = rule_factory([FileRule(path_pattern="config", content_patterns=["timeout"])])
        commit = make_commit("f4", files=[_file("config/logo.png", patch=None)])
        assert evaluate(rule, commit) == []

    def test_content_miss_falls_to_next_rule(self, rule_factory, make_commit):
        rule = rule_factory(
            [
                FileRule(path_pattern="config", content_patterns=["timeout"]),
                FileRule(path_pattern="config", content_patterns=["retries"]),
            ]
        )
        commit = make_commit("f5", files=[_file("config/app.yaml", patch="+retries=3")])
        results = evaluate(rule, commit)
        assert [r.patterns_matched for r in results] == [["retries"]]

    def test_content_narrows_never_widens(self, rule_factory, make_commit):
        rule = rule_factory([FileRule(path_pattern="config", content_patterns=["timeout"])])
        commit = make_commit("f6", files=[_file("src/app.py", patch="+timeout=1")])
        assert evaluate(rule, commit) == []

    def test_records_every_matching_pattern(self, rule_factory, make_commit):
        rule = rule_factory(
            [FileRule(path_pattern="config", content_patterns=["timeout", "retries", "absent"])]
        )
        commit = make_commit(
            "f7", files=[_file("config/app.yaml", patch="+timeout=1\n+retries=3\n")]
        )
        results = evaluate(rule, commit)
        assert results[0].patterns_matched == ["timeout", "retries"]

    def test_message_patterns_join_content_patterns(self, rule_factory, make_commit):
        rule = rule_factory(
            [FileRule(path_pattern="config", content_patterns=["timeout"])],
            message_patterns=["eval(", "timeout"],
        )
        commit = make_commit(
            "f8",
            message="tweak settings",
            files=[_file("config/x.py", patch="+timeout = eval(raw)")],
        )
        results = evaluate(rule, commit)
        # file-local first, duplicates dropped
        assert results[0].patterns_matched == ["timeout", "eval("]

    def test_message_patterns_alone_do_not_satisfy_path_only_rule(
        self, rule_factory, make_commit
    ):
        rule = rule_factory([FileRule(path_pattern="auth")], message_patterns=["CVE-"])
        commit = make_commit("f9", message="docs", files=[_file("auth/x.py", patch="+CVE-1")])
        results = evaluate(rule, commit)
        assert results[0].patterns_matched == []

    def test_no_file_rules_means_no_file_results(self, rule_factory, make_commit):
        rule = rule_factory(message_patterns=["CVE-"])
        commit = make_commit("fa", message="docs", files=[_file("auth/x.py")])
        assert evaluate(rule, commit) == []


# ── precedence invariant ────────────────────────────────────────────


@pytest.mark.parametrize("message", ["Fix CVE-1", "CVE-2 in auth", "revert CVE-3"])
def test_message_hit_never_produces_file_results(rule_factory, make_commit, message):
    rule = rule_factory(
        [FileRule(path_pattern=""), FileRule(path_pattern="auth", content_patterns=["x"])],
        message_patterns=["CVE-"],
    )
    commit = make_commit("p1", message=message, files=[_file("auth/a.py", patch="x")])
    results = evaluate(rule, commit)
    assert all(r.matched_at == "message" for r in results)
    assert len(results) == 1
