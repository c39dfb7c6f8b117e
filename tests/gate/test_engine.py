"""Tests for the static gate engine."""

import pytest

from tlc.gate.config import GateConfig
from tlc.gate.engine import (
    Rule,
    StaticGateEngine,
    calculate_score,
    group_findings_by_file,
    run_static_gate,
)
from tlc.gate.models import FileChange, Finding, Severity


def _rule(rule_id: str, *severities: Severity, default: Severity = Severity.WARN) -> Rule:
    """Rule that emits one finding per severity, on consecutive lines."""

    def check(file_path: str, content: str) -> list[Finding]:
        return [
            Finding(
                severity=severity,
                rule=rule_id,
                file=file_path,
                line=index + 1,
                message=f"{rule_id} {severity}",
                fix="Fix it",
            )
            for index, severity in enumerate(severities)
        ]

    return Rule(id=rule_id, check=check, severity=default)


def _files(*paths: str) -> list[FileChange]:
    return [FileChange(path=path, content="code") for path in paths]


class TestStaticGateEngineCreation:
    """Test engine construction."""

    def test_defaults_to_no_rules(self) -> None:
        engine = StaticGateEngine(config=GateConfig())
        assert engine.rules == []

    def test_keeps_rules(self) -> None:
        rule = _rule("test-rule")
        engine = StaticGateEngine(config=GateConfig(), rules=[rule])
        assert engine.rules == [rule]

    def test_enabled_rules_excludes_disabled(self) -> None:
        config = GateConfig(rules={"off": False})
        engine = StaticGateEngine(config=config, rules=[_rule("on"), _rule("off")])
        assert [r.id for r in engine.enabled_rules()] == ["on"]


class TestStaticGateEngineRun:
    """Test running the engine."""

    def test_empty_changeset_passes(self) -> None:
        result = StaticGateEngine(config=GateConfig()).run([])

        assert result.passed is True
        assert result.findings == []
        assert result.summary.total == 0
        assert result.duration_ms >= 0

    def test_runs_rules_against_each_file(self) -> None:
        calls: list[str] = []

        def check(file_path: str, content: str) -> list[Finding]:
            calls.append(file_path)
            return []

        engine = StaticGateEngine(config=GateConfig(), rules=[Rule(id="counter", check=check)])
        result = engine.run(_files("src/a.js", "src/b.js"))

        assert calls == ["src/a.js", "src/b.js"]
        assert result.files_checked == 2

    def test_collects_findings_from_all_rules(self) -> None:
        engine = StaticGateEngine(
            config=GateConfig(),
            rules=[_rule("rule-a", Severity.BLOCK), _rule("rule-b", Severity.WARN)],
        )
        result = engine.run(_files("src/a.js"))
        assert len(result.findings) == 2

    def test_fails_on_block(self) -> None:
        engine = StaticGateEngine(config=GateConfig(), rules=[_rule("blocker", Severity.BLOCK)])
        assert engine.run(_files("src/a.js")).passed is False

    @pytest.mark.parametrize("severity", [Severity.WARN, Severity.INFO])
    def test_passes_without_block(self, severity: Severity) -> None:
        engine = StaticGateEngine(config=GateConfig(), rules=[_rule("soft", severity)])
        assert engine.run(_files("src/a.js")).passed is True

    def test_attaches_file_path(self) -> None:
        def check(file_path: str, content: str) -> list[Finding]:
            return [Finding(severity=Severity.WARN, rule="p", file="", line=1, message="X")]

        engine = StaticGateEngine(config=GateConfig(), rules=[Rule(id="p", check=check)])
        result = engine.run(_files("src/deep/file.js"))
        assert result.findings[0].file == "src/deep/file.js"

    def test_skips_ignored_files(self) -> None:
        config = GateConfig(ignore=["*.md", "*.json"])
        engine = StaticGateEngine(config=config, rules=[_rule("skip", Severity.BLOCK)])
        result = engine.run(_files("README.md", "package.json", "src/app.js"))

        assert len(result.findings) == 1
        assert result.findings[0].file == "src/app.js"
        assert result.files_checked == 1

    def test_summary_counts(self) -> None:
        engine = StaticGateEngine(
            config=GateConfig(),
            rules=[_rule("multi", Severity.BLOCK, Severity.WARN, Severity.INFO)],
        )
        summary = engine.run(_files("x.js")).summary

        assert (summary.total, summary.block, summary.warn, summary.info) == (3, 1, 1, 1)

    def test_override_downgrades_block_to_warn(self) -> None:
        config = GateConfig(rules={"blocker": Severity.WARN})
        engine = StaticGateEngine(config=config, rules=[_rule("blocker", Severity.BLOCK)])
        result = engine.run(_files("x.js"))

        assert result.passed is True
        assert result.findings[0].severity == Severity.WARN
        assert result.summary.block == 0
        assert result.summary.warn == 1

    def test_override_upgrades_warn_to_block(self) -> None:
        config = GateConfig(rules={"warner": Severity.BLOCK})
        engine = StaticGateEngine(config=config, rules=[_rule("warner", Severity.WARN)])
        result = engine.run(_files("x.js"))

        assert result.passed is False
        assert result.findings[0].severity == Severity.BLOCK

    def test_disabled_rule_never_runs(self) -> None:
        calls: list[str] = []

        def check(file_path: str, content: str) -> list[Finding]:
            calls.append(file_path)
            return []

        config = GateConfig(rules={"off": False})
        StaticGateEngine(config=config, rules=[Rule(id="off", check=check)]).run(_files("a.js"))
        assert calls == []

    def test_disabled_rule_findings_dropped_from_other_checks(self) -> None:
        """A check emitting findings under a disabled rule id has them removed."""

        def check(file_path: str, content: str) -> list[Finding]:
            return [
                Finding(severity=Severity.BLOCK, rule="off", file=file_path, message="m"),
                Finding(severity=Severity.WARN, rule="on", file=file_path, message="m"),
            ]

        config = GateConfig(rules={"off": False})
        result = StaticGateEngine(config=config, rules=[Rule(id="mixed", check=check)]).run(
            _files("a.js")
        )
        assert [f.rule for f in result.findings] == ["on"]
        assert result.passed is True

    def test_order_is_file_then_rule(self) -> None:
        engine = StaticGateEngine(
            config=GateConfig(),
            rules=[_rule("first", Severity.INFO), _rule("second", Severity.BLOCK)],
        )
        result = engine.run(_files("a.js", "b.js"))

        assert [(f.file, f.rule) for f in result.findings] == [
            ("a.js", "first"),
            ("a.js", "second"),
            ("b.js", "first"),
            ("b.js", "second"),
        ]

    def test_idempotent(self) -> None:
        engine = StaticGateEngine(
            config=GateConfig(rules={"b": Severity.INFO}),
            rules=[_rule("a", Severity.BLOCK, Severity.WARN), _rule("b", Severity.BLOCK)],
        )
        files = _files("a.js", "b.js")
        first = engine.run(files)
        second = engine.run(files)

        assert first.findings == second.findings
        assert first.summary == second.summary
        assert first.passed == second.passed

    def test_rule_errors_propagate(self) -> None:
        def check(file_path: str, content: str) -> list[Finding]:
            raise RuntimeError("Rule crashed")

        engine = StaticGateEngine(config=GateConfig(), rules=[Rule(id="crasher", check=check)])
        with pytest.raises(RuntimeError, match="Rule crashed"):
            engine.run(_files("x.js"))


def test_run_static_gate_helper() -> None:
    result = run_static_gate(_files("x.js"), GateConfig(), [_rule("r", Severity.BLOCK)])
    assert result.passed is False
    assert result.summary.block == 1


class TestCalculateScore:
    """Test calculate_score."""

    def test_perfect_score(self) -> None:
        assert calculate_score([]) == 100

    def test_block_deducts(self) -> None:
        findings = [Finding(severity=Severity.BLOCK, rule="r", file="x", message="m")]
        assert 0 <= calculate_score(findings) < 100

    def test_warn_deducts_less_than_block(self) -> None:
        block = [Finding(severity=Severity.BLOCK, rule="r", file="x", message="m")]
        warn = [Finding(severity=Severity.WARN, rule="r", file="x", message="m")]
        assert calculate_score(warn) > calculate_score(block)

    def test_floors_at_zero(self) -> None:
        findings = [
            Finding(severity=Severity.BLOCK, rule="r", file="x", message="m") for _ in range(50)
        ]
        assert calculate_score(findings) == 0


class TestGroupFindingsByFile:
    """Test group_findings_by_file."""

    def test_groups(self) -> None:
        findings = [
            Finding(severity=Severity.BLOCK, rule="r1", file="a.js", message="A"),
            Finding(severity=Severity.WARN, rule="r2", file="b.js", message="B"),
            Finding(severity=Severity.INFO, rule="r3", file="a.js", message="C"),
        ]
        grouped = group_findings_by_file(findings)

        assert list(grouped) == ["a.js", "b.js"]
        assert len(grouped["a.js"]) == 2
        assert len(grouped["b.js"]) == 1

    def test_empty(self) -> None:
        assert group_findings_by_file([]) == {}
