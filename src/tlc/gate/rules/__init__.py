"""Built-in rule checks for the static gate."""

from tlc.gate.engine import Rule
from tlc.gate.models import Severity
from tlc.gate.rules.quality import (
    check_console_logs,
    check_file_length,
    check_function_length,
    check_hardcoded_secrets,
    check_hardcoded_urls,
    check_todo_without_ref,
    is_test_file,
)

__all__ = [
    "check_console_logs",
    "check_file_length",
    "check_function_length",
    "check_hardcoded_secrets",
    "check_hardcoded_urls",
    "check_todo_without_ref",
    "default_rules",
    "is_test_file",
]


def default_rules() -> list[Rule]:
    """Built-in quality rules in registration order."""
    return [
        Rule(
            id="no-hardcoded-urls",
            check=check_hardcoded_urls,
            severity=Severity.BLOCK,
            description="Hardcoded URLs, IPs and ports",
        ),
        Rule(
            id="no-hardcoded-secrets",
            check=check_hardcoded_secrets,
            severity=Severity.BLOCK,
            description="API keys, passwords and tokens in source",
        ),
        Rule(
            id="no-console-log",
            check=check_console_logs,
            severity=Severity.WARN,
            description="Debug console output in production code",
        ),
        Rule(
            id="max-function-length",
            check=check_function_length,
            severity=Severity.WARN,
            description="Functions over 50 lines",
        ),
        Rule(
            id="max-file-length",
            check=check_file_length,
            severity=Severity.WARN,
            description="Files over 300 lines",
        ),
        Rule(
            id="todo-needs-ref",
            check=check_todo_without_ref,
            severity=Severity.WARN,
            description="TODO/FIXME/HACK without an issue reference",
        ),
    ]
