"""Quality rules — hardcoded values, oversized code, debug leftovers, untracked TODOs.

Each check takes (file_path, content) and returns findings. Checks are pure and
line-oriented; line numbers are 1-based.
"""

import re

from tlc.gate.models import Finding, Severity

MAX_FUNCTION_LINES = 50
MAX_FILE_LINES = 300

_TEST_FILE = re.compile(r"\.(test|spec)\.[jt]sx?$")

_URL = re.compile(r"""['"`](https?://[^'"`]+)['"`]""")
_IP = re.compile(r"""['"`](\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})['"`]""")
_PORT = re.compile(r"\b(?:const|let|var)\s+port\s*=\s*(\d+)")

_SECRET_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"""(?:api[_-]?key|apikey)\s*=\s*['"`]([^'"`]{8,})['"`]""", re.I), "API key"),
    (re.compile(r"""(?:password|passwd|pwd)\s*=\s*['"`]([^'"`]+)['"`]""", re.I), "password"),
    (re.compile(r"""(?:secret|token)\s*=\s*['"`]([^'"`]{8,})['"`]""", re.I), "token/secret"),
    (re.compile(r"""['"`](eyJ[A-Za-z0-9_-]+\.)""", re.I), "JWT token"),
    (re.compile(r"""['"`](sk-[a-zA-Z0-9]{20,})['"`]"""), "API key"),
)

_CONSOLE = re.compile(r"console\.(log|warn|debug|info)\s*\(")

_FUNCTION_START = re.compile(
    r"(?:function\s+(\w+)|(?:const|let|var)\s+(\w+)\s*=\s*(?:\([^)]*\)|[^=])\s*=>)"
)

_TODO = re.compile(r"//\s*(TODO|FIXME|HACK)\b", re.I)
_ISSUE_REF = re.compile(r"[#(\[][A-Z0-9_-]+[\])]", re.I)


def is_test_file(file_path: str) -> bool:
    """Test files are exempt from production-code checks."""
    return bool(_TEST_FILE.search(file_path)) or "__tests__" in file_path


def _is_comment(stripped: str) -> bool:
    return stripped.startswith(("//", "*", "/*"))


def check_hardcoded_urls(file_path: str, content: str) -> list[Finding]:
    """Flag hardcoded URLs, IP addresses, and port assignments."""
    if is_test_file(file_path):
        return []

    findings: list[Finding] = []
    for number, line in enumerate(content.split("\n"), start=1):
        if _is_comment(line.strip()):
            continue

        url = _URL.search(line)
        if url:
            findings.append(
                Finding(
                    severity=Severity.BLOCK,
                    rule="no-hardcoded-urls",
                    file=file_path,
                    line=number,
                    message=f"Hardcoded URL: {url.group(1)}",
                    fix="Read URLs from environment variables or config",
                )
            )

        ip = _IP.search(line)
        if ip and not url:
            findings.append(
                Finding(
                    severity=Severity.BLOCK,
                    rule="no-hardcoded-urls",
                    file=file_path,
                    line=number,
                    message=f"Hardcoded IP: {ip.group(1)}",
                    fix="Read host addresses from environment variables or config",
                )
            )

        port = _PORT.search(line)
        if port:
            findings.append(
                Finding(
                    severity=Severity.BLOCK,
                    rule="no-hardcoded-urls",
                    file=file_path,
                    line=number,
                    message=f"Hardcoded port: {port.group(1)}",
                    fix="Use process.env.PORT or config",
                )
            )
    return findings


def check_hardcoded_secrets(file_path: str, content: str) -> list[Finding]:
    """Flag API keys, passwords, tokens, and JWTs assigned as literals.

    Reports at most one finding per line.
    """
    if is_test_file(file_path):
        return []

    findings: list[Finding] = []
    for number, line in enumerate(content.split("\n"), start=1):
        stripped = line.strip()
        if stripped.startswith(("//", "*")) or "process.env" in line:
            continue

        for pattern, label in _SECRET_PATTERNS:
            if pattern.search(line):
                findings.append(
                    Finding(
                        severity=Severity.BLOCK,
                        rule="no-hardcoded-secrets",
                        file=file_path,
                        line=number,
                        message=f"Hardcoded {label} detected",
                        fix="Use environment variables or a secrets manager",
                    )
                )
                break
    return findings


def check_console_logs(file_path: str, content: str) -> list[Finding]:
    """Flag console.log/warn/debug/info in production code. console.error is allowed."""
    if is_test_file(file_path):
        return []

    findings: list[Finding] = []
    for number, line in enumerate(content.split("\n"), start=1):
        if line.strip().startswith("//"):
            continue
        match = _CONSOLE.search(line)
        if match:
            findings.append(
                Finding(
                    severity=Severity.WARN,
                    rule="no-console-log",
                    file=file_path,
                    line=number,
                    message=f"console.{match.group(1)}() found in production code",
                    fix="Use a proper logger or remove debug output",
                )
            )
    return findings


def check_function_length(
    file_path: str, content: str, max_lines: int = MAX_FUNCTION_LINES
) -> list[Finding]:
    """Flag brace-delimited functions longer than max_lines."""
    findings: list[Finding] = []
    depth = 0
    start = -1
    name = ""

    for index, line in enumerate(content.split("\n")):
        if start == -1:
            match = _FUNCTION_START.search(line)
            if match and "{" in line:
                name = match.group(1) or match.group(2) or "anonymous"
                depth = line.count("{") - line.count("}")
                # One-liners close on the same line
                start = index if depth > 0 else -1
            continue

        depth += line.count("{") - line.count("}")
        if depth <= 0:
            length = index - start + 1
            if length > max_lines:
                findings.append(
                    Finding(
                        severity=Severity.WARN,
                        rule="max-function-length",
                        file=file_path,
                        line=start + 1,
                        message=f"Function '{name}' is {length} lines (max: {max_lines})",
                        fix="Extract helper functions to reduce complexity",
                    )
                )
            start = -1
            name = ""
    return findings


def check_file_length(
    file_path: str, content: str, max_lines: int = MAX_FILE_LINES
) -> list[Finding]:
    """Flag files longer than max_lines."""
    line_count = len(content.split("\n"))
    if line_count <= max_lines:
        return []
    return [
        Finding(
            severity=Severity.WARN,
            rule="max-file-length",
            file=file_path,
            line=1,
            message=f"File is {line_count} lines (max: {max_lines})",
            fix="Split into smaller, focused modules",
        )
    ]


def check_todo_without_ref(file_path: str, content: str) -> list[Finding]:
    """Flag TODO/FIXME/HACK comments without an issue reference like (#123) or [PROJ-7]."""
    findings: list[Finding] = []
    for number, line in enumerate(content.split("\n"), start=1):
        match = _TODO.search(line)
        if match and not _ISSUE_REF.search(line):
            tag = match.group(1)
            findings.append(
                Finding(
                    severity=Severity.WARN,
                    rule="todo-needs-ref",
                    file=file_path,
                    line=number,
                    message=f"{tag} without issue reference",
                    fix=f"Add issue reference: // {tag}(#123): description",
                )
            )
    return findings
