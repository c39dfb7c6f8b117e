"""LLM review prompts for the push gate.

Same rules as any gate reviewer: confirmed issues only, no speculation,
zero findings is the ideal outcome.
"""

MAX_DIFF_CHARS = 120_000


def get_system_prompt() -> str:
    """System prompt for a gate review model."""
    return """You are a code reviewer acting as a pre-push quality gate.

Report only CONFIRMED issues introduced by the diff. You are NOT looking for
style preferences, design opinions, or potential future problems.

Before reporting an issue, check:
1. Can you name a specific input or scenario that makes it fail? If not, skip it.
2. Does the surrounding code already handle it? If so, skip it.
3. Are you using speculative language ("may", "might", "could")? If so, skip it.

Severity:
- block: bugs, security vulnerabilities, leaked secrets. These stop the push.
- warn: logic or performance problems with measurable impact.
- info: worthwhile observations that need no action.

For each finding give:
- file: the path exactly as it appears in the diff header
- line: the line number in the new file (omit for file-level findings)
- rule: a short kebab-case identifier (e.g. "sql-injection", "missing-await")
- message: one sentence quoting the problem code in backticks
- fix: a concrete remediation

Also give a one-paragraph summary of the change.

Zero findings is a successful review. Never invent issues to appear thorough."""


def build_review_prompt(diff: str) -> str:
    """Build the user prompt for reviewing a diff.

    Very large diffs are truncated to keep the request within model limits.

    Args:
        diff: Unified diff text

    Returns:
        Prompt string
    """
    if not diff.strip():
        return "The diff is empty. Return no findings."

    truncated = ""
    if len(diff) > MAX_DIFF_CHARS:
        diff = diff[:MAX_DIFF_CHARS]
        truncated = "\n\n(Diff truncated; review only what is shown.)"

    return f"Review this diff before it is pushed:\n\n```diff\n{diff}\n```{truncated}"
