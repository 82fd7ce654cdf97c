"""GlideQuery lint rules.

Each rule is independent and reports against the masked views of a
ScriptSource, so method names inside comments or string literals are never
flagged as calls.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from glidequery_gate.linting.base import LintIssue, LintRule, RuleFindings
from glidequery_gate.linting.source import ScriptSource
from glidequery_gate.patterns import (
    OPTIONAL_OPERATIONS,
    TERMINAL_OPERATIONS,
    UNDEFINED_METHODS,
    VALID_FIELD_FLAGS,
    VALID_METHODS,
    VALID_OPERATORS,
)


class UndefinedMethodRule(LintRule):
    """Detects methods from other query APIs that GlideQuery does not have.

    Catches the GlideRecord vocabulary (addQuery, next, getValue) and
    methods from ORMs and document stores (selectAll, findOne, find) that
    are easy to reach for by habit.
    """

    @property
    def rule_id(self) -> str:
        return "undefined-method"

    @property
    def description(self) -> str:
        return "Flags calls to methods GlideQuery does not define and names the replacement."

    def check(self, source: ScriptSource) -> RuleFindings:
        findings = RuleFindings()
        for method, suggestion in UNDEFINED_METHODS:
            for match in re.finditer(rf"\.{method}\s*\(", source.code):
                findings.errors.append(
                    LintIssue(
                        message=f"Undefined method '.{method}()' - {suggestion}",
                        line=source.line_of(match.start()),
                    )
                )
        return findings


@dataclass
class _ChainState:
    terminal: str | None = None


_CHAIN_TOKEN = re.compile(
    r"""
    (?P<call>\.(?P<name>[A-Za-z_$][\w$]*)\s*\((?P<empty>\s*\))?)
    | (?P<prop>\.[A-Za-z_$][\w$]*)
    | (?P<open>[(\[{])
    | (?P<close>[)\]}])
    | (?P<space>\s+)
    | (?P<other>[^\s()\[\]{}.]+|\.)
    """,
    re.VERBOSE,
)


class TerminalChainingRule(LintRule):
    """Detects a terminal operation chained after another terminal.

    The call chain is tracked per bracket nesting level: calls inside
    argument lists or callback bodies form their own chains, and any token
    that is not a method call (an identifier, operator or semicolon) ends
    the current chain.

    An argument-less .get() right after selectOne()/get()/getBy() unwraps
    the returned Optional and is allowed.
    """

    @property
    def rule_id(self) -> str:
        return "terminal-chaining"

    @property
    def description(self) -> str:
        return "Flags a second terminal operation (select, count, update...) in one call chain."

    def check(self, source: ScriptSource) -> RuleFindings:
        findings = RuleFindings()
        stack = [_ChainState()]

        for match in _CHAIN_TOKEN.finditer(source.code):
            if match.group("call"):
                name = match.group("name")
                state = stack[-1]
                if name in TERMINAL_OPERATIONS:
                    previous = state.terminal
                    if previous is None:
                        state.terminal = name
                    elif name == "get" and match.group("empty") and previous in OPTIONAL_OPERATIONS:
                        state.terminal = None
                    else:
                        findings.errors.append(
                            LintIssue(
                                message=(
                                    f"Cannot chain terminal operations: .{previous}() "
                                    f"followed by .{name}()"
                                ),
                                line=source.line_of(match.start("name")),
                            )
                        )
                        state.terminal = name
                if not match.group("empty"):
                    stack.append(_ChainState())
            elif match.group("open"):
                stack.append(_ChainState())
            elif match.group("close"):
                if len(stack) > 1:
                    stack.pop()
            elif match.group("other"):
                stack[-1].terminal = None

        return findings


class MissingParenthesesRule(LintRule):
    """Warns when a GlideQuery method is referenced without being called.

    Only a name that ends an expression (followed by ".", ";" or the end of
    the line) is flagged, so record fields such as r.count in r.count > 1
    are left alone.
    """

    @property
    def rule_id(self) -> str:
        return "missing-parentheses"

    @property
    def description(self) -> str:
        return "Warns about GlideQuery method names referenced without a call."

    def check(self, source: ScriptSource) -> RuleFindings:
        findings = RuleFindings()
        for method in VALID_METHODS:
            if re.search(rf"\.{method}(?=[ \t\r]*(?:[.;]|$))", source.code, re.MULTILINE):
                findings.warnings.append(f"Method '.{method}' may be missing parentheses")
        return findings


_WHERE_OPERATOR = re.compile(
    r"""\.(?:where|orWhere)\s*\(\s*['"`]([^'"`]+)['"`]\s*,\s*['"`]([^'"`]*)['"`]\s*,"""
)
_HAVING_OPERATOR = re.compile(
    r"""\.having\s*\(\s*['"`]([^'"`]+)['"`]\s*,\s*['"`]([^'"`]+)['"`]\s*,\s*['"`]([^'"`]*)['"`]\s*,"""
)


class InvalidOperatorRule(LintRule):
    """Detects unknown operators in 3-argument where() and having() calls.

    The 2-argument form .where('field', value) implies '=' and is not
    checked, since its second argument is a value rather than an operator.
    """

    @property
    def rule_id(self) -> str:
        return "invalid-operator"

    @property
    def description(self) -> str:
        return "Flags filter operators outside the GlideQuery operator set."

    def check(self, source: ScriptSource) -> RuleFindings:
        findings = RuleFindings()
        allowed = ", ".join(VALID_OPERATORS)

        for match in _WHERE_OPERATOR.finditer(source.without_comments):
            operator = match.group(2)
            if operator not in VALID_OPERATORS:
                findings.errors.append(
                    LintIssue(
                        message=f"Invalid operator '{operator}' - must be one of: {allowed}",
                        line=source.line_of(match.start()),
                    )
                )

        for match in _HAVING_OPERATOR.finditer(source.without_comments):
            operator = match.group(3)
            if operator not in VALID_OPERATORS:
                findings.errors.append(
                    LintIssue(
                        message=(
                            f"Invalid operator '{operator}' in having clause - "
                            f"must be one of: {allowed}"
                        ),
                        line=source.line_of(match.start()),
                    )
                )

        return findings


_FIELD_FLAG = re.compile(r"""['"`]([A-Za-z_]\w*)(\$[A-Z_]+)['"`]""")


class FieldFlagRule(LintRule):
    """Warns about unknown $FLAG suffixes on field names."""

    @property
    def rule_id(self) -> str:
        return "field-flag"

    @property
    def description(self) -> str:
        return "Warns when a 'field$FLAG' literal uses a flag GlideQuery does not support."

    def check(self, source: ScriptSource) -> RuleFindings:
        findings = RuleFindings()
        for match in _FIELD_FLAG.finditer(source.without_comments):
            field_name, flag = match.group(1), match.group(2)
            if flag not in VALID_FIELD_FLAGS:
                findings.warnings.append(
                    f"Unknown field flag '{flag}' on '{field_name}' - "
                    f"valid flags: {', '.join(VALID_FIELD_FLAGS)}"
                )
        return findings


class LegacyRecordApiRule(LintRule):
    """Warns about GlideRecord usage.

    GlideRecord still runs on the platform, so this is a nudge towards
    GlideQuery rather than an error.
    """

    @property
    def rule_id(self) -> str:
        return "legacy-record-api"

    @property
    def description(self) -> str:
        return "Warns when the legacy GlideRecord cursor API is constructed."

    def check(self, source: ScriptSource) -> RuleFindings:
        findings = RuleFindings()
        if re.search(r"\bGlideRecord\s*\(", source.code, re.IGNORECASE):
            findings.warnings.append(
                "GlideRecord detected - consider using GlideQuery for better "
                "performance and type safety"
            )
        return findings


class OptionalAccessRule(LintRule):
    """Warns about unguarded Optional.get() calls.

    This is a co-occurrence check: any .isPresent() or .orElse() call in
    the script counts as a guard, even one that cannot be reached.
    """

    @property
    def rule_id(self) -> str:
        return "optional-access"

    @property
    def description(self) -> str:
        return "Warns when .get() is called with no .isPresent() or .orElse() in the script."

    def check(self, source: ScriptSource) -> RuleFindings:
        findings = RuleFindings()
        code = source.code
        if (
            re.search(r"\.get\s*\(\s*\)", code)
            and not re.search(r"\.isPresent\s*\(", code)
            and not re.search(r"\.orElse\s*\(", code)
        ):
            findings.warnings.append(
                "Calling .get() on Optional without checking .isPresent() or "
                "using .orElse() may throw an error if empty"
            )
        return findings


def default_rules() -> list[LintRule]:
    """Return a fresh list of the built-in rules in evaluation order."""
    return [
        UndefinedMethodRule(),
        TerminalChainingRule(),
        MissingParenthesesRule(),
        InvalidOperatorRule(),
        FieldFlagRule(),
        LegacyRecordApiRule(),
        OptionalAccessRule(),
    ]
