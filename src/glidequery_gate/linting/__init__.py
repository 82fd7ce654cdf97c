"""Static linting for GlideQuery scripts.

Architecture:
    - ScriptSource: one scan of the script into masked views plus a line index
    - LintRule: interface for independent, stateless rules
    - StyleValidator: runs the ordered rule list and builds a LintReport

Usage:
    from glidequery_gate.linting import StyleValidator

    report = StyleValidator().validate(script)
    for issue in report.errors or []:
        print(f"line {issue.line}: {issue.message}")
"""

from glidequery_gate.linting.base import LintIssue, LintRule, RuleFindings
from glidequery_gate.linting.rules import (
    FieldFlagRule,
    InvalidOperatorRule,
    LegacyRecordApiRule,
    MissingParenthesesRule,
    OptionalAccessRule,
    TerminalChainingRule,
    UndefinedMethodRule,
    default_rules,
)
from glidequery_gate.linting.source import ScriptSource
from glidequery_gate.linting.validator import LintReport, StyleValidator

__all__ = [
    "StyleValidator",
    "LintReport",
    "LintIssue",
    "LintRule",
    "RuleFindings",
    "ScriptSource",
    "default_rules",
    "UndefinedMethodRule",
    "TerminalChainingRule",
    "MissingParenthesesRule",
    "InvalidOperatorRule",
    "FieldFlagRule",
    "LegacyRecordApiRule",
    "OptionalAccessRule",
]
