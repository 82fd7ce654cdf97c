"""Style and correctness linting for GlideQuery scripts.

StyleValidator runs an ordered list of independent LintRule objects over a
pre-scanned ScriptSource. It is a best-effort linter built on token and
regex scanning, not a parser: it catches common misuse quickly and accepts
false negatives (e.g. an Optional guard that exists but is unreachable).

All rules run on every call; the report collects every issue found.
"""

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass

from glidequery_gate.linting.base import LintIssue, LintRule
from glidequery_gate.linting.rules import default_rules
from glidequery_gate.linting.source import ScriptSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LintReport:
    """Outcome of a style scan.

    Attributes:
        valid: True when there are no errors; warnings never affect it
        errors: Errors with source lines, None when valid
        warnings: Script-global warnings, None when there are none
    """

    valid: bool
    errors: list[LintIssue] | None = None
    warnings: list[str] | None = None


class StyleValidator:
    """Line-aware GlideQuery linter.

    Example:
        >>> report = StyleValidator().validate("new GlideQuery('incident').selectAll()")
        >>> report.valid
        False
        >>> report.errors[0].line
        1
    """

    MAX_SCRIPT_LENGTH = 10000

    def __init__(
        self,
        rules: Sequence[LintRule] | None = None,
        max_script_length: int = MAX_SCRIPT_LENGTH,
    ) -> None:
        self._rules = list(rules) if rules is not None else default_rules()
        self._max_script_length = max_script_length

    @property
    def rules(self) -> list[LintRule]:
        """Get the rules in evaluation order."""
        return self._rules.copy()

    def validate(self, script: str) -> LintReport:
        """Lint a script without executing it.

        Args:
            script: GlideQuery script to validate

        Returns:
            LintReport with every error and warning found
        """
        started = time.monotonic()

        if not script or not script.strip():
            logger.warning("Validation failed: empty script")
            return LintReport(valid=False, errors=[LintIssue("Script cannot be empty", line=1)])

        errors: list[LintIssue] = []
        warnings: list[str] = []

        if len(script) > self._max_script_length:
            errors.append(
                LintIssue(
                    f"Script exceeds maximum length of {self._max_script_length} characters",
                    line=1,
                )
            )

        source = ScriptSource.from_text(script)
        for rule in self._rules:
            findings = rule.check(source)
            errors.extend(findings.errors)
            for warning in findings.warnings:
                if warning not in warnings:
                    warnings.append(warning)

        duration_ms = int((time.monotonic() - started) * 1000)
        if errors:
            logger.warning(
                f"Validation completed with {len(errors)} error(s) and "
                f"{len(warnings)} warning(s) in {duration_ms}ms"
            )
        else:
            logger.debug(f"Validation passed with {len(warnings)} warning(s) in {duration_ms}ms")

        return LintReport(
            valid=not errors,
            errors=errors or None,
            warnings=warnings or None,
        )
