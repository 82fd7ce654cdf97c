"""Base classes for lint rules."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from glidequery_gate.linting.source import ScriptSource


@dataclass(frozen=True)
class LintIssue:
    """A single lint error.

    Attributes:
        message: Human-readable description of the problem
        line: 1-based source line of the offending call
    """

    message: str
    line: int = 1


@dataclass
class RuleFindings:
    """Errors and warnings produced by one rule over one script."""

    errors: list[LintIssue] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class LintRule(ABC):
    """Abstract base class for lint rules.

    Each rule is a self-contained, stateless check over a ScriptSource.
    Rules never depend on each other, so a new rule can be added to the
    ordered rule list without touching existing ones.

    Subclasses must implement:
    - rule_id: Unique identifier for the rule
    - description: What the rule checks
    - check(): The scanning logic
    """

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """Unique identifier for this rule (e.g., 'undefined-method')."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Detailed description of what this rule checks for."""
        ...

    @abstractmethod
    def check(self, source: ScriptSource) -> RuleFindings:
        """Scan the script and return everything this rule flags.

        Args:
            source: Pre-scanned script with masked views and a line index

        Returns:
            RuleFindings with errors (carrying lines) and warnings
        """
        ...
