"""Security classification for GlideQuery scripts.

This module provides the SecurityValidator class, which runs three checks
over a script and reports every problem it finds in a single pass:
  1. Length check - reject oversized scripts
  2. Blacklist scan - reject dynamic code execution, the legacy record API,
     file system access, outbound HTTP/SOAP and module loading
  3. Dangerous operation inventory - surface bulk and workflow-bypassing
     methods for confirmation (advisory, never blocking)

Unlike a fail-fast validator, every check runs even after a violation so
the caller can fix all problems in one round-trip.
"""

import logging
import re
from dataclasses import dataclass, replace

from glidequery_gate.patterns import BLACKLISTED_PATTERNS, DANGEROUS_OPERATIONS

logger = logging.getLogger(__name__)

_FLAGS = re.IGNORECASE | re.MULTILINE


@dataclass(frozen=True)
class SecurityConfig:
    """Tunable policy for SecurityValidator.

    Attributes:
        max_script_length: Maximum script length in characters
        blacklisted_patterns: Ordered (regex source, construct name) pairs
        require_confirmation: Canonical names of dangerous operations
    """

    max_script_length: int = 10000
    blacklisted_patterns: tuple[tuple[str, str], ...] = BLACKLISTED_PATTERNS
    require_confirmation: tuple[str, ...] = DANGEROUS_OPERATIONS


@dataclass(frozen=True)
class SecurityReport:
    """Outcome of a security scan.

    Attributes:
        safe: Whether the script may be sent for execution
        violations: Blocking problems, None when safe
        dangerous_operations: Detected dangerous methods under their
            canonical spelling, None when there are none
    """

    safe: bool
    violations: list[str] | None = None
    dangerous_operations: list[str] | None = None


class SecurityValidator:
    """Stateless classifier for GlideQuery scripts.

    The only state is the SecurityConfig, which can be read with get_config()
    and merged with update_config().

    Example:
        validator = SecurityValidator()
        report = validator.validate("new GlideQuery('incident').deleteMultiple();")
        report.safe                  # True
        report.dangerous_operations  # ['deleteMultiple']
    """

    def __init__(self, config: SecurityConfig | None = None) -> None:
        self._config = config or SecurityConfig()

    def validate(self, script: str) -> SecurityReport:
        """Validate a script against the length cap and the blacklist.

        Args:
            script: Script content to validate

        Returns:
            SecurityReport with all violations and dangerous operations found
        """
        violations: list[str] = []
        config = self._config

        if len(script) > config.max_script_length:
            violations.append(
                f"Script exceeds maximum length of {config.max_script_length} "
                f"characters (actual: {len(script)})"
            )

        for pattern, name in config.blacklisted_patterns:
            if re.search(pattern, script, _FLAGS):
                violations.append(f"Blacklisted pattern detected: {name}")

        dangerous = self._detect_dangerous_operations(script)

        if violations:
            logger.warning(f"Script failed security validation: {'; '.join(violations)}")

        return SecurityReport(
            safe=not violations,
            violations=violations or None,
            dangerous_operations=dangerous or None,
        )

    def _detect_dangerous_operations(self, script: str) -> list[str]:
        """Find dangerous method calls, matched case-insensitively.

        Args:
            script: Script content to scan

        Returns:
            Canonical names of the operations present, in config order
        """
        found: list[str] = []
        for operation in self._config.require_confirmation:
            if operation in found:
                continue
            if re.search(rf"\.{re.escape(operation)}\s*\(", script, re.IGNORECASE):
                found.append(operation)
        return found

    def get_config(self) -> SecurityConfig:
        """Return a copy of the current configuration."""
        return replace(self._config)

    def update_config(self, **changes: object) -> None:
        """Merge changes into the current configuration.

        Only the given fields are replaced. Sequences are stored as tuples
        so later mutation by the caller has no effect.

        Raises:
            TypeError: If a field name is not part of SecurityConfig
        """
        if "blacklisted_patterns" in changes:
            changes["blacklisted_patterns"] = tuple(
                (pattern, name) for pattern, name in changes["blacklisted_patterns"]  # type: ignore[attr-defined]
            )
        if "require_confirmation" in changes:
            changes["require_confirmation"] = tuple(changes["require_confirmation"])  # type: ignore[call-overload]
        self._config = replace(self._config, **changes)
        logger.info(f"Security configuration updated: {', '.join(sorted(changes))}")
