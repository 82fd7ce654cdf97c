"""Safety gate and execution layer for GlideQuery scripts.

Components:
    SecurityValidator: Blacklist and dangerous-operation scan
    StyleValidator: Line-aware GlideQuery linter
    ScriptExecutor: Validates, dispatches and normalizes remote execution
    QueryGenerator: Builds lint-clean scripts from descriptions

Example:
    from glidequery_gate import QueryGenerator, StyleValidator

    generated = QueryGenerator().generate("count incidents where active is true")
    assert StyleValidator().validate(generated.code).valid
"""

from glidequery_gate.client import RemoteScriptClient, ServiceNowScriptClient
from glidequery_gate.exceptions import ConfigurationError, ScriptClientError
from glidequery_gate.executor import ExecutionResult, ScriptExecutor
from glidequery_gate.generator import GeneratedCode, QueryGenerator
from glidequery_gate.linting import LintIssue, LintReport, StyleValidator
from glidequery_gate.security import SecurityConfig, SecurityReport, SecurityValidator
from glidequery_gate.types import ScriptError, ScriptExecutionRequest, ScriptExecutionResponse

__version__ = "0.1.0"

__all__ = [
    "SecurityValidator",
    "SecurityConfig",
    "SecurityReport",
    "StyleValidator",
    "LintReport",
    "LintIssue",
    "ScriptExecutor",
    "ExecutionResult",
    "QueryGenerator",
    "GeneratedCode",
    "RemoteScriptClient",
    "ServiceNowScriptClient",
    "ScriptExecutionRequest",
    "ScriptExecutionResponse",
    "ScriptError",
    "ScriptClientError",
    "ConfigurationError",
]
