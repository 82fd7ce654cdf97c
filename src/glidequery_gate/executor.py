"""Remote execution of validated GlideQuery scripts.

Runs scripts on the instance through an injected RemoteScriptClient with:
- Empty and length checks
- Security classification (blacklist) before any remote call
- Preview ("test") mode: row cap enforced by a wrapper on the instance,
  write-operation warnings in the logs
- Truncation of oversized result sets
- Normalization of the several result shapes the instance can return

execute() does not raise for script or infrastructure failures; every
outcome is an ExecutionResult.
"""

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any

from glidequery_gate.client import RemoteScriptClient
from glidequery_gate.exceptions import ScriptClientError
from glidequery_gate.linting import LintReport, StyleValidator
from glidequery_gate.patterns import WRITE_OPERATIONS
from glidequery_gate.security import SecurityConfig, SecurityValidator
from glidequery_gate.types import ScriptExecutionRequest, ScriptExecutionResponse

logger = logging.getLogger(__name__)


_PREVIEW_WRAPPER = """\
(function() {{
  var __testModeMaxResults = {max_results};
  var __originalScript = function() {{
{script}
  }};

  var result = __originalScript();

  if (result && typeof result.toArray === 'function') {{
    var array = result.toArray();
    return {{
      __testMode: true,
      __truncated: array.length > __testModeMaxResults,
      __originalCount: array.length,
      data: array.slice(0, __testModeMaxResults)
    }};
  }}

  return result;
}})();"""


@dataclass(frozen=True)
class ExecutionResult:
    """Result of running a script on the instance.

    Attributes:
        success: Whether the script ran without errors
        data: Normalized payload (see ScriptExecutor.execute)
        logs: Warning and informational lines, remote logs included
        error: Human-readable error message if execution failed
        execution_time: Wall-clock time in milliseconds
        record_count: Number of records returned, for arrays and row counts
        truncated: Whether the result set was cut down to the cap
    """

    success: bool
    data: Any = None
    logs: list[str] = field(default_factory=list)
    error: str | None = None
    execution_time: int = 0
    record_count: int | None = None
    truncated: bool = False


class ScriptExecutor:
    """Executor for GlideQuery scripts on a remote instance.

    Validates scripts before dispatch and reshapes whatever the instance
    returns into an ExecutionResult.

    Example:
        async with httpx.AsyncClient(base_url=url, auth=(user, password)) as http:
            executor = ScriptExecutor(ServiceNowScriptClient(http=http))
            result = await executor.execute(
                "return new GlideQuery('incident').select('number');",
                test_mode=True,
                max_results=10,
            )
    """

    # Cap applied to array results outside preview mode
    MAX_RESULTS = 1000
    DEFAULT_TEST_MAX_RESULTS = 100
    MAX_SCRIPT_LENGTH = 10000

    def __init__(
        self,
        client: RemoteScriptClient,
        security_validator: SecurityValidator | None = None,
        style_validator: StyleValidator | None = None,
        max_script_length: int = MAX_SCRIPT_LENGTH,
        test_max_results: int = DEFAULT_TEST_MAX_RESULTS,
    ) -> None:
        self._client = client
        if security_validator is None:
            security_validator = SecurityValidator(SecurityConfig(max_script_length=max_script_length))
        if style_validator is None:
            style_validator = StyleValidator(max_script_length=max_script_length)
        self._security = security_validator
        self._style = style_validator
        self._max_script_length = max_script_length
        self._test_max_results = test_max_results

    async def execute(
        self,
        script: str,
        *,
        timeout: int | None = None,
        test_mode: bool = False,
        max_results: int | None = None,
    ) -> ExecutionResult:
        """Execute a script on the instance.

        Args:
            script: GlideQuery script to execute
            timeout: Timeout in milliseconds; None uses the client default
            test_mode: Run in preview mode with a row cap and write warnings
            max_results: Preview row cap (default: test_max_results)

        Returns:
            ExecutionResult; failures are reported with success=False
        """
        started = time.monotonic()
        mode = "test" if test_mode else "execute"
        logger.info(
            f"Starting script execution (mode={mode}, length={len(script or '')}, "
            f"timeout={timeout}, max_results={max_results})"
        )

        if not script or not script.strip():
            logger.warning("Script execution rejected: empty script")
            return ExecutionResult(
                success=False,
                error="Script cannot be empty",
                execution_time=self._elapsed(started),
            )

        if len(script) > self._max_script_length:
            logger.warning(
                f"Script execution rejected: {len(script)} characters exceeds "
                f"{self._max_script_length}"
            )
            return ExecutionResult(
                success=False,
                error=f"Script exceeds maximum length of {self._max_script_length} characters",
                execution_time=self._elapsed(started),
            )

        security = self._security.validate(script)
        if not security.safe:
            violations = ", ".join(security.violations or [])
            logger.error(f"Script execution rejected: security violation: {violations}")
            return ExecutionResult(
                success=False,
                error=f"Security violation: {violations}",
                execution_time=self._elapsed(started),
            )

        logs: list[str] = []
        cap = self.MAX_RESULTS
        executable = script

        if test_mode:
            writes = self.detect_write_operations(script)
            if writes:
                logs.append(
                    f"WARNING: This script contains write operations ({', '.join(writes)}) "
                    "that will persist changes to the database."
                )
            cap = max_results or self._test_max_results
            executable = self.wrap_for_test_mode(script, cap)

        try:
            raw = await self._client.execute_script(
                ScriptExecutionRequest(script=executable, timeout=timeout)
            )
            if isinstance(raw, ScriptExecutionResponse):
                response = raw
            else:
                response = ScriptExecutionResponse.from_payload(raw)
        except ScriptClientError as e:
            message = _timeout_message(timeout) if e.code == "TIMEOUT" else e.message
            logger.error(f"Script execution failed: {e.code}: {e.message}")
            return ExecutionResult(
                success=False,
                error=message,
                logs=logs,
                execution_time=self._elapsed(started),
            )
        except TimeoutError:
            logger.error("Script execution failed: timed out waiting for the instance")
            return ExecutionResult(
                success=False,
                error=_timeout_message(timeout),
                logs=logs,
                execution_time=self._elapsed(started),
            )
        except Exception as e:
            logger.exception(f"Script execution failed with unexpected error: {e}")
            return ExecutionResult(
                success=False,
                error=str(e) or "Unknown error occurred",
                logs=logs,
                execution_time=self._elapsed(started),
            )

        result = self._format_result(response, logs, cap, timeout, self._elapsed(started))

        if result.success:
            logger.info(
                f"Script execution completed in {result.execution_time}ms "
                f"(records={result.record_count}, truncated={result.truncated})"
            )
        else:
            logger.error(f"Script execution completed with error: {result.error}")
        return result

    def validate(self, script: str) -> LintReport:
        """Lint a script without executing it."""
        return self._style.validate(script)

    @staticmethod
    def detect_write_operations(script: str) -> list[str]:
        """Return the write methods called in a script, in canonical order."""
        return [
            op for op in WRITE_OPERATIONS if re.search(rf"\.{op}\s*\(", script, re.IGNORECASE)
        ]

    @staticmethod
    def wrap_for_test_mode(script: str, max_results: int) -> str:
        """Wrap a script so the instance caps and marks Stream results.

        The cap is embedded literally as `var __testModeMaxResults = N;`.
        The script body runs as a function, so it must `return` its result.
        The body is embedded unchanged, without re-indenting.
        """
        return _PREVIEW_WRAPPER.format(max_results=int(max_results), script=script)

    def _format_result(
        self,
        response: ScriptExecutionResponse,
        logs: list[str],
        cap: int,
        timeout: int | None,
        elapsed: int,
    ) -> ExecutionResult:
        """Reshape a response envelope into an ExecutionResult."""
        logs = logs + response.logs
        execution_time = response.execution_time or elapsed

        if not response.success:
            error = response.error
            if error is not None and error.type == "TIMEOUT":
                message = error.message if "timed out" in error.message else _timeout_message(timeout)
            else:
                message = error.message if error else "Script execution failed"
            return ExecutionResult(
                success=False,
                error=message,
                logs=logs,
                execution_time=execution_time,
            )

        data = response.result

        if data is None:
            logs.append("No records found - query returned empty result")
            return ExecutionResult(success=True, logs=logs, execution_time=execution_time)

        if isinstance(data, dict) and data.get("__testMode"):
            inner = data.get("data")
            truncated = bool(data.get("__truncated"))
            record_count = len(inner) if isinstance(inner, list) else None
            original = data.get("__originalCount")
            if truncated and original and record_count is not None:
                logs.append(f"Results truncated: showing {record_count} of {original} records")
            return ExecutionResult(
                success=True,
                data=inner,
                logs=logs,
                execution_time=execution_time,
                record_count=record_count,
                truncated=truncated,
            )

        if isinstance(data, dict) and _is_int(data.get("rowCount")):
            row_count = data["rowCount"]
            return ExecutionResult(
                success=True,
                data={"rowCount": row_count},
                logs=logs,
                execution_time=execution_time,
                record_count=row_count,
            )

        if isinstance(data, list):
            truncated = len(data) > cap
            records = data[:cap] if truncated else data
            if truncated:
                logs.append(f"Results truncated: showing {cap} of {len(data)} records")
            return ExecutionResult(
                success=True,
                data=records,
                logs=logs,
                execution_time=execution_time,
                record_count=len(records),
                truncated=truncated,
            )

        if isinstance(data, (bool, int, float, str)):
            return ExecutionResult(
                success=True,
                data={"value": data, "type": _type_name(data)},
                logs=logs,
                execution_time=execution_time,
            )

        return ExecutionResult(success=True, data=data, logs=logs, execution_time=execution_time)

    @staticmethod
    def _elapsed(started: float) -> int:
        return int((time.monotonic() - started) * 1000)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _type_name(value: bool | int | float | str) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    return "number"


def _timeout_message(timeout: int | None) -> str:
    if timeout:
        return f"Script execution timed out after {timeout}ms"
    return "Script execution timed out"
