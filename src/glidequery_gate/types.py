"""
Pydantic types for the remote script-execution envelope.

These are wire types for external data validation. Internal results
(ExecutionResult, LintReport, SecurityReport) are dataclasses.

Notes:
- The instance answers in several shapes for the same conceptual result:
  a bare array or primitive, or {"result": ...} where the inner value may
  itself carry {"value": ...} or a script-level failure. from_payload()
  lifts all of them into one ScriptExecutionResponse at the edge.
- Error details may be an object or a plain string.
"""

from typing import Any

from pydantic import BaseModel, Field


class ScriptExecutionRequest(BaseModel):
    """Request sent to the remote script executor.

    Attributes:
        script: Server-side script to execute
        timeout: Timeout in milliseconds; None lets the client apply its default
    """

    script: str
    timeout: int | None = None


class ScriptError(BaseModel):
    """Error raised by the script on the remote interpreter."""

    message: str
    line: int | None = None
    type: str | None = None


class ScriptExecutionResponse(BaseModel):
    """
    Envelope returned by a remote script client.

    Example payloads accepted by from_payload():
        [{"number": "INC0010001"}]
        42
        {"result": {"value": 42, "logs": ["counted"]}}
        {"result": {"rowCount": 12}}
        {"result": {"success": false, "error": {"message": "x is not defined", "line": 3}}}
    """

    success: bool
    result: Any = None
    logs: list[str] = Field(default_factory=list)
    error: ScriptError | None = None
    execution_time: int = 0

    @classmethod
    def from_payload(cls, payload: Any, execution_time: int = 0) -> "ScriptExecutionResponse":
        """
        Lift a raw response body into a ScriptExecutionResponse.

        Args:
            payload: Decoded JSON body (or bare value) from the instance
            execution_time: Round-trip time in milliseconds

        Returns:
            A successful response carrying the result value, or a failed
            response carrying the script error and any remote logs.
        """
        if not isinstance(payload, dict) or "result" not in payload:
            return cls(success=True, result=payload, execution_time=execution_time)

        inner = payload["result"]
        if not isinstance(inner, dict):
            return cls(success=True, result=inner, execution_time=execution_time)

        logs = _logs(inner.get("logs"))

        if inner.get("success") is False or inner.get("error"):
            return cls(
                success=False,
                error=_script_error(inner),
                logs=logs,
                execution_time=execution_time,
            )

        return cls(
            success=True,
            result=inner["value"] if "value" in inner else inner,
            logs=logs,
            execution_time=execution_time,
        )


def _script_error(inner: dict[str, Any]) -> ScriptError:
    """Build a ScriptError from the several error layouts the instance uses.

    Fields of the wrong type are coerced (message) or dropped (line, type)
    rather than rejected, since a malformed error is still a failure.
    """
    error = inner.get("error")
    if isinstance(error, dict):
        return ScriptError(
            message=_text(error.get("message")) or "Script execution failed",
            line=_line(error.get("line")),
            type=_text(error.get("type")) or "Error",
        )
    if error:
        return ScriptError(
            message=_text(error),
            line=_line(inner.get("errorLine")),
            type=_text(inner.get("errorType")),
        )
    return ScriptError(
        message=_text(inner.get("errorMessage")) or "Script execution failed",
        line=_line(inner.get("errorLine")),
        type=_text(inner.get("errorType")) or "Error",
    )


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


def _line(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _logs(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(line) for line in value]
