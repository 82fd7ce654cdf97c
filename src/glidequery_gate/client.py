"""
Remote script client for ServiceNow instances.

This module defines the RemoteScriptClient protocol that ScriptExecutor
depends on, and ServiceNowScriptClient, an implementation that posts scripts
to the instance's script-execution REST endpoint.

ServiceNowScriptClient receives an injected httpx.AsyncClient with base_url
and authentication already configured. It maps HTTP failures to
ScriptClientError codes and lifts the response body into a
ScriptExecutionResponse. Timeouts are not raised; they come back as a failed
response so the executor can report them like any other script failure.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from glidequery_gate.exceptions import ScriptClientError
from glidequery_gate.types import ScriptError, ScriptExecutionRequest, ScriptExecutionResponse

logger = logging.getLogger(__name__)


class RemoteScriptClient(Protocol):
    """Collaborator that runs a script on the remote platform.

    Implementations return either a ScriptExecutionResponse or the raw
    decoded payload, and raise ScriptClientError on infrastructure failure.
    """

    async def execute_script(self, request: ScriptExecutionRequest) -> ScriptExecutionResponse | Any: ...


_STATUS_ERRORS = {
    401: ("AUTH_EXPIRED", "Authentication failed. Check the instance credentials."),
    403: ("FORBIDDEN", "Access forbidden. User does not have script execution permissions."),
    404: ("ENDPOINT_NOT_FOUND", "Script execution endpoint not found. The instance may not expose it."),
}


@dataclass
class ServiceNowScriptClient:
    """
    Script execution client with injected httpx client.

    Attributes:
        http: Pre-configured httpx.AsyncClient with base_url and auth set
        endpoint: Path of the script-execution endpoint

    Example:
        async with httpx.AsyncClient(
            base_url="https://dev12345.service-now.com",
            auth=("admin", "secret"),
        ) as http:
            client = ServiceNowScriptClient(http=http)
            response = await client.execute_script(
                ScriptExecutionRequest(script="new GlideQuery('incident').count()")
            )
    """

    http: httpx.AsyncClient
    endpoint: str = "/api/now/v1/script/execute"

    DEFAULT_TIMEOUT_MS = 30000
    MAX_TIMEOUT_MS = 60000

    async def execute_script(self, request: ScriptExecutionRequest) -> ScriptExecutionResponse:
        """
        Run a script on the instance.

        Args:
            request: Script and optional timeout in milliseconds

        Returns:
            ScriptExecutionResponse; a timed-out call is returned as a failed
            response with error type TIMEOUT.

        Raises:
            ScriptClientError: On empty scripts, HTTP error statuses,
                transport failures or an undecodable body.
        """
        if not request.script or not request.script.strip():
            raise ScriptClientError("VALIDATION_ERROR", "Script cannot be empty")

        timeout_ms = min(request.timeout or self.DEFAULT_TIMEOUT_MS, self.MAX_TIMEOUT_MS)
        started = time.monotonic()

        try:
            response = await self.http.post(
                self.endpoint,
                json={"script": request.script},
                timeout=timeout_ms / 1000,
            )
        except httpx.TimeoutException:
            elapsed = int((time.monotonic() - started) * 1000)
            logger.warning(f"Script execution timed out after {elapsed}ms (limit {timeout_ms}ms)")
            return ScriptExecutionResponse(
                success=False,
                error=ScriptError(message="Script execution timed out", type="TIMEOUT"),
                execution_time=elapsed,
            )
        except httpx.TransportError as e:
            raise ScriptClientError("NETWORK_ERROR", f"Network error: {e}") from e

        elapsed = int((time.monotonic() - started) * 1000)

        if response.status_code != 200:
            code, message = _STATUS_ERRORS.get(
                response.status_code,
                ("API_ERROR", f"ServiceNow API error: {response.status_code} {response.reason_phrase}"),
            )
            logger.error(f"Script execution failed with HTTP {response.status_code}: {code}")
            raise ScriptClientError(code, message, detail=response.text or None)

        try:
            payload = response.json()
        except ValueError as e:
            raise ScriptClientError(
                "API_ERROR", "ServiceNow API returned a non-JSON response", detail=response.text
            ) from e

        logger.debug(f"Script executed in {elapsed}ms")
        return ScriptExecutionResponse.from_payload(payload, execution_time=elapsed)
