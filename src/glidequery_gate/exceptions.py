"""
Exception classes for remote script execution and configuration.

- ScriptClientError: infrastructure failure reported by the remote client
  (network, authentication, permission, missing endpoint, timeout)
- ConfigurationError: required connection settings are missing or invalid

Script-level failures (the submitted script threw on the instance) are not
exceptions; they arrive as a failed ScriptExecutionResponse.
"""


class ScriptClientError(Exception):
    """
    Raised by a remote script client when the call itself fails.

    The message is kept exactly as produced by the client so callers can
    match on policy-specific wording (e.g. permission denials).

    Attributes:
        code: Machine-readable error class (e.g. FORBIDDEN, TIMEOUT)
        message: Human-readable message
        detail: Optional upstream response body or extra context
    """

    def __init__(self, code: str, message: str, detail: str | None = None) -> None:
        self.code = code
        self.message = message
        self.detail = detail
        super().__init__(message)


class ConfigurationError(Exception):
    """
    Raised when a required setting is missing.

    Attributes:
        setting: Name of the environment variable to set
    """

    def __init__(self, setting: str, reason: str = "is not set") -> None:
        self.setting = setting
        super().__init__(f"Missing required configuration: {setting} {reason}")
