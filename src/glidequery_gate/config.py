"""Environment-based configuration for glidequery-gate."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Connection and execution settings.

    All settings can be overridden via environment variables with
    GLIDEQUERY_ prefix. For example:
        GLIDEQUERY_INSTANCE_URL=https://dev12345.service-now.com
        GLIDEQUERY_TEST_MAX_RESULTS=25
    """

    # Instance connection
    instance_url: str | None = None
    username: str | None = None
    password: str | None = None
    script_endpoint: str = "/api/now/v1/script/execute"

    # Execution limits
    default_timeout_ms: int = Field(default=30000, ge=1000, le=60000)
    max_script_length: int = Field(default=10000, ge=100, le=100000)
    test_max_results: int = Field(default=100, ge=1, le=1000)

    log_level: str = "INFO"

    model_config = {"env_prefix": "GLIDEQUERY_"}

    @field_validator("instance_url")
    @classmethod
    def _require_https(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        value = value.strip().rstrip("/")
        if not value.startswith("https://"):
            raise ValueError("instance_url must use https://")
        return value


settings = Settings()
