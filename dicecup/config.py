from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LOG_FORMAT = "[{source}.{method}] - {notation} : {operation} = {value}"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DICECUP_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Guardrails applied while building a tree from notation.
    max_quantity: int = Field(default=100, ge=1)
    max_sides: int = Field(default=1000, ge=2)

    # get_tracer() returns a no-op tracer unless trace_enabled is set.
    trace_enabled: bool = False
    trace_log_level: str = "DEBUG"
    trace_log_format: str = DEFAULT_LOG_FORMAT


settings = Settings()
