"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (SEARCHDB_ prefix)
  2. YAML config file (if specified)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class NamespaceSettings(BaseModel):
    """Tenant namespace applied to every index name sent to the backend.

    A logical index ``docs`` becomes ``<name><separator>docs`` on the wire.
    """

    name: str = Field(default="", description="Tenant/application namespace")
    separator: str = Field(default="::", min_length=1, description="Token between namespace and index name")


class BackendSettings(BaseModel):
    """Search backend client configuration."""

    hosts: list[str] = Field(default_factory=lambda: ["https://localhost:9200"], description="Backend node URLs")
    username: str | None = Field(default=None, description="HTTP basic-auth username")
    password: str | None = Field(default=None, description="HTTP basic-auth password")
    verify_certs: bool = Field(default=True, description="Verify TLS certificates")
    extra: dict[str, Any] = Field(default_factory=dict, description="Extra client keyword arguments")

    @field_validator("hosts", mode="before")
    @classmethod
    def _parse_hosts(cls, v: Any) -> list[str]:
        """Parse hosts from JSON string (env var) or list."""
        if isinstance(v, str):
            import json

            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(h) for h in parsed]
            except (json.JSONDecodeError, TypeError):
                pass
            # Single host as plain string
            return [v] if v else []
        return list(v)


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root settings.

    Configuration is loaded from environment variables with the SEARCHDB_ prefix.
    Nested settings use double underscores: SEARCHDB_NAMESPACE__NAME=tenant-a

    Example:
        SEARCHDB_NAMESPACE__NAME=tenant-a
        SEARCHDB_BACKEND__HOSTS='["https://es-1:9200", "https://es-2:9200"]'
        SEARCHDB_OBSERVABILITY__LOG_FORMAT=console
    """

    model_config = {
        "env_prefix": "SEARCHDB_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    namespace: NamespaceSettings = Field(default_factory=NamespaceSettings)
    backend: BackendSettings = Field(default_factory=BackendSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are used as defaults; environment variables
        still take precedence.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
