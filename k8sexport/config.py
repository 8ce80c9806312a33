"""Environment-driven defaults for the exporter.

Centralized settings using pydantic-settings.  Reads from a .env file and
K8S_EXPORT_* environment variables; command-line flags take precedence
over anything set here.

Examples
--------
Override via environment::

    export K8S_EXPORT_LOG_LEVEL=DEBUG
    export K8S_EXPORT_DOCUMENT_SEPARATOR=true

Or via .env file::

    K8S_EXPORT_PREFIX=/registry/
    K8S_EXPORT_BUCKET=key
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class ExportSettings(BaseSettings):
    """Defaults for every option the CLI does not set explicitly."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="K8S_EXPORT_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "WARNING"

    # Store layout
    bucket: str = "key"
    prefix: str = "/registry/"

    # Output
    document_separator: bool = False
