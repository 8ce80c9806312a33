"""Run configuration model."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from k8sexport.config import ExportSettings
from k8sexport.core.errors import ConfigError


class ExportConfig(BaseModel):
    """Immutable configuration for one export run.

    Built once from parsed arguments (and ``ExportSettings`` defaults) and
    passed explicitly to the driver.  Nothing reads process-wide flags.
    """

    model_config = ConfigDict(frozen=True)

    db_path: Path
    output_path: Path
    bucket: str = "key"
    prefix: str = "/registry/"
    document_separator: bool = False

    @field_validator("prefix")
    @classmethod
    def _prefix_is_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"prefix must start with '/': {value!r}")
        return value

    @field_validator("bucket")
    @classmethod
    def _bucket_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("bucket name must not be empty")
        return value

    @classmethod
    def from_settings(
        cls,
        db_path: Path,
        output_path: Path,
        settings: ExportSettings | None = None,
        **overrides: object,
    ) -> ExportConfig:
        """Merge explicit values over ``ExportSettings`` defaults.

        ``None`` overrides are ignored so unset CLI flags fall through to
        the environment.

        Raises
        ------
        ConfigError
            If the merged values fail validation.
        """
        settings = settings or ExportSettings()
        values: dict[str, object] = {
            "bucket": settings.bucket,
            "prefix": settings.prefix,
            "document_separator": settings.document_separator,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(db_path=db_path, output_path=output_path, **values)
        except ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(p) for p in first["loc"])
            raise ConfigError(f"invalid configuration: {field}: {first['msg']}") from exc
