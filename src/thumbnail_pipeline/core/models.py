"""Shared data models for the thumbnail pipeline."""

import os
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

from .exceptions import ConfigurationError
from .paths import parse_source_url, split_filename


class SmallSourcePolicy(str, Enum):
    """What to do with a source that is not wider than the target."""

    PASS_THROUGH = "pass-through"
    UPSCALE = "upscale"


class SizeStrategy(str, Enum):
    """How the per-size steps of one invocation are executed."""

    SERIAL = "serial"
    MULTITHREAD = "multithread"


class InvocationStatus(str, Enum):
    """Terminal outcome of one pipeline run."""

    SUCCEEDED = "succeeded"
    UNSUPPORTED = "unsupported"
    SKIPPED = "skipped"
    FAILED = "failed"


class ThumbnailConfig(BaseModel):
    """Configuration for the thumbnail pipeline, validated once at startup."""

    target_widths: List[PositiveInt]
    destination_container: str
    on_small_source: SmallSourcePolicy = SmallSourcePolicy.PASS_THROUGH
    size_strategy: SizeStrategy = SizeStrategy.SERIAL
    jpeg_quality: int = Field(default=85, ge=1, le=95)
    max_workers: PositiveInt = 4
    debug: bool = False

    @field_validator("target_widths")
    @classmethod
    def _widths_unique(cls, value: List[int]) -> List[int]:
        if not value:
            raise ValueError("at least one target width is required")
        if len(set(value)) != len(value):
            raise ValueError(f"duplicate target widths: {value}")
        return value

    @field_validator("destination_container")
    @classmethod
    def _container_not_blank(cls, value: str) -> str:
        value = value.strip().strip("/")
        if not value:
            raise ValueError("destination container must not be empty")
        return value

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "ThumbnailConfig":
        """
        Build the configuration from environment variables.

        Environment Variables:
            TARGET_WIDTHS: Comma separated positive widths, e.g. "300,1200"
            DESTINATION_CONTAINER: Bucket/container receiving derivatives
            ON_SMALL_SOURCE: "pass-through" (default) or "upscale"
            SIZE_STRATEGY: "serial" (default) or "multithread"
            JPEG_QUALITY: JPEG encoder quality (default 85)
            MAX_WORKERS: Thread count for the multithread strategy (default 4)

        Raises:
            ConfigurationError: If a variable is missing or invalid
        """
        env = os.environ if environ is None else environ

        raw_widths = env.get("TARGET_WIDTHS", "").strip()
        if not raw_widths:
            raise ConfigurationError("TARGET_WIDTHS is not set")
        try:
            widths = [int(part) for part in raw_widths.split(",") if part.strip()]
        except ValueError as exc:
            raise ConfigurationError(f"Invalid TARGET_WIDTHS: {raw_widths!r}") from exc

        values = {
            "target_widths": widths,
            "destination_container": env.get("DESTINATION_CONTAINER", ""),
            "on_small_source": env.get("ON_SMALL_SOURCE", "pass-through"),
            "size_strategy": env.get("SIZE_STRATEGY", "serial"),
            "jpeg_quality": env.get("JPEG_QUALITY", "85"),
            "max_workers": env.get("MAX_WORKERS", "4"),
        }
        return cls.validated(**values)

    @classmethod
    def validated(cls, **values) -> "ThumbnailConfig":
        """Construct a config, turning validation failures into ConfigurationError."""
        try:
            return cls(**values)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid thumbnail configuration: {exc}") from exc


class SourceObject(BaseModel):
    """The uploaded object that triggered an invocation."""

    model_config = ConfigDict(frozen=True)

    url: str
    container: str
    path: str
    filename: str
    extension: str

    @classmethod
    def from_url(cls, url: str) -> "SourceObject":
        """Parse a source object from its absolute URL."""
        container, path = parse_source_url(url)
        _, filename = split_filename(path)
        _, dot, extension = filename.rpartition(".")
        return cls(
            url=url,
            container=container,
            path=path,
            filename=filename,
            extension=extension.lower() if dot else "",
        )


class TargetSpec(BaseModel):
    """One configured output width and the encoder it uses."""

    model_config = ConfigDict(frozen=True)

    width: PositiveInt
    encoder_name: str


class Derivative(BaseModel):
    """An encoded derivative ready for upload."""

    target: TargetSpec
    path: str
    data: bytes
    content_type: str
    width: int
    height: int


class SizeResult(BaseModel):
    """Result of producing a single derivative."""

    width: int
    dest_path: str = ""
    success: bool = False
    error: str = ""
    output_width: int = 0
    output_height: int = 0
    processing_time: float = 0.0


class InvocationResult(BaseModel):
    """Result of one pipeline run."""

    source_url: str
    status: InvocationStatus
    sizes: List[SizeResult] = Field(default_factory=list)
    message: str = ""
    processing_time: float = 0.0

    @property
    def uploaded_count(self) -> int:
        return sum(1 for size in self.sizes if size.success)

    @property
    def failed_count(self) -> int:
        return sum(1 for size in self.sizes if not size.success)
