"""Core components for the thumbnail pipeline."""

from .encoders import UNSUPPORTED, Encoder, select_encoder
from .exceptions import (
    ConfigurationError,
    DecodeError,
    EncodeError,
    InvalidPathError,
    SourceReadError,
    StorageError,
    ThumbnailPipelineError,
    UploadError,
)
from .logging_config import get_logger, setup_logger
from .models import (
    Derivative,
    InvocationResult,
    InvocationStatus,
    SizeResult,
    SizeStrategy,
    SmallSourcePolicy,
    SourceObject,
    TargetSpec,
    ThumbnailConfig,
)
from .paths import derive_path, derive_paths, parse_source_url
from .resizer import compute_target_size, normalize_orientation, resize, resize_frames
from .services import ThumbnailPipeline

__all__ = [
    "ThumbnailConfig",
    "SourceObject",
    "TargetSpec",
    "Derivative",
    "SizeResult",
    "InvocationResult",
    "InvocationStatus",
    "SizeStrategy",
    "SmallSourcePolicy",
    "Encoder",
    "UNSUPPORTED",
    "select_encoder",
    "derive_path",
    "derive_paths",
    "parse_source_url",
    "compute_target_size",
    "normalize_orientation",
    "resize",
    "resize_frames",
    "ThumbnailPipeline",
    "setup_logger",
    "get_logger",
    "ThumbnailPipelineError",
    "ConfigurationError",
    "InvalidPathError",
    "DecodeError",
    "EncodeError",
    "StorageError",
    "SourceReadError",
    "UploadError",
]
