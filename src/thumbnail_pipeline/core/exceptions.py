"""Custom exceptions for the thumbnail pipeline."""


class ThumbnailPipelineError(Exception):
    """Base exception for all thumbnail pipeline errors."""


class ConfigurationError(ThumbnailPipelineError):
    """Error raised for invalid configuration options."""


class InvalidPathError(ThumbnailPipelineError):
    """Error raised when a source path has no derivable filename."""


class DecodeError(ThumbnailPipelineError):
    """Error raised when the source bytes cannot be decoded as an image."""


class EncodeError(ThumbnailPipelineError):
    """Error raised when a derivative cannot be encoded."""


class StorageError(ThumbnailPipelineError):
    """Error raised for storage backend failures."""


class SourceReadError(StorageError):
    """Error raised when the source object cannot be read."""


class UploadError(StorageError):
    """Error raised when the store rejects an upload."""
