"""Protocol definitions for dependency injection and testability."""

from typing import Any, BinaryIO, Dict, Protocol

from .models import SourceObject


class S3ClientProtocol(Protocol):
    """Protocol for the S3 client operations the pipeline uses."""

    def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        """Get object from S3."""
        ...

    def put_object(self, **kwargs: Any) -> Dict[str, Any]:
        """Put object to S3."""
        ...


class StoreProtocol(Protocol):
    """Destination store receiving encoded derivatives."""

    def upload(
        self,
        path: str,
        data: BinaryIO,
        overwrite: bool,
        content_type: str = "application/octet-stream",
    ) -> Dict[str, Any]:
        """Upload ``data`` to ``path``; replace an existing object when ``overwrite``."""
        ...


class SourceReaderProtocol(Protocol):
    """Opens the byte stream of a source object."""

    def open(self, source: SourceObject) -> BinaryIO:
        """Return a stream positioned at the start of the source bytes."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(
        self, message: str, context: Any = None, exc_info: bool = False, **kwargs: Any
    ) -> None:
        """Log error message, with the active traceback when ``exc_info``."""
        ...
