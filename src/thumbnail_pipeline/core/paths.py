"""Source URL parsing and destination path derivation."""

import re
from typing import Dict, Iterable, Optional, Tuple
from urllib.parse import unquote, urlparse

from .exceptions import InvalidPathError

WIDTH_SEGMENT_PREFIX = "w"

_VIRTUAL_HOSTED_S3 = re.compile(
    r"^(?P<bucket>.+)\.s3(?:[.-][a-z0-9-]+)*\.amazonaws\.com$", re.IGNORECASE
)
_WIDTH_SEGMENT = re.compile(rf"^{WIDTH_SEGMENT_PREFIX}\d+$")


def parse_source_url(url: str) -> Tuple[str, str]:
    """
    Split an object URL into its container and its container-relative path.

    Supported forms:
        s3://bucket/photos/a.jpg
        https://bucket.s3.eu-west-1.amazonaws.com/photos/a.jpg
        https://account.blob.core.windows.net/container/photos/a.jpg
        http://localhost:9000/bucket/photos/a.jpg  (path-style)

    Returns:
        Tuple of (container, path)

    Raises:
        InvalidPathError: If the URL has no container or no object path
    """
    parsed = urlparse(url.strip())
    host = parsed.hostname or ""
    path = unquote(parsed.path).lstrip("/")
    virtual_hosted = _VIRTUAL_HOSTED_S3.match(host)

    if parsed.scheme == "s3":
        container = parsed.netloc
    elif parsed.scheme in ("http", "https") and virtual_hosted:
        container = virtual_hosted.group("bucket")
    elif parsed.scheme in ("http", "https"):
        container, _, path = path.partition("/")
    else:
        raise InvalidPathError(f"Unsupported source URL: {url!r}")

    if not container or not path:
        raise InvalidPathError(f"Source URL has no container or object path: {url!r}")

    return container, path


def strip_container(path: str, container: Optional[str]) -> str:
    """Remove a leading ``<container>/`` segment and any leading slash."""
    relative = path.lstrip("/")
    if container:
        prefix = container.strip("/") + "/"
        if relative.startswith(prefix):
            relative = relative[len(prefix) :]
    return relative


def split_filename(path: str) -> Tuple[str, str]:
    """
    Split a path into (directory, filename).

    Raises:
        InvalidPathError: If the path has no separable filename
    """
    relative = path.lstrip("/")
    directory, _, filename = relative.rpartition("/")
    if not filename or filename in (".", ".."):
        raise InvalidPathError(f"Path has no filename: {path!r}")
    return directory, filename


def width_segment(width: int) -> str:
    return f"{WIDTH_SEGMENT_PREFIX}{width}"


def derive_path(source_path: str, width: int, container: Optional[str] = None) -> str:
    """
    Compute the destination path of the derivative at ``width``.

    The width segment is inserted as a directory right before the filename:
    ``photos/a.jpg`` at 300 becomes ``photos/w300/a.jpg``.

    Args:
        source_path: Source object path, relative to its container
        width: Positive target width
        container: Optional container name to strip from the path

    Returns:
        Destination path, relative to the destination container

    Raises:
        ValueError: If width is not a positive integer
        InvalidPathError: If the source path has no filename
    """
    if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
        raise ValueError(f"Target width must be a positive integer, got {width!r}")

    directory, filename = split_filename(strip_container(source_path, container))
    parts = [directory] if directory else []
    parts.extend([width_segment(width), filename])
    return "/".join(parts)


def derive_paths(
    source_path: str, widths: Iterable[int], container: Optional[str] = None
) -> Dict[int, str]:
    """Derive destination paths for several widths, keeping their order."""
    paths: Dict[int, str] = {}
    for width in widths:
        if width in paths:
            raise ValueError(f"Duplicate target width: {width}")
        paths[width] = derive_path(source_path, width, container)
    return paths


def is_derivative_path(path: str) -> bool:
    """Return True if the parent directory of ``path`` is a width segment."""
    segments = path.strip("/").split("/")
    return len(segments) >= 2 and bool(_WIDTH_SEGMENT.match(segments[-2]))
