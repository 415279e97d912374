import pytest

from thumbnail_pipeline.core.exceptions import (
    ConfigurationError,
    DecodeError,
    EncodeError,
    InvalidPathError,
    SourceReadError,
    StorageError,
    ThumbnailPipelineError,
    UploadError,
)


@pytest.mark.parametrize(
    "error_cls",
    [ConfigurationError, DecodeError, EncodeError, InvalidPathError, StorageError],
)
def test_errors_share_pipeline_base(error_cls) -> None:
    assert issubclass(error_cls, ThumbnailPipelineError)


def test_storage_errors_are_distinguishable() -> None:
    assert issubclass(UploadError, StorageError)
    assert issubclass(SourceReadError, StorageError)
    assert not issubclass(UploadError, SourceReadError)


def test_error_message_preserved() -> None:
    with pytest.raises(InvalidPathError, match="no filename"):
        raise InvalidPathError("Path has no filename: 'photos/'")
