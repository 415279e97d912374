"""Testing utilities and fakes for the thumbnail pipeline."""

from .fakes import (
    FakeS3Client,
    FakeLogger,
    FakeStore,
    S3Object,
    S3Bucket,
    create_test_animation,
    create_test_image,
    setup_test_s3_environment,
)

__all__ = [
    "FakeS3Client",
    "FakeLogger",
    "FakeStore",
    "S3Object",
    "S3Bucket",
    "create_test_animation",
    "create_test_image",
    "setup_test_s3_environment",
]
