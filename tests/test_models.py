"""Tests for the pydantic models and configuration loading."""

import pytest
from pydantic import ValidationError

from thumbnail_pipeline.core.exceptions import ConfigurationError, InvalidPathError
from thumbnail_pipeline.core.models import (
    InvocationResult,
    InvocationStatus,
    SizeResult,
    SizeStrategy,
    SmallSourcePolicy,
    SourceObject,
    TargetSpec,
    ThumbnailConfig,
)


class TestThumbnailConfig:
    """Tests for ThumbnailConfig."""

    def test_defaults(self):
        config = ThumbnailConfig(target_widths=[300], destination_container="thumbnails")

        assert config.on_small_source is SmallSourcePolicy.PASS_THROUGH
        assert config.size_strategy is SizeStrategy.SERIAL
        assert config.jpeg_quality == 85
        assert config.max_workers == 4

    def test_from_env(self):
        config = ThumbnailConfig.from_env(
            {
                "TARGET_WIDTHS": "300, 1200",
                "DESTINATION_CONTAINER": "thumbnails",
                "ON_SMALL_SOURCE": "upscale",
                "SIZE_STRATEGY": "multithread",
                "JPEG_QUALITY": "70",
            }
        )

        assert config.target_widths == [300, 1200]
        assert config.destination_container == "thumbnails"
        assert config.on_small_source is SmallSourcePolicy.UPSCALE
        assert config.size_strategy is SizeStrategy.MULTITHREAD
        assert config.jpeg_quality == 70

    @pytest.mark.parametrize(
        "environ",
        [
            {"DESTINATION_CONTAINER": "thumbnails"},
            {"TARGET_WIDTHS": "", "DESTINATION_CONTAINER": "thumbnails"},
            {"TARGET_WIDTHS": "300,abc", "DESTINATION_CONTAINER": "thumbnails"},
            {"TARGET_WIDTHS": "0", "DESTINATION_CONTAINER": "thumbnails"},
            {"TARGET_WIDTHS": "300,-5", "DESTINATION_CONTAINER": "thumbnails"},
            {"TARGET_WIDTHS": "300,300", "DESTINATION_CONTAINER": "thumbnails"},
            {"TARGET_WIDTHS": "300"},
            {"TARGET_WIDTHS": "300", "DESTINATION_CONTAINER": " / "},
            {
                "TARGET_WIDTHS": "300",
                "DESTINATION_CONTAINER": "thumbnails",
                "ON_SMALL_SOURCE": "stretch",
            },
            {
                "TARGET_WIDTHS": "300",
                "DESTINATION_CONTAINER": "thumbnails",
                "JPEG_QUALITY": "100",
            },
        ],
    )
    def test_from_env_rejects_invalid_configuration(self, environ):
        with pytest.raises(ConfigurationError):
            ThumbnailConfig.from_env(environ)

    def test_validated_wraps_validation_errors(self):
        with pytest.raises(ConfigurationError):
            ThumbnailConfig.validated(target_widths=[], destination_container="t")

    def test_direct_construction_raises_validation_error(self):
        with pytest.raises(ValidationError):
            ThumbnailConfig(target_widths=[], destination_container="thumbnails")


class TestSourceObject:
    """Tests for SourceObject."""

    def test_from_url(self):
        source = SourceObject.from_url("s3://uploads/photos/a.JPG")

        assert source.container == "uploads"
        assert source.path == "photos/a.JPG"
        assert source.filename == "a.JPG"
        assert source.extension == "jpg"

    def test_from_url_without_extension(self):
        assert SourceObject.from_url("s3://uploads/photos/README").extension == ""

    def test_from_url_without_filename(self):
        with pytest.raises(InvalidPathError):
            SourceObject.from_url("s3://uploads/photos/")

    def test_is_immutable(self):
        source = SourceObject.from_url("s3://uploads/a.png")

        with pytest.raises(ValidationError):
            source.path = "b.png"


class TestResults:
    """Tests for result models."""

    def test_target_spec_requires_positive_width(self):
        with pytest.raises(ValidationError):
            TargetSpec(width=0, encoder_name="png")

    def test_invocation_counts(self):
        result = InvocationResult(
            source_url="s3://uploads/a.png",
            status=InvocationStatus.FAILED,
            sizes=[
                SizeResult(width=100, success=True),
                SizeResult(width=200, success=False, error="boom"),
                SizeResult(width=300, success=True),
            ],
        )

        assert result.uploaded_count == 2
        assert result.failed_count == 1

    def test_invocation_result_serializes_status(self):
        result = InvocationResult(
            source_url="s3://uploads/a.txt", status=InvocationStatus.UNSUPPORTED
        )

        assert result.model_dump(mode="json")["status"] == "unsupported"
