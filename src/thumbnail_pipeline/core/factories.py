"""Factory classes for creating configured service instances."""

from typing import TYPE_CHECKING, Any, Optional

import boto3

from .models import ThumbnailConfig
from .observability import MetricsCollector, StructuredLogger
from .protocols import LoggerProtocol, S3ClientProtocol
from .services import S3SourceReader, S3Store, ThumbnailPipeline

if TYPE_CHECKING:
    from mypy_boto3_s3.client import S3Client


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(name: str = "pipeline", debug: bool = False) -> LoggerProtocol:
        """Create a structured logger nested under the pipeline's root logger."""
        import logging

        return StructuredLogger(name, logging.DEBUG if debug else None)


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def create_s3_client(**kwargs: Any) -> "S3Client":
        """Create S3 client with optional configuration."""
        session = boto3.Session()
        return session.client("s3", **kwargs)


class ThumbnailPipelineFactory:
    """Factory for creating the complete thumbnail pipeline."""

    @staticmethod
    def create_pipeline(
        config: ThumbnailConfig,
        s3_client: Optional[S3ClientProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ) -> ThumbnailPipeline:
        """Create a pipeline reading from and writing to S3."""

        # Create default dependencies if not provided
        if s3_client is None:
            s3_client = S3ClientFactory.create_s3_client()

        if logger is None:
            logger = LoggerFactory.create_logger(debug=config.debug)

        return ThumbnailPipeline(
            config=config,
            store=S3Store(s3_client, config.destination_container),
            logger=logger,
            source_reader=S3SourceReader(s3_client),
            metrics_collector=metrics_collector,
        )
