"""Service implementations for the thumbnail pipeline."""

import io
import time
from typing import Any, BinaryIO, Dict, List, Optional
from dataclasses import dataclass, field

from PIL import Image, ImageSequence

from .encoders import Encoder, select_encoder
from .error_handling import SizeOperationContextManager, with_error_handling
from .exceptions import (
    DecodeError,
    InvalidPathError,
    SourceReadError,
    ThumbnailPipelineError,
    UploadError,
)
from .models import (
    Derivative,
    InvocationResult,
    InvocationStatus,
    SizeResult,
    SourceObject,
    TargetSpec,
    ThumbnailConfig,
)
from .observability import LogContext, MetricsCollector
from .paths import derive_path, is_derivative_path
from .protocols import (
    LoggerProtocol,
    S3ClientProtocol,
    SourceReaderProtocol,
    StoreProtocol,
)
from .resizer import Frames, normalize_orientation, resize_frames


@dataclass
class InvocationContext:
    """Per-invocation state shared by the per-size steps."""

    source: SourceObject
    encoder: Encoder
    log_context: LogContext
    start_time: float = field(default_factory=time.time)


class S3Store:
    """Store writing derivatives to an S3 bucket."""

    def __init__(self, s3_client: S3ClientProtocol, bucket: str):
        self._s3_client = s3_client
        self._bucket = bucket

    @property
    def bucket(self) -> str:
        return self._bucket

    @with_error_handling(UploadError)
    def upload(
        self,
        path: str,
        data: BinaryIO,
        overwrite: bool,
        content_type: str = "application/octet-stream",
    ) -> Dict[str, Any]:
        """Put ``data`` at ``path``; without ``overwrite`` an existing key is kept."""
        params: Dict[str, Any] = {
            "Bucket": self._bucket,
            "Key": path,
            "Body": data.read(),
            "ContentType": content_type,
        }
        if not overwrite:
            params["IfNoneMatch"] = "*"
        return self._s3_client.put_object(**params)


class S3SourceReader:
    """Reads source objects from S3."""

    def __init__(self, s3_client: S3ClientProtocol):
        self._s3_client = s3_client

    @with_error_handling(SourceReadError)
    def open(self, source: SourceObject) -> BinaryIO:
        response = self._s3_client.get_object(Bucket=source.container, Key=source.path)
        return io.BytesIO(response["Body"].read())


class PillowDecoder:
    """Decodes source bytes into orientation-normalized frames."""

    def decode(self, stream: BinaryIO) -> Frames:
        """
        Load every frame of the image and apply its EXIF orientation once.

        Still images decode to a single frame. Animated images keep all of
        their frames, each carrying its own ``duration``.

        Raises:
            DecodeError: If the bytes are not a readable image
        """
        try:
            image = Image.open(stream)
            image.load()
            if getattr(image, "is_animated", False):
                frames = [frame.copy() for frame in ImageSequence.Iterator(image)]
            else:
                frames = [image]
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
            raise DecodeError(f"Cannot decode source image: {exc}") from exc
        return [normalize_orientation(frame) for frame in frames]


class ThumbnailPipeline:
    """
    Turns one "object created" notification into resized derivatives.

    Received -> Decoding -> PerSize(i) ... -> Done, with an early
    Unsupported terminal state for unknown extensions. Per-size failures
    are recorded and the remaining sizes are still attempted; the run is
    marked failed if any size failed.
    """

    def __init__(
        self,
        config: ThumbnailConfig,
        store: StoreProtocol,
        logger: LoggerProtocol,
        source_reader: Optional[SourceReaderProtocol] = None,
        decoder: Optional[PillowDecoder] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        self._config = config
        self._store = store
        self._logger = logger
        self._source_reader = source_reader
        self._decoder = decoder or PillowDecoder()
        self._metrics_collector = metrics_collector

    @property
    def config(self) -> ThumbnailConfig:
        return self._config

    def build_targets(self, encoder: Encoder) -> List[TargetSpec]:
        """One TargetSpec per configured width, in configured order."""
        return [
            TargetSpec(width=width, encoder_name=encoder.name)
            for width in self._config.target_widths
        ]

    def process(
        self, source_url: str, source_stream: Optional[BinaryIO] = None
    ) -> InvocationResult:
        """
        Run the pipeline for one uploaded object.

        Args:
            source_url: Absolute URL of the created object
            source_stream: Source bytes; read through the source reader if omitted

        Returns:
            The invocation result; exactly one terminal record is logged

        Raises:
            DecodeError: If the source cannot be decoded
            SourceReadError: If the source cannot be read
        """
        start_time = time.time()
        log_context = LogContext(
            operation="generate_thumbnails", component="thumbnail_pipeline"
        ).with_metadata(source_url=source_url)

        # Received
        try:
            source = SourceObject.from_url(source_url)
        except InvalidPathError as exc:
            self._logger.error("Invalid source path", log_context, error=str(exc))
            return InvocationResult(
                source_url=source_url,
                status=InvocationStatus.FAILED,
                message=str(exc),
                processing_time=time.time() - start_time,
            )

        encoder = select_encoder(source.extension, self._config.jpeg_quality)
        if encoder is None:
            self._logger.info(
                "No encoder support, skipping", log_context, extension=source.extension or "none"
            )
            return InvocationResult(
                source_url=source_url,
                status=InvocationStatus.UNSUPPORTED,
                message=f"Unsupported extension: {source.extension!r}",
                processing_time=time.time() - start_time,
            )

        if (
            source.container == self._config.destination_container
            and is_derivative_path(source.path)
        ):
            self._logger.info("Source is already a derivative, skipping", log_context)
            return InvocationResult(
                source_url=source_url,
                status=InvocationStatus.SKIPPED,
                message="Source is a derivative",
                processing_time=time.time() - start_time,
            )

        context = InvocationContext(
            source=source, encoder=encoder, log_context=log_context, start_time=start_time
        )

        # Decoding
        try:
            frames = self._decode(context, source_stream)
        except ThumbnailPipelineError as exc:
            self._logger.error("Thumbnail generation aborted", log_context, error=str(exc))
            raise

        # PerSize
        sizes = self._process_sizes(context, frames)

        # Done
        status = (
            InvocationStatus.SUCCEEDED
            if all(size.success for size in sizes)
            else InvocationStatus.FAILED
        )
        result = InvocationResult(
            source_url=source_url,
            status=status,
            sizes=sizes,
            processing_time=time.time() - start_time,
        )
        summary = {
            "uploaded": result.uploaded_count,
            "failed": result.failed_count,
            "processing_time_ms": round(result.processing_time * 1000, 1),
        }
        if status is InvocationStatus.SUCCEEDED:
            self._logger.info("Thumbnail generation completed", log_context, **summary)
        else:
            self._logger.error("Thumbnail generation failed", log_context, **summary)
        return result

    def _decode(
        self, context: InvocationContext, source_stream: Optional[BinaryIO]
    ) -> Frames:
        decode_context = context.log_context.with_operation("decode_source")
        if source_stream is None:
            if self._source_reader is None:
                raise SourceReadError("No source stream given and no source reader configured")
            self._logger.debug("Reading source object", decode_context)
            source_stream = self._source_reader.open(context.source)

        frames = self._decoder.decode(source_stream)
        self._logger.debug(
            "Source decoded",
            decode_context,
            width=frames[0].width,
            height=frames[0].height,
            frames=len(frames),
        )
        return frames

    def _process_sizes(
        self, context: InvocationContext, frames: Frames
    ) -> List[SizeResult]:
        from ..processors import STRATEGIES

        targets = self.build_targets(context.encoder)
        process_sizes = STRATEGIES[self._config.size_strategy]

        def process_size(target: TargetSpec, working_frames: Frames) -> SizeResult:
            return self.process_size(context, target, working_frames)

        with SizeOperationContextManager(
            operation_name=f"Thumbnails for {context.source.path}"
        ) as size_manager:
            sizes = process_sizes(targets, frames, process_size, self._config.max_workers)
            for size in sizes:
                if not size.success:
                    size_manager.add_error(size.error, item_identifier=f"w{size.width}")
        return sizes

    def produce_derivative(
        self, source: SourceObject, target: TargetSpec, encoder: Encoder, frames: Frames
    ) -> Derivative:
        """Derive the destination path, resize and encode one derivative."""
        path = derive_path(source.path, target.width)
        if not encoder.animated:
            frames = frames[:1]
        resized = resize_frames(frames, target.width, self._config.on_small_source)
        return Derivative(
            target=target,
            path=path,
            data=encoder.encode(resized[0], append_images=resized[1:]),
            content_type=encoder.content_type,
            width=resized[0].width,
            height=resized[0].height,
        )

    def upload_derivative(self, derivative: Derivative) -> Dict[str, Any]:
        """
        Upload one derivative, overwriting any earlier version.

        Raises:
            UploadError: If the store fails, whatever it raised
        """
        try:
            return self._store.upload(
                derivative.path,
                io.BytesIO(derivative.data),
                overwrite=True,
                content_type=derivative.content_type,
            )
        except ThumbnailPipelineError:
            raise
        except Exception as exc:
            raise UploadError(
                f"Upload of {derivative.path} failed: {type(exc).__name__}: {exc}"
            ) from exc

    def process_size(
        self, context: InvocationContext, target: TargetSpec, frames: Frames
    ) -> SizeResult:
        """Produce and upload one derivative; failures are recorded, not raised."""
        start_time = time.time()
        size_context = context.log_context.with_operation("process_size").with_metadata(
            width=target.width
        )
        result = SizeResult(width=target.width)

        try:
            derivative = self.produce_derivative(
                context.source, target, context.encoder, frames
            )
            result.dest_path = derivative.path
            result.output_width = derivative.width
            result.output_height = derivative.height

            self.upload_derivative(derivative)
            result.success = True
            self._logger.info(
                "Derivative uploaded",
                size_context,
                dest_path=derivative.path,
                size=f"{derivative.width}x{derivative.height}",
            )
        except ThumbnailPipelineError as exc:
            result.success = False
            result.error = str(exc)
            self._logger.error(
                "Derivative failed",
                size_context,
                exc_info=exc.__cause__ is not None,
                error=str(exc),
            )
        finally:
            result.processing_time = time.time() - start_time
            if self._metrics_collector is not None:
                self._metrics_collector.record(
                    "process_size",
                    start_time,
                    result.success,
                    error_message=result.error or None,
                    width=target.width,
                )

        return result
