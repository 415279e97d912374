"""Main module for the thumbnail pipeline CLI."""

import sys
import argparse
from typing import Optional, Sequence

from .core import (
    ConfigurationError,
    InvocationStatus,
    SizeStrategy,
    SmallSourcePolicy,
    ThumbnailConfig,
    ThumbnailPipelineError,
    get_logger,
)
from .core.factories import ThumbnailPipelineFactory
from .core.logging_config import set_debug

VERSION = "0.1.0"


def build_parser() -> argparse.ArgumentParser:
    """
    Builds the `ArgumentParser` for the "process" and "version" commands.

    Options left unset on the command line fall back to the environment
    (TARGET_WIDTHS, DESTINATION_CONTAINER, ON_SMALL_SOURCE, SIZE_STRATEGY).
    """
    parser = argparse.ArgumentParser(
        prog="thumbnail-pipeline",
        description="Thumbnail Pipeline - resized derivatives for uploaded images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate 300px and 1200px thumbnails for one uploaded object
  thumbnail-pipeline process --source-url s3://uploads/photos/a.jpg \\
                             --width 300 --width 1200 --dest-container thumbnails

  # Show version
  thumbnail-pipeline version
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    process_parser = subparsers.add_parser(
        "process", help="Generate thumbnails for one source object"
    )
    process_parser.add_argument(
        "--source-url", required=True, help="URL of the uploaded source object"
    )
    process_parser.add_argument(
        "--width",
        dest="widths",
        type=int,
        action="append",
        help="Target width; repeat for several sizes",
    )
    process_parser.add_argument(
        "--dest-container", default=None, help="Destination bucket/container"
    )
    process_parser.add_argument(
        "--on-small-source",
        choices=[policy.value for policy in SmallSourcePolicy],
        default=None,
        help="Policy for sources not wider than the target",
    )
    process_parser.add_argument(
        "--strategy",
        choices=[strategy.value for strategy in SizeStrategy],
        default=None,
        help="Per-size execution strategy (default: serial)",
    )
    process_parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )

    subparsers.add_parser("version", help="Show version information")
    return parser


def config_from_args(args: argparse.Namespace) -> ThumbnailConfig:
    """Merge command-line options over the environment configuration."""
    try:
        base = ThumbnailConfig.from_env().model_dump()
    except ConfigurationError:
        # Command-line options must then supply every required value
        base = {}

    overrides = {
        "target_widths": args.widths,
        "destination_container": args.dest_container,
        "on_small_source": args.on_small_source,
        "size_strategy": args.strategy,
    }
    base.update({key: value for key, value in overrides.items() if value is not None})
    base["debug"] = args.debug
    return ThumbnailConfig.validated(**base)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Entry point for the command-line interface of the Thumbnail Pipeline.

    Exits with status 1 when the invocation fails or a fatal error occurs.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "version":
        print("Thumbnail Pipeline CLI")
        print(f"Version {VERSION}")
        sys.exit(0)

    if args.command != "process":
        parser.print_help()
        sys.exit(1)

    logger = get_logger("cli")
    try:
        config = config_from_args(args)
        if config.debug:
            set_debug(True)

        pipeline = ThumbnailPipelineFactory.create_pipeline(config)
        result = pipeline.process(args.source_url)
    except ThumbnailPipelineError as e:
        logger.error(f"Thumbnail generation failed: {e}")
        sys.exit(1)

    for size in result.sizes:
        state = "ok" if size.success else f"failed ({size.error})"
        print(f"w{size.width}: {size.dest_path or '-'} {state}")
    print(f"status: {result.status.value}")

    if result.status is InvocationStatus.FAILED:
        sys.exit(1)


if __name__ == "__main__":
    main()
