# src/thumbnail_pipeline/core/error_handling.py

import functools
import logging
from typing import Any, Dict, List, Type

from botocore.exceptions import BotoCoreError, ClientError
from PIL import UnidentifiedImageError

from .exceptions import DecodeError, StorageError, ThumbnailPipelineError


def with_error_handling(storage_error: Type[StorageError] = StorageError):
    """
    Decorator factory wrapping collaborator calls with standardized error handling.

    botocore failures become ``storage_error`` and unidentifiable images
    become DecodeError; pipeline errors pass through unchanged.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(func.__module__ + '.' + func.__qualname__)
            try:
                return func(*args, **kwargs)
            except ThumbnailPipelineError:
                raise
            except (ClientError, BotoCoreError) as e:
                logger.error(f"Storage operation failed in '{func.__qualname__}': {e}")
                raise storage_error(f"Storage operation failed in {func.__qualname__}: {e}") from e
            except UnidentifiedImageError as e:
                logger.error(f"Unidentified image in '{func.__qualname__}': {e}")
                raise DecodeError(f"Failed to identify image in {func.__qualname__}: {e}") from e
            except Exception as e:
                logger.error(f"Error in '{func.__qualname__}': {e}", exc_info=True)
                raise
        return wrapper
    return decorator


class SizeOperationContextManager:
    """
    Context manager for the per-size loop of one invocation.

    Errors for individual sizes are reported with ``add_error`` and
    summarized on exit; exceptions escaping the block propagate.
    """
    def __init__(self, operation_name: str = "Thumbnail generation"):
        self.operation_name = operation_name
        self.errors: List[Dict[str, Any]] = []
        self.logger = logging.getLogger(self.__class__.__module__ + '.' + self.__class__.__name__)

    def __enter__(self):
        self.logger.debug(f"Starting {self.operation_name}.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.errors:
            self.logger.warning(
                f"{self.operation_name} completed with {len(self.errors)} error(s)."
            )
            for i, error_detail in enumerate(self.errors):
                self.logger.error(
                    f"  Error {i+1}/{len(self.errors)} for '{error_detail['item']}': {error_detail['error']}"
                )
        elif exc_type:
            self.logger.error(
                f"{self.operation_name} failed due to an unhandled exception: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb)
            )
        else:
            self.logger.debug(f"{self.operation_name} completed successfully.")
        return False

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def add_error(self, error_message: str, item_identifier: str = "Unknown item"):
        """
        Report an error for one derivative.

        Args:
            error_message (str): The error message or exception string.
            item_identifier (str): The derivative that failed, e.g. its destination path.
        """
        self.errors.append({"item": item_identifier, "error": str(error_message)})
