"""Inbound trigger adapter: turns storage notifications into pipeline runs."""

import os
from typing import Any, Dict, List, Optional
from urllib.parse import quote, unquote_plus

from .core import InvocationStatus, ThumbnailConfig, ThumbnailPipeline, get_logger
from .core.factories import ThumbnailPipelineFactory

BLOB_CREATED_EVENT = "Microsoft.Storage.BlobCreated"

_pipeline: Optional[ThumbnailPipeline] = None


def get_pipeline() -> ThumbnailPipeline:
    """
    Build the pipeline once per process.

    Inside the Lambda runtime this runs at import, so configuration errors
    fail the cold start before any event is accepted.
    """
    global _pipeline
    if _pipeline is None:
        config = ThumbnailConfig.from_env()
        _pipeline = ThumbnailPipelineFactory.create_pipeline(config)
    return _pipeline


def running_in_lambda() -> bool:
    return "AWS_LAMBDA_FUNCTION_NAME" in os.environ


def _s3_record_url(record: Dict[str, Any]) -> str:
    bucket = record["s3"]["bucket"]["name"]
    # S3 notification keys are form-encoded ("+" for spaces)
    key = unquote_plus(record["s3"]["object"]["key"])
    return f"s3://{bucket}/{quote(key)}"


def extract_source_urls(event: Any) -> List[str]:
    """
    Extract source object URLs from a notification payload.

    Accepts S3 event notifications (``Records[].s3``), Event Grid
    blob-created events (a single event or a list, ``data.url``) and plain
    ``{"source_url": ...}`` invocations.
    """
    if isinstance(event, list):
        urls: List[str] = []
        for item in event:
            urls.extend(extract_source_urls(item))
        return urls

    if not isinstance(event, dict):
        return []

    if "Records" in event:
        return [_s3_record_url(record) for record in event["Records"] if "s3" in record]

    if "source_url" in event:
        return [event["source_url"]]

    data = event.get("data")
    if isinstance(data, dict) and data.get("url"):
        event_type = event.get("eventType")
        if event_type is None or event_type == BLOB_CREATED_EVENT:
            return [data["url"]]

    return []


def lambda_handler(event: Any, context: Any = None) -> Dict[str, Any]:
    """
    Entry point for the hosting runtime.

    Runs the pipeline once per source URL in the event. Decode and read
    failures propagate so the runtime can apply its redelivery policy.
    """
    logger = get_logger("handler")
    pipeline = get_pipeline()

    urls = extract_source_urls(event)
    if not urls:
        logger.warning("Event carries no source object URL; nothing to do")

    results = [pipeline.process(url) for url in urls]
    failed = [r for r in results if r.status is InvocationStatus.FAILED]

    return {
        "status": "failed" if failed else "ok",
        "results": [r.model_dump(mode="json") for r in results],
    }


if running_in_lambda():
    get_pipeline()
