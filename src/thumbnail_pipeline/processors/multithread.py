"""Multithreaded processor implementation - one thread per derivative."""

from typing import Callable, List
from concurrent.futures import Future, ThreadPoolExecutor

from ..core.exceptions import ThumbnailPipelineError
from ..core.models import SizeResult, TargetSpec
from ..core.resizer import Frames


def process_sizes(
    targets: List[TargetSpec],
    frames: Frames,
    process_size: Callable[[TargetSpec, Frames], SizeResult],
    max_workers: int = 4,
) -> List[SizeResult]:
    """
    Produce derivatives concurrently using a thread pool.

    Each branch gets its own copy of the decoded frames, taken here before
    submission so the shared source is only read from one thread. The call
    returns after every branch has settled, with results in target order.

    Args:
        targets: Ordered target specs to produce
        frames: The decoded, orientation-normalized source frames
        process_size: Callable producing and uploading one derivative
        max_workers: Upper bound on worker threads

    Returns:
        List of size results, one per target
    """
    if not targets:
        return []

    results: List[SizeResult] = []
    workers = max(1, min(max_workers, len(targets)))

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="thumbnail") as executor:
        futures: List[Future] = [
            executor.submit(process_size, target, [frame.copy() for frame in frames])
            for target in targets
        ]

        for target, future in zip(targets, futures):
            try:
                results.append(future.result())
            except ThumbnailPipelineError as e:
                results.append(SizeResult(width=target.width, success=False, error=str(e)))

    return results
