"""Serial processor implementation - produces derivatives one by one."""

from typing import Callable, List

from ..core.models import SizeResult, TargetSpec
from ..core.resizer import Frames


def process_sizes(
    targets: List[TargetSpec],
    frames: Frames,
    process_size: Callable[[TargetSpec, Frames], SizeResult],
    max_workers: int = 1,
) -> List[SizeResult]:
    """
    Produces every derivative in configured order, in the current thread.

    All sizes read the same decoded frames. This is safe without cloning
    because resizing and encoding never modify their input images.

    Args:
        targets: Ordered target specs to produce.
        frames: The decoded, orientation-normalized source frames.
        process_size: Callable producing and uploading one derivative.
        max_workers: Unused; kept so all strategies share a signature.

    Returns:
        One `SizeResult` per target, in the same order.
    """
    results = []

    for target in targets:
        results.append(process_size(target, frames))

    return results
