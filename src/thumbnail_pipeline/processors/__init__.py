"""Per-size execution strategies for one pipeline invocation."""

from typing import Callable, Dict, List

from ..core.models import SizeResult, SizeStrategy, TargetSpec
from ..core.resizer import Frames
from .serial import process_sizes as serial_process_sizes
from .multithread import process_sizes as multithread_process_sizes

ProcessSizeFunction = Callable[[TargetSpec, Frames], SizeResult]
ProcessSizesFunction = Callable[
    [List[TargetSpec], Frames, ProcessSizeFunction, int], List[SizeResult]
]

STRATEGIES: Dict[SizeStrategy, ProcessSizesFunction] = {
    SizeStrategy.SERIAL: serial_process_sizes,
    SizeStrategy.MULTITHREAD: multithread_process_sizes,
}

__all__ = [
    "ProcessSizeFunction",
    "ProcessSizesFunction",
    "STRATEGIES",
    "serial_process_sizes",
    "multithread_process_sizes",
]
