"""Aspect-ratio preserving resize with an explicit small-source policy."""

from fractions import Fraction
from typing import List, Optional, Tuple

from PIL import Image, ImageOps

from .models import SmallSourcePolicy

# Decoded source: one frame for still images, every frame for animations
Frames = List["Image.Image"]


def normalize_orientation(image: "Image.Image") -> "Image.Image":
    """
    Apply embedded EXIF orientation so width/height match what a viewer shows.

    Call exactly once per decoded source; derivatives share the result.
    """
    normalized = ImageOps.exif_transpose(image)
    return image if normalized is None else normalized


def compute_target_size(
    width: int,
    height: int,
    target_width: int,
    policy: SmallSourcePolicy = SmallSourcePolicy.PASS_THROUGH,
) -> Optional[Tuple[int, int]]:
    """
    Compute the output size for ``target_width``.

    Heights are ``round(height / (width / target_width))`` on exact fractions,
    so rounding is half-to-even, and never drop below one pixel.

    Returns:
        (width, height) to resize to, or None when the source passes through

    Raises:
        ValueError: If the target or source dimensions are not positive
    """
    if target_width <= 0:
        raise ValueError(f"Target width must be positive, got {target_width}")
    if width <= 0 or height <= 0:
        raise ValueError(f"Source dimensions must be positive, got {width}x{height}")

    if width == target_width:
        return None

    if width < target_width:
        if SmallSourcePolicy(policy) is SmallSourcePolicy.PASS_THROUGH:
            return None
        # Upscale: the ratio is computed the other way round so it stays > 1.
        ratio = Fraction(target_width, width)
        return target_width, max(1, round(height * ratio))

    scale = Fraction(width, target_width)
    if scale <= 1:
        raise AssertionError(f"Degenerate scale {scale} for {width} -> {target_width}")
    return target_width, max(1, round(height / scale))


def resize(
    image: "Image.Image",
    target_width: int,
    policy: SmallSourcePolicy = SmallSourcePolicy.PASS_THROUGH,
) -> "Image.Image":
    """
    Resize ``image`` to ``target_width`` preserving its aspect ratio.

    The input image is never modified. On pass-through the same object is
    returned, otherwise a new image.
    """
    size = compute_target_size(image.width, image.height, target_width, policy)
    if size is None:
        return image
    return image.resize(size, Image.Resampling.LANCZOS)


def resize_frames(
    frames: Frames,
    target_width: int,
    policy: SmallSourcePolicy = SmallSourcePolicy.PASS_THROUGH,
) -> Frames:
    """Resize every frame of a decoded source to ``target_width``."""
    return [resize(frame, target_width, policy) for frame in frames]
