"""Mapping from file extensions to Pillow encoders."""

import io
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Sequence

from PIL import Image

from .exceptions import EncodeError

UNSUPPORTED = None

SUPPORTED_EXTENSIONS: FrozenSet[str] = frozenset({"png", "jpg", "jpeg", "gif"})

_JPEG_MODES = ("RGB", "L", "CMYK")
_PNG_MODES = ("1", "L", "LA", "I", "P", "RGB", "RGBA")


@dataclass(frozen=True)
class Encoder:
    """Output codec for one image format."""

    name: str
    pil_format: str
    content_type: str
    save_options: Dict[str, Any] = field(default_factory=dict)
    animated: bool = False

    def prepare(self, image: "Image.Image") -> "Image.Image":
        """Return an image in a mode the format can store."""
        if self.pil_format == "JPEG" and image.mode not in _JPEG_MODES:
            return image.convert("RGB")
        if self.pil_format == "PNG" and image.mode not in _PNG_MODES:
            return image.convert("RGBA")
        return image

    def animation_options(
        self, image: "Image.Image", append_images: Sequence["Image.Image"]
    ) -> Dict[str, Any]:
        """Save options writing ``append_images`` as frames after ``image``."""
        if not self.animated or not append_images:
            return {}

        frames = [image, *append_images]
        options: Dict[str, Any] = {
            "save_all": True,
            "append_images": [self.prepare(frame) for frame in append_images],
            "duration": [frame.info.get("duration", 100) for frame in frames],
        }
        if "loop" in image.info:
            options["loop"] = image.info["loop"]
        return options

    def encode(
        self, image: "Image.Image", append_images: Sequence["Image.Image"] = ()
    ) -> bytes:
        """
        Encode ``image`` into bytes of this encoder's format.

        Animated encoders write ``append_images`` as further frames; other
        encoders keep only ``image``.
        """
        output = io.BytesIO()
        options = {**self.save_options, **self.animation_options(image, append_images)}
        try:
            self.prepare(image).save(output, format=self.pil_format, **options)
        except (OSError, ValueError) as exc:
            raise EncodeError(f"Failed to encode {self.name} image: {exc}") from exc
        return output.getvalue()


def normalize_extension(extension: Optional[str]) -> str:
    """Lower-case an extension and drop any leading dots."""
    return (extension or "").strip().lstrip(".").lower()


def select_encoder(extension: Optional[str], jpeg_quality: int = 85) -> Optional[Encoder]:
    """
    Resolve the encoder for a file extension.

    Args:
        extension: Extension with or without leading dot, any case
        jpeg_quality: Quality used by the JPEG encoder

    Returns:
        The matching Encoder, or UNSUPPORTED (None) for any other extension
    """
    ext = normalize_extension(extension)
    if ext not in SUPPORTED_EXTENSIONS:
        return UNSUPPORTED

    if ext in ("jpg", "jpeg"):
        return Encoder(
            name="jpeg",
            pil_format="JPEG",
            content_type="image/jpeg",
            save_options={"quality": jpeg_quality},
        )
    if ext == "png":
        return Encoder(
            name="png",
            pil_format="PNG",
            content_type="image/png",
            save_options={"optimize": True},
        )
    return Encoder(name="gif", pil_format="GIF", content_type="image/gif", animated=True)
