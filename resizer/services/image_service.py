import io
import logging
from dataclasses import dataclass

from PIL import Image, ImageSequence

from resizer.errors import FailedWrite, InvalidFormat, InvalidImage
from resizer.services.format_negotiation import ResizeImageFormat, mime_type, negotiate_format
from resizer.services.resize_calculator import (
    Dimensions,
    ResizeVariant,
    calculate_dimensions,
    needs_resize,
    resize_variant,
)

logger = logging.getLogger(__name__)

# Pillow encoder/decoder names; formats missing here cannot be written by Pillow
_PILLOW_FORMATS = {
    ResizeImageFormat.PNG: "PNG",
    ResizeImageFormat.JPEG: "JPEG",
    ResizeImageFormat.GIF: "GIF",
    ResizeImageFormat.WEBP: "WEBP",
    ResizeImageFormat.PNM: "PPM",
    ResizeImageFormat.TIFF: "TIFF",
    ResizeImageFormat.TGA: "TGA",
    ResizeImageFormat.DDS: "DDS",
    ResizeImageFormat.BMP: "BMP",
    ResizeImageFormat.ICO: "ICO",
    ResizeImageFormat.AVIF: "AVIF",
}
_SOURCE_FORMATS = {name: fmt for fmt, name in _PILLOW_FORMATS.items()}
_SOURCE_FORMATS["MPO"] = ResizeImageFormat.JPEG

# Same ceiling Pillow applies when decoding
MAX_OUTPUT_PIXELS = Image.MAX_IMAGE_PIXELS or 89_478_485

_ANIMATED_FORMATS = {"GIF", "WEBP", "PNG", "AVIF"}
_QUALITY_FORMATS = {"JPEG", "WEBP", "AVIF"}
_RGB_ONLY_FORMATS = {"JPEG", "PPM"}

# Frame info that describes the image itself rather than metadata about it
_KEPT_INFO = {"duration", "loop", "transparency", "background"}


class ResizableImage:
    """
    Decoded image owned by a single request. Every operation mutates in place.
    Multi-frame sources (animated GIF/WebP/PNG) keep all of their frames.
    """

    def __init__(self, image: Image.Image):
        self._source_format = image.format
        self._loop = image.info.get("loop", 0)
        self._frames = [frame.copy() for frame in ImageSequence.Iterator(image)]
        self._quality: int | None = None

    @classmethod
    def from_bytes(cls, data: bytes) -> "ResizableImage":
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
            return cls(image)
        except (OSError, ValueError, EOFError, Image.DecompressionBombError) as e:
            logger.info(f"Failed to decode image: {e}")
            raise InvalidImage()

    @property
    def dimensions(self) -> Dimensions:
        return self._frames[0].size

    @property
    def is_multi_frame(self) -> bool:
        return len(self._frames) > 1

    def resize(self, width: int, height: int, variant: ResizeVariant) -> None:
        if width * height > MAX_OUTPUT_PIXELS:
            logger.info(f"Refusing to resize to {width}x{height}")
            raise FailedWrite()
        frames = self._frames if variant is ResizeVariant.FIT else self._frames[:1]
        try:
            self._frames = [self._resize_frame(frame, width, height) for frame in frames]
        except (OverflowError, ValueError, MemoryError) as e:
            logger.info(f"Failed to resize to {width}x{height}: {e}")
            raise FailedWrite()

    @staticmethod
    def _resize_frame(frame: Image.Image, width: int, height: int) -> Image.Image:
        resized = frame.resize((width, height), Image.LANCZOS)
        resized.info = {k: v for k, v in frame.info.items() if k in _KEPT_INFO}
        return resized

    def strip_metadata(self) -> None:
        for frame in self._frames:
            frame.info = {k: v for k, v in frame.info.items() if k in _KEPT_INFO}

    def set_quality(self, quality: int) -> None:
        if not 0 <= quality <= 100:
            raise FailedWrite()
        self._quality = quality

    def format(self) -> ResizeImageFormat:
        fmt = _SOURCE_FORMATS.get(self._source_format or "")
        if fmt is None:
            raise InvalidFormat()
        return fmt

    def encode(self, fmt: ResizeImageFormat) -> bytes:
        pil_format = _PILLOW_FORMATS.get(fmt)
        if pil_format is None:
            logger.info(f"No encoder available for {fmt.value}")
            raise FailedWrite()

        frames = self._frames
        if pil_format in _RGB_ONLY_FORMATS:
            frames = [f if f.mode in ("L", "RGB") else f.convert("RGB") for f in frames]

        save_kwargs: dict = {}
        if self._quality is not None and pil_format in _QUALITY_FORMATS:
            save_kwargs["quality"] = self._quality
        if pil_format == "JPEG":
            save_kwargs["progressive"] = True
        if len(frames) > 1 and pil_format in _ANIMATED_FORMATS:
            save_kwargs.update(
                save_all=True,
                append_images=frames[1:],
                duration=[f.info.get("duration", 100) for f in frames],
                loop=self._loop,
            )

        buf = io.BytesIO()
        try:
            frames[0].save(buf, format=pil_format, **save_kwargs)
        except (OSError, ValueError, KeyError) as e:
            logger.info(f"Failed to encode image as {pil_format}: {e}")
            raise FailedWrite()
        return buf.getvalue()


@dataclass
class ProcessedImage:
    content: bytes
    content_type: str
    width: int
    height: int
    vary: str | None = None


def process_image(
    data: bytes,
    width: int | None = None,
    height: int | None = None,
    quality: int = 85,
    format: ResizeImageFormat | None = None,
    accept: str | None = None,
) -> ProcessedImage:
    """
    Decode, resize and re-encode one image. CPU bound, run it off the event loop.
    """
    image = ResizableImage.from_bytes(data)

    target = calculate_dimensions(image.dimensions, width, height)
    if needs_resize(image.dimensions, target):
        image.resize(*target, resize_variant(image.is_multi_frame))

    choice = negotiate_format(format, accept, image.format())

    image.strip_metadata()
    image.set_quality(quality)
    output = image.encode(choice.format)

    out_width, out_height = image.dimensions
    return ProcessedImage(
        content=output,
        content_type=mime_type(choice.format),
        width=out_width,
        height=out_height,
        vary=choice.vary,
    )
