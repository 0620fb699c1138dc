from dataclasses import dataclass
from enum import Enum

WEBP_MEDIA_TYPE = "image/webp"


class ResizeImageFormat(str, Enum):
    AUTO = "auto"
    PNG = "png"
    JPEG = "jpeg"
    GIF = "gif"
    WEBP = "webp"
    PNM = "pnm"
    TIFF = "tiff"
    TGA = "tga"
    DDS = "dds"
    BMP = "bmp"
    ICO = "ico"
    HDR = "hdr"
    OPENEXR = "openexr"
    FARBFELD = "farbfeld"
    AVIF = "avif"


_MIME_TYPES = {
    ResizeImageFormat.AVIF: "image/avif",
    ResizeImageFormat.JPEG: "image/jpeg",
    ResizeImageFormat.PNG: "image/png",
    ResizeImageFormat.GIF: "image/gif",
    ResizeImageFormat.WEBP: WEBP_MEDIA_TYPE,
    ResizeImageFormat.TIFF: "image/tiff",
    ResizeImageFormat.TGA: "image/x-tga",
    ResizeImageFormat.DDS: "image/vnd-ms.dds",
    ResizeImageFormat.BMP: "image/bmp",
    ResizeImageFormat.ICO: "image/x-icon",
    ResizeImageFormat.HDR: "image/vnd.radiance",
    ResizeImageFormat.OPENEXR: "image/x-exr",
    ResizeImageFormat.PNM: "image/x-portable-bitmap",
}


def mime_type(fmt: ResizeImageFormat) -> str:
    return _MIME_TYPES.get(fmt, "application/octet-stream")


@dataclass(frozen=True)
class FormatChoice:
    format: ResizeImageFormat
    vary: str | None = None


def supports_webp(accept: str | None) -> bool:
    return bool(accept) and WEBP_MEDIA_TYPE in accept


def negotiate_format(
    requested: ResizeImageFormat | None,
    accept: str | None,
    source_format: ResizeImageFormat,
) -> FormatChoice:
    """
    Pick the output encoding for a response.

    An explicit format always wins. `auto` upgrades to WebP when the client's
    Accept header advertises it and otherwise keeps the source format; either
    way the response varies on Accept. No selector keeps the source format.
    """
    if requested is None:
        return FormatChoice(source_format)
    if requested is ResizeImageFormat.AUTO:
        chosen = ResizeImageFormat.WEBP if supports_webp(accept) else source_format
        return FormatChoice(chosen, vary="Accept")
    return FormatChoice(requested)
