import math
from enum import Enum

Dimensions = tuple[int, int]


class ResizeVariant(str, Enum):
    THUMBNAIL = "thumbnail"  # first frame only
    FIT = "fit"  # every frame of the scene


def round_dimension(value: float) -> int:
    """Round half up, so 666.5 -> 667 and 0.5 -> 1."""
    return int(math.floor(value + 0.5))


def _scale(length: int, target: int, reference: int) -> int:
    return max(1, round_dimension(length * target / reference))


def calculate_dimensions(
    intrinsic: Dimensions,
    width: int | None = None,
    height: int | None = None,
) -> Dimensions:
    """
    Contain-fit target dimensions for an image of size `intrinsic`.

    With both bounds the result fits inside the width x height box, keeps the
    source aspect ratio and touches at least one bound. With a single bound the
    other side follows the aspect ratio. With none the intrinsic size is kept.
    """
    src_width, src_height = intrinsic

    if width is not None and height is not None:
        height_from_width = _scale(src_height, width, src_width)
        width_from_height = _scale(src_width, height, src_height)
        return min(width, width_from_height), min(height, height_from_width)
    if width is not None:
        return width, _scale(src_height, width, src_width)
    if height is not None:
        return _scale(src_width, height, src_height), height
    return src_width, src_height


def needs_resize(intrinsic: Dimensions, target: Dimensions) -> bool:
    return tuple(intrinsic) != tuple(target)


def resize_variant(is_multi_frame: bool) -> ResizeVariant:
    return ResizeVariant.FIT if is_multi_frame else ResizeVariant.THUMBNAIL
