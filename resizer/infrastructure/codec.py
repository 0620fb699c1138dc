import logging
import threading

from PIL import Image

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_initialized = False


def init_codecs() -> None:
    """Register every Pillow codec plugin once per process. Safe to call repeatedly."""
    global _initialized
    if _initialized:
        return
    with _lock:
        if _initialized:
            return
        Image.init()
        _initialized = True
        logger.info(f"Image codecs initialized: {len(Image.SAVE)} encoders available")


def is_initialized() -> bool:
    return _initialized
