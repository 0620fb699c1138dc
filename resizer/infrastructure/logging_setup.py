import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class ExcludePathsFilter(logging.Filter):
    """Drop uvicorn access-log records for the given request paths."""

    def __init__(self, *paths: str):
        super().__init__()
        self.paths = set(paths)

    def filter(self, record: logging.LogRecord) -> bool:
        # uvicorn.access args: (client_addr, method, full_path, http_version, status_code)
        args = record.args
        if isinstance(args, tuple) and len(args) >= 3:
            path = str(args[2]).split("?", 1)[0]
            return path not in self.paths
        return True


def setup_logging(level: str = "INFO", exclude_access_paths: tuple[str, ...] = ("/ping",)) -> None:
    """Configure the root logger once. Repeated calls are no-ops."""
    root = logging.getLogger()
    if getattr(root, "_resizer_configured", False):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    logging.getLogger("uvicorn.access").addFilter(ExcludePathsFilter(*exclude_access_paths))
    root._resizer_configured = True  # type: ignore[attr-defined]
