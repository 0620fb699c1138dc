import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime


@dataclass(frozen=True)
class CacheDirective:
    last_modified: datetime
    max_age: int

    @property
    def expires(self) -> datetime:
        return self.last_modified + timedelta(seconds=self.max_age)

    def headers(self) -> dict[str, str]:
        return {
            "Last-Modified": format_datetime(self.last_modified, usegmt=True),
            "Cache-Control": f"max-age={self.max_age}",
            "Expires": format_datetime(self.expires, usegmt=True),
        }


def compose_cache_headers(
    expiration_hours: int,
    jitter_seconds: int = 0,
    now: datetime | None = None,
) -> CacheDirective:
    # Jitter spreads out expiry of responses generated around the same time
    jitter = random.randint(0, jitter_seconds) if jitter_seconds > 0 else 0
    now = (now or datetime.now(timezone.utc)).replace(microsecond=0)
    return CacheDirective(last_modified=now, max_age=expiration_hours * 60 * 60 + jitter)
