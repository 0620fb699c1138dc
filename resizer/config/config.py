from pydantic_settings import BaseSettings

VERSION = "0.4.0"
USER_AGENT = f"image-resizer/{VERSION}"


class Settings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 8080
    env: str = "development"
    workers: int = 4
    log_level: str = "INFO"

    # Comma separated, whitespace is ignored
    allowed_hosts: str = ""

    default_quality: int = 85
    cache_expiration: int = 1  # hours
    cache_jitter: int = 0  # seconds

    # Outbound fetch, no timeout unless set
    fetch_timeout: float | None = None

    # Pushgateway address (host:port); metrics are disabled when unset
    metrics_gateway: str | None = None
    metrics_push_interval: int = 15
    metrics_job: str = "image_resizer"

    model_config = {"env_prefix": "RESIZER_", "env_file": ".env", "extra": "ignore", "frozen": True}

    @property
    def allowed_host_set(self) -> frozenset[str]:
        stripped = "".join(self.allowed_hosts.split())
        return frozenset(host for host in stripped.split(",") if host)


settings = Settings()
