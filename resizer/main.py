import logging
import os
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from resizer.api.health import PING_PATH
from resizer.api.router import api_router
from resizer.config.config import VERSION, settings
from resizer.errors import ResizerError
from resizer.infrastructure.codec import init_codecs
from resizer.infrastructure.logging_setup import setup_logging
from resizer.infrastructure.metrics import create_metrics
from resizer.middleware.timing import RequestTimer, timing_middleware

logger = logging.getLogger(__name__)

metrics = create_metrics(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging(settings.log_level, exclude_access_paths=(PING_PATH,))
    init_codecs()

    app.state.image_pool = ThreadPoolExecutor(
        max_workers=settings.workers, thread_name_prefix="image-worker"
    )
    metrics.start()
    logger.info(
        f"image-resizer started: env={settings.env} workers={settings.workers} "
        f"allowed_hosts={sorted(settings.allowed_host_set)}"
    )

    yield

    # Shutdown
    metrics.stop()
    app.state.image_pool.shutdown(wait=True)
    logger.info("image-resizer stopped")


app = FastAPI(title="image-resizer", version=os.getenv("GIT_SHA", VERSION), lifespan=lifespan)

app.include_router(api_router)
app.middleware("http")(timing_middleware(RequestTimer(metrics).exclude(PING_PATH)))


@app.exception_handler(ResizerError)
async def resizer_error_handler(request: Request, exc: ResizerError):
    return PlainTextResponse(exc.message, status_code=400)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = []
    for error in exc.errors():
        field = error["loc"][-1] if error.get("loc") else "query"
        if error.get("type") == "missing":
            details.append(f"missing field `{field}`")
        else:
            details.append(f"{field}: {error.get('msg')}")
    return PlainTextResponse(f"Query deserialize error: {'; '.join(details)}", status_code=400)


def run() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
