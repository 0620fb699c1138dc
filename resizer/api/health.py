from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()

PING_PATH = "/ping"


@router.get(PING_PATH, response_class=PlainTextResponse)
async def ping():
    return "pong"
