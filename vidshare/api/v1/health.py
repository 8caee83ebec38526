from fastapi import APIRouter
from fastapi.responses import JSONResponse

from vidshare.core.response import success

router = APIRouter(tags=["health"])


@router.get("/healthcheck")
async def healthcheck() -> JSONResponse:
    return success(data={"status": "ok"}, message="OK")
