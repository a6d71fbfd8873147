# frameserve/api/routes/health.py
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


# Exempt from the auth gate so infra health checks work without a token.
@router.get("/healthz", response_class=PlainTextResponse)
def healthz() -> str:
    return "ok"
