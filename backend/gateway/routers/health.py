from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..deps import get_manager
from ..services.mongo import ClientManager

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/health/ready")
def ready(manager: ClientManager = Depends(get_manager)):
    if not manager.ping():
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {"status": "ready"}
