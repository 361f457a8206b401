from fastapi import HTTPException, Request

from .services.commands import CommandDispatcher
from .services.mongo import ClientManager


def get_manager(request: Request) -> ClientManager:
    manager = getattr(request.app.state, "mongo", None)
    if manager is None:
        raise HTTPException(status_code=503, detail="MongoDB client not initialized")
    return manager


def get_dispatcher(request: Request) -> CommandDispatcher:
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise HTTPException(status_code=503, detail="MongoDB client not initialized")
    return dispatcher
