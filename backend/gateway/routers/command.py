from typing import Any, Dict
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..deps import get_dispatcher
from ..schemas import parse_command
from ..services.commands import CommandDispatcher

router = APIRouter(tags=["command"])


@router.post("/command")
def run_command(payload: Dict[str, Any], dispatcher: CommandDispatcher = Depends(get_dispatcher)):
    """
    Run one database command.
    payload: { operation, database, collection, filter?, update?, options?, document? }
    """
    command = parse_command(payload)
    result = dispatcher.execute(command)
    return JSONResponse(status_code=result.status_code, content=result.to_response())
