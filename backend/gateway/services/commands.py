import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple

from bson.errors import InvalidDocument
from pymongo.collection import Collection
from pymongo.errors import (
    ConnectionFailure,
    ExecutionTimeout,
    InvalidName,
    NetworkTimeout,
    PyMongoError,
    ServerSelectionTimeoutError,
    WTimeoutError,
)

from ..schemas import (
    Command,
    FindAndModifyCommand,
    FindCommand,
    FindOneCommand,
    InsertOneCommand,
)
from ..utils import to_jsonable
from .mongo import ClientManager

logger = logging.getLogger(__name__)

_TIMEOUTS = (ExecutionTimeout, WTimeoutError, NetworkTimeout, ServerSelectionTimeoutError)


@dataclass
class CommandResult:
    """Outcome of one command: a JSON-ready content value or an error message."""
    success: bool
    status_code: int
    content: Any = None
    message: Optional[str] = None
    db_ms: float = 0.0

    def to_response(self) -> Dict[str, Any]:
        if self.success:
            return {"content": self.content}
        return {"message": self.message}


class _Stopwatch:
    """Accumulates time spent inside ``with`` blocks."""

    def __init__(self) -> None:
        self.elapsed = 0.0
        self._t0 = 0.0

    def __enter__(self) -> "_Stopwatch":
        self._t0 = time.perf_counter()
        return self

    def __exit__(self, *exc) -> None:
        self.elapsed += time.perf_counter() - self._t0


def backend_failure(exc: Exception) -> Tuple[int, str]:
    """Map a driver exception to (HTTP status, message)."""
    if isinstance(exc, InvalidName):
        return 400, str(exc)
    if isinstance(exc, _TIMEOUTS):
        return 504, f"Database operation timed out: {exc}"
    if isinstance(exc, ConnectionFailure):
        return 502, f"Database unavailable: {exc}"
    if isinstance(exc, (PyMongoError, InvalidDocument)):
        return 502, f"Database error: {exc}"
    # ValueError / TypeError / OverflowError from the driver's own argument checks
    return 400, str(exc)


class CommandDispatcher:
    """Runs parsed commands against the shared client."""

    def __init__(self, manager: ClientManager) -> None:
        self._manager = manager
        self._handlers: Dict[type, Callable[[Collection, Any, _Stopwatch], Tuple[int, Any]]] = {
            InsertOneCommand: self._insert_one,
            FindOneCommand: self._find_one,
            FindCommand: self._find,
            FindAndModifyCommand: self._find_and_modify,
        }

    def execute(self, command: Command) -> CommandResult:
        started = time.perf_counter()
        timer = _Stopwatch()
        handler = self._handlers[type(command)]
        try:
            col = self._manager.collection(command.database, command.collection)
            status_code, raw = handler(col, command, timer)
            result = CommandResult(True, status_code, content=to_jsonable(raw))
        except (PyMongoError, InvalidDocument, ValueError, TypeError, OverflowError) as e:
            status_code, message = backend_failure(e)
            result = CommandResult(False, status_code, message=message)

        result.db_ms = timer.elapsed * 1000
        overhead_ms = (time.perf_counter() - started) * 1000 - result.db_ms
        extra = {
            "operation": command.operation,
            "database": command.database,
            "collection": command.collection,
            "db_ms": round(result.db_ms, 3),
            "overhead_ms": round(overhead_ms, 3),
            "status_code": result.status_code,
        }
        if result.success:
            logger.info(
                "%s %s.%s db=%.2fms overhead=%.2fms",
                command.operation, command.database, command.collection,
                result.db_ms, overhead_ms, extra=extra,
            )
        else:
            logger.error(
                "%s %s.%s failed (%d): %s",
                command.operation, command.database, command.collection,
                result.status_code, result.message, extra=extra,
            )
        return result

    def _insert_one(self, col: Collection, command: InsertOneCommand, timer: _Stopwatch):
        doc = dict(command.document)
        now = str(datetime.now(timezone.utc))
        doc["createdAt"] = now
        doc["updatedAt"] = now
        with timer:
            res = col.insert_one(doc)
        return 201, {"insertedId": res.inserted_id}

    def _find_one(self, col: Collection, command: FindOneCommand, timer: _Stopwatch):
        with timer:
            doc = col.find_one(command.filter or {})
        return 200, doc

    def _find(self, col: Collection, command: FindCommand, timer: _Stopwatch):
        # limit(0) means "no limit" to the server
        if command.limit == 0:
            return 200, []
        with timer:
            items = list(col.find(command.filter or {}).limit(command.limit))
        return 200, items

    def _find_and_modify(self, col: Collection, command: FindAndModifyCommand, timer: _Stopwatch):
        with timer:
            doc = col.find_one_and_update(command.filter or {}, command.update)
        return 200, doc
