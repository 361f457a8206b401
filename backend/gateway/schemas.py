from typing import Any, Dict, List, Literal, Optional, Type, Union
from bson.errors import BSONError
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import InvalidCommand, InvalidOperation, MissingUpdate
from .utils import coerce_id, from_extended_json

DEFAULT_FIND_LIMIT = 100
_INT64_BOUND = 2 ** 63


class _CommandBase(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    database: str
    collection: str


class InsertOneCommand(_CommandBase):
    operation: Literal["insertOne"] = "insertOne"
    document: Dict[str, Any]


class FindOneCommand(_CommandBase):
    operation: Literal["findOne"] = "findOne"
    filter: Optional[Dict[str, Any]] = None


class FindCommand(_CommandBase):
    operation: Literal["find"] = "find"
    filter: Optional[Dict[str, Any]] = None
    limit: int = Field(DEFAULT_FIND_LIMIT, ge=0)


class FindAndModifyCommand(_CommandBase):
    operation: Literal["findAndModify"] = "findAndModify"
    filter: Optional[Dict[str, Any]] = None
    # Either an operator document ({"$set": ...}) or an aggregation pipeline
    update: Union[Dict[str, Any], List[Dict[str, Any]]]


Command = Union[InsertOneCommand, FindOneCommand, FindCommand, FindAndModifyCommand]

_COMMANDS: Dict[str, Type[_CommandBase]] = {
    "insertOne": InsertOneCommand,
    "findOne": FindOneCommand,
    "find": FindCommand,
    "findAndModify": FindAndModifyCommand,
}


def parse_command(payload: Dict[str, Any]) -> Command:
    """
    Turn a request body into one of the command variants.
    Raises InvalidOperation (404), MissingUpdate (400) or InvalidCommand (400).
    """
    operation = payload.get("operation")
    model = _COMMANDS.get(operation) if isinstance(operation, str) else None
    if model is None:
        raise InvalidOperation()

    data: Dict[str, Any] = {
        "database": payload.get("database"),
        "collection": payload.get("collection"),
    }
    if model is InsertOneCommand:
        document = payload.get("document")
        if not isinstance(document, dict):
            raise InvalidCommand("document field must be an object")
        decoded = _decode(document, "document")
        # {"$date": ...} and friends decode to scalars
        if not isinstance(decoded, dict):
            raise InvalidCommand("document field must be an object")
        data["document"] = coerce_id(decoded)
    elif model is FindAndModifyCommand:
        if payload.get("update") is None:
            raise MissingUpdate()
        data["filter"] = _read_filter(payload.get("filter"))
        data["update"] = _decode(payload["update"], "update")
    else:
        data["filter"] = _read_filter(payload.get("filter"))
        if model is FindCommand:
            data["limit"] = _read_limit(payload.get("options"))

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidCommand(_describe(e))


def _decode(raw: Any, field: str) -> Any:
    try:
        return from_extended_json(raw)
    except (BSONError, ValueError, TypeError) as e:
        raise InvalidCommand(f"{field}: invalid Extended JSON ({e})")


def _read_filter(raw: Any) -> Any:
    decoded = _decode(raw, "filter")
    if isinstance(decoded, dict):
        return coerce_id(decoded)
    return decoded


def _read_limit(options: Any) -> int:
    """
    options.limit when it is an integer that fits in int64, else the default.
    Negative limits are taken by magnitude.
    """
    if not isinstance(options, dict):
        return DEFAULT_FIND_LIMIT
    limit = options.get("limit")
    if isinstance(limit, bool) or not isinstance(limit, int):
        return DEFAULT_FIND_LIMIT
    if not -_INT64_BOUND < limit < _INT64_BOUND:
        return DEFAULT_FIND_LIMIT
    return abs(limit)


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
