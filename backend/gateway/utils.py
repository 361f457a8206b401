import json
import math
import uuid
from typing import Any, Dict
from bson import ObjectId, json_util
from bson.decimal128 import Decimal128
from bson.json_util import RELAXED_JSON_OPTIONS
from datetime import datetime


def to_jsonable(obj: Any) -> Any:
    """Recursively convert Mongo objects (e.g., ObjectId) to JSON-serializable types."""
    if isinstance(obj, ObjectId):
        return str(obj)
    if isinstance(obj, Decimal128):
        # Convert Decimal128 to string to preserve precision in JSON
        return str(obj.to_decimal())
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, uuid.UUID):
        return str(obj)
    if isinstance(obj, dict):
        return {k: to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(i) for i in obj]
    if obj is None or isinstance(obj, (bool, int, str)):
        return obj
    if isinstance(obj, float) and math.isfinite(obj):
        return obj
    # Binary/bytes, Regex, Timestamp, Code, MinKey/MaxKey, NaN/Infinity
    return json.loads(json_util.dumps(obj, json_options=RELAXED_JSON_OPTIONS))


def from_extended_json(value: Any) -> Any:
    """Decode MongoDB Extended JSON markers ({"$oid": ...}, {"$date": ...}) into BSON types."""
    if value is None:
        return None
    return json_util.loads(json.dumps(value))


def coerce_id(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a hex string _id to ObjectId if present, leave others as-is."""
    d = dict(doc)
    _id = d.get("_id")
    if isinstance(_id, str) and ObjectId.is_valid(_id):
        d["_id"] = ObjectId(_id)
    return d
