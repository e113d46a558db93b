import math
import re
from datetime import datetime, date, time, timezone
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING

from workforce.exceptions import get_invalid_id_exception

UTC = timezone.utc

LEAVE_STATUSES = ("pending", "approved", "rejected", "cancelled")


def to_object_id(value: str, entity: str = "record") -> ObjectId:
    if not ObjectId.is_valid(value):
        raise get_invalid_id_exception(entity)
    return ObjectId(value)


def serialize_document(document: Optional[dict], exclude: Iterable[str] = ("password",)) -> Optional[dict]:
    """Return a JSON-friendly copy of a Mongo document with ``id`` mirrored from ``_id``."""
    if document is None:
        return None

    data = {key: value for key, value in document.items() if key not in exclude}
    if "_id" in data:
        data["_id"] = str(data["_id"])
        data["id"] = data.get("id") or data["_id"]
    return data


def serialize_documents(documents: Iterable[dict], **kwargs) -> List[dict]:
    return [serialize_document(document, **kwargs) for document in documents]


def is_filter_value(value: Optional[str]) -> bool:
    """``None``, empty strings and the ``all`` sentinel mean "do not filter"."""
    return value is not None and value != "" and value != "all"


def regex_filter(value: str) -> Dict[str, str]:
    return {"$regex": re.escape(value), "$options": "i"}


def to_datetime(value: Any) -> Optional[datetime]:
    """Dates travel as ``datetime`` in MongoDB; plain dates become UTC midnight."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, date):
        return datetime.combine(value, time.min, UTC)
    return value


def date_range_filter(start: Optional[date], end: Optional[date]) -> Optional[Dict[str, datetime]]:
    if not (start and end):
        return None
    return {
        "$gte": to_datetime(start),
        "$lte": datetime.combine(end, time.max, UTC),
    }


def sort_spec(sort_by: str, sort_order: str) -> List[tuple]:
    return [(sort_by, DESCENDING if sort_order == "desc" else ASCENDING)]


def pagination(page: int, limit: int, total: int) -> Dict[str, int]:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }


def skip_for(page: int, limit: int) -> int:
    return (max(page, 1) - 1) * limit


def format_status_stats(grouped: List[dict], total: int) -> Dict[str, int]:
    """Turn ``[{"_id": status, "count": n}]`` aggregation output into the stats envelope."""
    counts = {item["_id"]: item["count"] for item in grouped}
    stats = {"total": total}
    for leave_status in LEAVE_STATUSES:
        stats[leave_status] = counts.get(leave_status, 0)
    return stats


def status_count_pipeline(match: dict) -> List[dict]:
    return [
        {"$match": match},
        {"$group": {"_id": "$status", "count": {"$sum": 1}}},
    ]
