import logging
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def with_id(record: dict) -> dict:
    """Backends that speak Mongo return `_id`; pages always read `id`."""
    if record.get("id") or record.get("_id") is None:
        return record
    return {**record, "id": str(record["_id"])}


def with_chapter_alias(record: dict) -> dict:
    if "chapters" in record and not record.get("chapter"):
        return {**record, "chapter": record["chapters"]}
    return record


def parse_record(model: Type[M], data: Any) -> Optional[M]:
    if not isinstance(data, dict):
        return None
    try:
        return model.model_validate(with_id(data))
    except ValidationError as exc:
        logger.warning("Discarding malformed %s record: %s", model.__name__, exc)
        return None


def parse_records(model: Type[M], data: Any) -> List[M]:
    if not isinstance(data, list):
        return []
    records = []
    for item in data:
        record = parse_record(model, item)
        if record is not None:
            records.append(record)
    return records
