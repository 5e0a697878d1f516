"""
Parse decoded JSON into validated records.

Anything the server sends passes through here before it reaches controller
state, so a missing or mistyped field surfaces as a PayloadError instead of
an attribute error somewhere downstream.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from rfstore.models.failure import PayloadError

R = TypeVar("R", bound=BaseModel)


def _summarize(error: ValidationError) -> str:
    parts = []
    for item in error.errors()[:5]:
        location = ".".join(str(p) for p in item["loc"]) or "<root>"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


def parse_record(model: type[R], data: Any) -> R:
    """
    Parse a single JSON object into a record.

    Raises:
        PayloadError: If data is not an object or fails validation
    """
    if not isinstance(data, dict):
        raise PayloadError(
            f"Expected a {model.__name__} object",
            detail=f"got {type(data).__name__}",
        )
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise PayloadError(f"Invalid {model.__name__} payload", detail=_summarize(e)) from e


def parse_records(model: type[R], data: Any) -> list[R]:
    """
    Parse a JSON array into a list of records.

    Raises:
        PayloadError: If data is not a list or any element fails validation
    """
    if not isinstance(data, list):
        raise PayloadError(
            f"Expected a list of {model.__name__}",
            detail=f"got {type(data).__name__}",
        )
    try:
        return TypeAdapter(list[model]).validate_python(data)  # type: ignore[valid-type]
    except ValidationError as e:
        raise PayloadError(f"Invalid {model.__name__} list", detail=_summarize(e)) from e


def parse_collection(model: type[R], data: Any) -> list[R]:
    """
    Parse a collection listing whose elements carry an `id`.

    Ids must be unique within the listing.

    Raises:
        PayloadError: If the listing is invalid or repeats an id
    """
    records = parse_records(model, data)
    seen: set[int] = set()
    for record in records:
        item_id = getattr(record, "id", None)
        if item_id in seen:
            raise PayloadError(
                f"Duplicate {model.__name__} id in listing",
                detail=f"id={item_id}",
            )
        seen.add(item_id)  # type: ignore[arg-type]
    return records
