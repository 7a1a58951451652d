"""Storage encoding for events.

Events are persisted as compact JSON using their wire field names
(``name``, ``createdAt``, ``type``, ``uniqueId``). Field order is fixed by the
model, so equal events always encode to the same member string.
"""
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError
import structlog

from analytics_engine.core.errors import EventValidationError, SerializationError
from analytics_engine.schemas.event import EventRecord

logger = structlog.get_logger()


def parse_event(payload: Union[EventRecord, Mapping[str, Any]]) -> EventRecord:
    """Validate an inbound payload, raising EventValidationError on bad input"""
    if isinstance(payload, EventRecord):
        return payload
    try:
        return EventRecord.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "body" for err in e.errors())
        raise EventValidationError(f"Invalid input: {fields}") from e


def encode_event(event: EventRecord) -> str:
    try:
        return event.model_dump_json(by_alias=True, exclude_none=True)
    except PydanticSerializationError as e:
        raise SerializationError(f"Failed to encode event '{event.name}': {e}") from e


def decode_event(raw: Union[str, bytes]) -> Optional[EventRecord]:
    """
    Decode a stored member.

    Returns None for anything that is not a valid event, so a corrupt
    record can be dropped without aborting the caller.
    """
    try:
        return EventRecord.model_validate_json(raw)
    except ValidationError as e:
        logger.debug("event_decode_failed", error_count=e.error_count())
        return None
