# Pydantic schemas

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional

# 9999-12-30T00:00:00Z in epoch milliseconds; any earlier instant is a valid
# calendar date in every UTC offset, so it can always be bucketed
MAX_CREATED_AT = 253402128000000


class EventRecord(BaseModel):
    """A single analytics event as submitted and as stored"""

    name: str = Field(..., min_length=1, max_length=255)
    created_at: int = Field(..., alias="createdAt", gt=0, lt=MAX_CREATED_AT, strict=True)
    event_type: str = Field(..., alias="type", min_length=1, max_length=255)
    unique_id: Optional[str] = Field(default=None, alias="uniqueId")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator('name', 'event_type')
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Field cannot be empty or whitespace')
        return v
