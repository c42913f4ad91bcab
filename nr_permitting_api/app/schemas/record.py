"""
Pydantic models for process event records.

``RecordBase`` lists the fields every record carries; ``RecordCreate``
is the validated request body, ``RecordRead`` a stored record and
``RecordCreateResponse`` the result of a create.

Validation lives on ``RecordCreate``, upstream of the service: string
lengths, enum membership and a non-empty ``process_event`` are enforced
when a request is built.  ``RecordService`` trusts its input.  Stored
rows are read back through ``RecordRead`` without those write-time
limits, since the table itself does not enforce them.
"""

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator


class RecordKind(str, Enum):
    """Kind of record being submitted."""

    RECORD_LINKAGE = "RecordLinkage"
    PROCESS_EVENT_SET = "ProcessEventSet"


class RecordCategory(str, Enum):
    """Business category of the record (``record_kind`` on the wire)."""

    PERMIT = "Permit"
    PROJECT = "Project"
    SUBMISSION = "Submission"
    TRACKING = "Tracking"


class RecordBase(BaseModel):
    version: str
    kind: RecordKind
    system_id: str
    record_id: str
    record_kind: RecordCategory
    process_event: Any

    # Enum fields hold their plain string values after validation so
    # they can be written to storage and compared as-is.
    model_config = {
        "use_enum_values": True,
    }


class RecordCreate(RecordBase):
    """Schema for submitting a record.

    ``tx_id`` is never accepted from the client; the service generates
    it on insert.  Unknown fields in the payload are dropped.
    """

    version: str = Field(..., min_length=1, max_length=50, examples=["1.0.0"])
    kind: RecordKind = Field(..., examples=["ProcessEventSet"])
    system_id: str = Field(..., min_length=1, max_length=100, examples=["nr-permits-system"])
    record_id: str = Field(..., min_length=1, max_length=100, examples=["PERMIT-2024-001"])
    record_kind: RecordCategory = Field(..., examples=["Permit"])
    process_event: Dict[str, Any] = Field(
        ...,
        description="JSON object containing the process event data",
        examples=[{"event_type": "application_submitted", "permit_type": "timber_harvest"}],
    )

    model_config = {
        "extra": "ignore",
    }

    @field_validator("process_event")
    @classmethod
    def process_event_not_empty(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        if not value:
            raise ValueError("process_event must contain at least one key")
        return value


class RecordRead(RecordBase):
    """Schema for a stored record.

    ``process_event`` is whatever JSON document the row holds.
    """

    tx_id: str = Field(..., examples=["123e4567-e89b-12d3-a456-426614174000"])

    model_config = {
        "from_attributes": True,
    }


class RecordCreateResponse(RecordRead):
    """Schema returned after a record is created.

    ``created_at`` is an ISO‑8601 UTC timestamp taken when the response
    is built, not read back from storage.
    """

    created_at: str = Field(..., examples=["2024-01-15T10:30:00.123000+00:00"])
