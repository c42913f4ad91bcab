"""
Tests for record request validation.
"""

import pytest
from pydantic import ValidationError

from nr_permitting_api.app.schemas.record import RecordCategory, RecordCreate, RecordKind


def payload(**overrides):
    data = {
        "version": "1.0.0",
        "kind": "ProcessEventSet",
        "system_id": "nr-permits-system",
        "record_id": "PERMIT-2024-001",
        "record_kind": "Permit",
        "process_event": {"event_type": "application_submitted"},
    }
    data.update(overrides)
    return data


def test_valid_payload_keeps_plain_enum_values():
    request = RecordCreate(**payload())
    assert request.kind == "ProcessEventSet"
    assert request.record_kind == "Permit"
    assert request.model_dump()["kind"] == "ProcessEventSet"


def test_enum_members_are_accepted():
    request = RecordCreate(**payload(kind=RecordKind.RECORD_LINKAGE, record_kind=RecordCategory.TRACKING))
    assert request.kind == "RecordLinkage"
    assert request.record_kind == "Tracking"


@pytest.mark.parametrize("field,value", [("kind", "Linkage"), ("record_kind", "Licence")])
def test_unknown_enum_values_are_rejected(field, value):
    with pytest.raises(ValidationError):
        RecordCreate(**payload(**{field: value}))


@pytest.mark.parametrize(
    "field,value",
    [
        ("version", ""),
        ("version", "v" * 51),
        ("system_id", ""),
        ("system_id", "s" * 101),
        ("record_id", ""),
        ("record_id", "r" * 101),
    ],
)
def test_string_lengths_are_enforced(field, value):
    with pytest.raises(ValidationError):
        RecordCreate(**payload(**{field: value}))


def test_empty_process_event_is_rejected():
    with pytest.raises(ValidationError, match="process_event must contain at least one key"):
        RecordCreate(**payload(process_event={}))


def test_process_event_must_be_an_object():
    with pytest.raises(ValidationError):
        RecordCreate(**payload(process_event=["submitted"]))


@pytest.mark.parametrize("missing", ["version", "kind", "system_id", "record_id", "record_kind", "process_event"])
def test_required_fields(missing):
    data = payload()
    del data[missing]
    with pytest.raises(ValidationError):
        RecordCreate(**data)


def test_client_supplied_tx_id_is_ignored():
    request = RecordCreate(**payload(tx_id="client-chosen", unexpected="x"))
    assert "tx_id" not in request.model_dump()
    assert not hasattr(request, "unexpected")
