"""Tests for custom field sets and field mappings."""

from __future__ import annotations

from bq_logging.fields import CustomFieldSet, FieldMapping
from bq_logging.values import ValueKind


def test_add_single_field_and_overwrite():
    fields = CustomFieldSet()

    fields.add("env", "dev")
    fields.add("env", "prod")

    snapshot = fields.snapshot()
    assert len(fields) == 1
    assert snapshot["env"].payload == "prod"


def test_add_mapping_merges_fields():
    fields = CustomFieldSet({"env": "dev"})

    fields.add({"env": "prod", "region": "eu"})

    snapshot = fields.snapshot()
    assert snapshot["env"].payload == "prod"
    assert snapshot["region"].payload == "eu"


def test_callables_are_registered_as_deferred():
    fields = CustomFieldSet()

    fields.add("host", lambda: "web-1")

    assert fields.snapshot()["host"].kind is ValueKind.DEFERRED


def test_remove_absent_field_is_noop():
    fields = CustomFieldSet({"env": "prod"})

    fields.remove("missing")

    assert "env" in fields
    assert len(fields) == 1


def test_remove_accepts_multiple_names():
    fields = CustomFieldSet({"a": 1, "b": 2, "c": 3})

    fields.remove(["a", "c", "zzz"])

    assert list(fields.snapshot()) == ["b"]


def test_snapshot_is_a_copy():
    fields = CustomFieldSet({"a": 1})

    snapshot = fields.snapshot()
    fields.add("b", 2)

    assert "b" not in snapshot


def test_field_mapping_defaults_to_identity():
    mapping = FieldMapping({"message": "msg"})

    assert mapping.resolve("message") == "msg"
    assert mapping.resolve("channel") == "channel"


def test_field_mapping_update():
    mapping = FieldMapping()

    mapping.update({"datetime": "logged_at"})

    assert mapping.as_dict() == {"datetime": "logged_at"}
