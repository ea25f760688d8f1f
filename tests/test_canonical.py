"""Unit tests for canonical JSON and snapshot envelopes."""

from datetime import datetime, timezone

import pytest

from sellertrust.schemas.trust import TrustState
from sellertrust.utils.canonical import canonical_json, dump_snapshot, load_snapshot


def test_canonical_json_sorts_keys():
    """Canonical JSON sorts keys."""
    obj = {"b": 1, "a": 2}
    assert canonical_json(obj) == '{"a":2,"b":1}'


def test_canonical_json_sets_and_datetimes():
    obj = {"names": {"CE", "ISO9001"}, "at": datetime(2026, 1, 2, tzinfo=timezone.utc)}
    assert canonical_json(obj) == '{"at":"2026-01-02T00:00:00+00:00","names":["CE","ISO9001"]}'


def test_trust_snapshot_round_trip():
    state = TrustState(is_verified=True, has_verified_badge=False, primary_category_id=None)
    schema, version, data = load_snapshot(state.snapshot())
    assert schema == "seller-trust"
    assert version == 1
    assert TrustState(**data) == state


def test_unknown_schema_rejected():
    with pytest.raises(ValueError):
        dump_snapshot("seller-profile", {})
    with pytest.raises(ValueError):
        load_snapshot('{"schema":"seller-profile","version":1,"data":{}}')


def test_newer_version_rejected():
    with pytest.raises(ValueError):
        load_snapshot('{"schema":"seller-trust","version":2,"data":{}}')


def test_untagged_snapshot_rejected():
    with pytest.raises(ValueError):
        load_snapshot('{"IsVerified":true}')
