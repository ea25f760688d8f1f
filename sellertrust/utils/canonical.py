"""Canonical JSON and schema-tagged snapshot utilities."""

import json
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

# Highest envelope version this build can read, per schema name.
SNAPSHOT_SCHEMAS: dict[str, int] = {
    "seller-trust": 1,
    "certification": 1,
    "category-policy": 1,
    "premium-subscription": 1,
}


def _canonical_value(obj: Any) -> Any:
    """Convert value for canonical representation."""
    if obj is None:
        return None
    if isinstance(obj, bool):
        return obj
    if isinstance(obj, Enum):
        return _canonical_value(obj.value)
    if isinstance(obj, (int, float, Decimal)):
        return float(obj) if isinstance(obj, (float, Decimal)) else int(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {str(k): _canonical_value(v) for k, v in sorted(obj.items())}
    if isinstance(obj, (list, tuple)):
        return [_canonical_value(v) for v in obj]
    if isinstance(obj, (set, frozenset)):
        return sorted(_canonical_value(v) for v in obj)
    if isinstance(obj, str):
        return obj
    return str(obj)


def canonical_json(obj: Any) -> str:
    """Produce canonical JSON string (sorted keys, consistent formatting)."""
    canonical = _canonical_value(obj)
    return json.dumps(canonical, sort_keys=True, separators=(",", ":"))


def dump_snapshot(schema: str, data: dict) -> str:
    """Wrap data in a versioned envelope and serialize it canonically."""
    if schema not in SNAPSHOT_SCHEMAS:
        raise ValueError(f"Unknown snapshot schema: {schema}")
    return canonical_json(
        {"schema": schema, "version": SNAPSHOT_SCHEMAS[schema], "data": data}
    )


def load_snapshot(raw: str) -> tuple[str, int, dict]:
    """Parse a stored snapshot envelope into (schema, version, data)."""
    envelope = json.loads(raw)
    if not isinstance(envelope, dict) or not {"schema", "version", "data"} <= envelope.keys():
        raise ValueError("Snapshot is not a schema-tagged envelope")
    schema = envelope["schema"]
    version = envelope["version"]
    if schema not in SNAPSHOT_SCHEMAS:
        raise ValueError(f"Unknown snapshot schema: {schema}")
    if not isinstance(version, int) or version < 1 or version > SNAPSHOT_SCHEMAS[schema]:
        raise ValueError(f"Unsupported {schema} snapshot version: {version}")
    return schema, version, envelope["data"]
