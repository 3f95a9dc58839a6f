# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Request encoder for the USF wire protocol.

Turns an OperationDescriptor into the canonical request array:

    [operation, query, document?, options?]

The server reads the array positionally. Which trailing slots are present
is decided by OPERATION_RULES; aggregate and bulkWrite queries are first
normalized to the single shape the server accepts.
"""

import json
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Mapping

from .operations import OperationDescriptor, OperationKind, rule_for

STAGE_KEY = "stage"
PIPELINE_KEY = "pipeline"


def _unwrap_stage(stage: Any) -> Any:
    """Return the bare operator object of a {"stage": {...}} envelope."""
    if isinstance(stage, Mapping) and len(stage) == 1 and STAGE_KEY in stage:
        return stage[STAGE_KEY]
    return stage


def normalize_pipeline(pipeline: Any) -> List[Any]:
    """
    Collapse the accepted aggregate pipeline shapes to a flat stage list.

    Accepted shapes:
        [{"$match": ...}, {"$limit": 5}]                   flat (returned as is)
        [{"stage": {"$match": ...}}, {"stage": {...}}]     stage envelopes
        {"pipeline": [{"stage": {...}}, ...]}              pipeline envelope
        {"$match": ...}                                    single bare stage

    Normalizing an already flat pipeline is a no-op.

    Raises:
        ValueError: If pipeline is not a list or mapping
    """
    if isinstance(pipeline, Mapping):
        if PIPELINE_KEY in pipeline and len(pipeline) == 1:
            stages = pipeline[PIPELINE_KEY]
        else:
            stages = [pipeline]
    else:
        stages = pipeline

    if not isinstance(stages, (list, tuple)):
        raise ValueError(
            f"Aggregate pipeline must be a list of stages, got {type(stages).__name__}"
        )

    return [_unwrap_stage(stage) for stage in stages]


def normalize_bulk_write(operations: Any) -> List[Any]:
    """
    Wrap a single bulk write operation in a list.

    Raises:
        ValueError: If operations is neither a mapping nor a list
    """
    if isinstance(operations, Mapping):
        return [operations]
    if isinstance(operations, (list, tuple)):
        return list(operations)
    raise ValueError(
        f"Bulk write operations must be a mapping or a list, got {type(operations).__name__}"
    )


QUERY_NORMALIZERS: Dict[OperationKind, Callable[[Any], Any]] = {
    OperationKind.AGGREGATE: normalize_pipeline,
    OperationKind.BULK_WRITE: normalize_bulk_write,
}


def encode(descriptor: OperationDescriptor) -> List[Any]:
    """
    Build the canonical request array for a descriptor.

    Args:
        descriptor: Operation to encode

    Returns:
        List of the form [operation, query, document?, options?]

    Example:
        >>> encode(OperationDescriptor(OperationKind.FIND, {"sku": "A"}))
        ['find', {'sku': 'A'}, {}]
        >>> encode(OperationDescriptor(OperationKind.AGGREGATE, {"pipeline": [{"stage": {"$limit": 1}}]}))
        ['aggregate', [{'$limit': 1}]]
    """
    operation = descriptor.operation
    rule = rule_for(operation)

    query = descriptor.query
    normalize = QUERY_NORMALIZERS.get(operation)
    if normalize is not None:
        query = normalize(query)

    encoded: List[Any] = [operation.value, query]

    if rule.accepts_document and descriptor.has_document:
        encoded.append(descriptor.document)

    if rule.accepts_options:
        # Options default to {} on the wire
        encoded.append(descriptor.options if descriptor.options is not None else {})

    return encoded


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        # Same form as JavaScript Date.prototype.toJSON
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        else:
            value = value.astimezone(timezone.utc)
        return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        raise TypeError("Sets have no stable JSON order")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_payload(payload: Any) -> str:
    """
    Serialize a payload to the compact JSON text that is signed and sent.

    Matches JSON.stringify on the server: no whitespace, keys in insertion
    order, non-ASCII characters left unescaped.

    Raises:
        TypeError: For values JSON cannot represent
        ValueError: For NaN or infinite floats
    """
    return json.dumps(
        payload,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
        default=_json_default,
    )
