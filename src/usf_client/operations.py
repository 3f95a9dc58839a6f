# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Operation kinds and their wire rules.

The USF API parses request bodies positionally, so which slots an operation
carries is part of the wire contract. All of it lives in OPERATION_RULES.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class OperationKind(str, Enum):
    """Remote actions understood by the USF API (values are wire names)."""

    FIND = "find"
    CREATE = "create"
    BATCH_CREATE = "batchCreate"
    UPDATE = "update"
    UPDATE_ONE = "updateOne"
    UPDATE_MANY = "updateMany"
    DELETE = "delete"
    DELETE_ONE = "deleteOne"
    DELETE_MANY = "deleteMany"
    BATCH_UPDATE = "batchUpdate"
    BULK_WRITE = "bulkWrite"
    AGGREGATE = "aggregate"

    @classmethod
    def parse(cls, value: Union['OperationKind', str]) -> 'OperationKind':
        """
        Resolve an operation from its wire name.

        Raises:
            ValueError: If the name is not a known operation
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            known = ", ".join(op.value for op in cls)
            raise ValueError(f"Unknown operation {value!r} (expected one of: {known})") from None


class ResultKind(str, Enum):
    """Success payload shape returned for an operation."""

    ITEM = "item"
    ITEM_LIST = "item_list"
    UPDATE = "update"
    DELETE = "delete"
    BATCH = "batch"
    DOCUMENTS = "documents"


@dataclass(frozen=True)
class OperationRule:
    """Wire rule for one operation kind."""
    accepts_document: bool
    accepts_options: bool
    result: ResultKind


OPERATION_RULES: Dict[OperationKind, OperationRule] = {
    OperationKind.FIND: OperationRule(True, True, ResultKind.ITEM_LIST),
    OperationKind.CREATE: OperationRule(True, True, ResultKind.ITEM),
    OperationKind.BATCH_CREATE: OperationRule(True, True, ResultKind.BATCH),
    OperationKind.UPDATE: OperationRule(True, True, ResultKind.UPDATE),
    OperationKind.UPDATE_ONE: OperationRule(True, True, ResultKind.UPDATE),
    OperationKind.UPDATE_MANY: OperationRule(True, True, ResultKind.UPDATE),
    OperationKind.DELETE: OperationRule(True, True, ResultKind.DELETE),
    OperationKind.DELETE_ONE: OperationRule(True, True, ResultKind.DELETE),
    OperationKind.DELETE_MANY: OperationRule(True, True, ResultKind.DELETE),
    OperationKind.BATCH_UPDATE: OperationRule(True, False, ResultKind.BATCH),
    OperationKind.BULK_WRITE: OperationRule(True, False, ResultKind.BATCH),
    # Pipelines travel entirely in the query slot
    OperationKind.AGGREGATE: OperationRule(False, False, ResultKind.DOCUMENTS),
}


def rule_for(operation: OperationKind) -> OperationRule:
    """Look up the wire rule for an operation."""
    return OPERATION_RULES[operation]


@dataclass(frozen=True)
class OperationDescriptor:
    """
    One remote call, as assembled by a client method.

    Built fresh per call and consumed once by the request encoder.
    document is None when the call carries no document.
    """
    operation: OperationKind
    query: Any = None
    document: Any = None
    options: Optional[Dict[str, Any]] = None

    @property
    def has_document(self) -> bool:
        return self.document is not None
