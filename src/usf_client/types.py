# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Static type shapes for USF items, queries and responses.

These are declarations for type checkers only. The client never validates
queries or success payloads; the USF API owns their semantics.
"""

from typing import Any, Dict, List, Literal, Optional, TypedDict, Union


# Items


class StatusDetails(TypedDict, total=False):
    """Availability status entry."""
    orderId: str
    date: str
    temporary: bool  # reserved only
    expiration: str  # reserved only


class AvailabilityMap(TypedDict, total=False):
    produced: StatusDetails
    reserved: StatusDetails
    sold: StatusDetails


class LocationReference(TypedDict, total=False):
    id: str
    name: str
    date: str


class EntityInfo(TypedDict, total=False):
    apiId: str  # read only
    entityId: str  # read only
    factoryId: str
    brandId: str


class CurrentLocation(TypedDict, total=False):
    id: str
    name: str
    details: Dict[str, Any]  # max 3 properties


class TransitTo(TypedDict, total=False):
    # Only one of id or client may be set
    id: str
    client: str


class Color(TypedDict, total=False):
    id: str
    name: str


class ProductDetails(TypedDict, total=False):
    productId: str
    productReference: str
    productName: str
    productType: str


class DeletionInfo(TypedDict, total=False):
    status: bool
    deletionDate: str


class ItemMetadata(TypedDict, total=False):
    types: List[str]  # 1-4 type identifiers
    synthetizedType: str


class Item(TypedDict, total=False):
    """
    USF inventory item as returned by the API.

    Required on creation: entities.factoryId, entities.brandId,
    brandDetails.productReference, factoryDetails.productId,
    factoryDetails.productType, color.name, packageQuantity and
    metadata.types.
    """
    id: str
    hardcode: str
    entities: EntityInfo
    currentLocation: CurrentLocation
    transitTo: TransitTo
    locationHistory: List[LocationReference]  # read only
    color: Color
    packageQuantity: int
    availability: AvailabilityMap
    brandDetails: ProductDetails
    factoryDetails: ProductDetails
    metadata: ItemMetadata
    deleted: DeletionInfo
    createdAt: str
    updatedAt: str


# Queries

# Field values may be literals or operator objects ({"$gt": 0}, {"$in": [...]}).
FindQuery = Dict[str, Any]
UpdateQuery = Dict[str, Any]  # {"$set": ..., "$unset": ..., "$inc": ..., "$push": ..., "$pull": ...}
AggregateStages = Dict[str, Any]  # one of $match, $project, $group, $sort, $limit, ...


class AggregateStage(TypedDict):
    stage: AggregateStages


class AggregatePipeline(TypedDict):
    pipeline: List[Union[AggregateStage, AggregateStages]]


Pipeline = Union[List[AggregateStages], List[AggregateStage], AggregatePipeline, AggregateStages]


class FindOptions(TypedDict, total=False):
    sort: Dict[str, Literal[1, -1]]
    limit: int
    skip: int
    select: Dict[str, Literal[0, 1]]
    includeDeleted: bool  # server default: False
    returnNew: bool
    protectProps: bool


class BatchCreateOptions(TypedDict, total=False):
    ordered: bool  # stop on first error
    bypassValidation: bool


class BatchCreateQuery(TypedDict, total=False):
    items: List[Item]
    options: BatchCreateOptions


class BulkWriteUpdateOne(TypedDict):
    filter: FindQuery
    update: UpdateQuery


class BulkWriteOperation(TypedDict):
    updateOne: BulkWriteUpdateOne


# Responses


class ErrorInfo(TypedDict):
    message: str
    code: str


class ErrorOutcome(TypedDict):
    error: ErrorInfo


class UpdateOutcome(TypedDict):
    acknowledged: bool
    modifiedCount: int
    upsertedId: Optional[Union[int, str]]
    upsertedCount: int
    matchedCount: int


class DeleteOutcome(TypedDict):
    acknowledged: bool
    deletedCount: int


class BatchError(TypedDict, total=False):
    index: int
    error: str
    document: Dict[str, Any]


class BatchOutcome(TypedDict, total=False):
    success: bool
    matchedCount: int
    modifiedCount: int
    upsertedCount: int
    insertedCount: int
    errors: List[BatchError]


ApiResult = Union[Item, List[Item], UpdateOutcome, DeleteOutcome, BatchOutcome, ErrorOutcome, List[Dict[str, Any]]]
