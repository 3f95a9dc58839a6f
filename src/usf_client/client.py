# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
USF API client.

Every public method assembles an operation descriptor and forwards it to
request(), which encodes, signs, dispatches and reconciles it.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

import httpx

from .config import DEFAULT_BASE_URL, Settings, get_settings
from .credentials import Credentials, coerce_credentials
from .encoding import encode
from .operations import OperationDescriptor, OperationKind
from .reconcile import reconcile
from .signing import Clock, SignatureGenerator
from .transport import Dispatcher
from .types import (
    ApiResult,
    BatchCreateQuery,
    BatchOutcome,
    BulkWriteOperation,
    DeleteOutcome,
    ErrorOutcome,
    FindOptions,
    FindQuery,
    Item,
    Pipeline,
    UpdateOutcome,
    UpdateQuery,
)

logger = logging.getLogger(__name__)

Options = Optional[Mapping[str, Any]]


def is_error(result: Any) -> bool:
    """True if result is an {"error": {...}} value returned in silent mode."""
    return isinstance(result, dict) and isinstance(result.get("error"), dict)


class UsfClient:
    """
    Asynchronous client for the USF inventory API.

    With silent_return=True (the default) errors reported by the API are
    returned as {"error": {"message", "code"}} values. With silent_return=False
    they are raised as RemoteError. Signature, network and decode faults are
    always raised.

    Example:
        >>> client = UsfClient({"authorizerId": "a", "secret": "s", "privateKey": "k"})
        >>> items = await client.find({"color.name": "Blue"})  # doctest: +SKIP
    """

    def __init__(
        self,
        credentials: Union[Credentials, Mapping[str, Any]],
        silent_return: bool = True,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize USF client.

        Args:
            credentials: Credentials, or a mapping with authorizerId, secret
                and privateKey
            silent_return: Return remote errors instead of raising them
            base_url: USF API endpoint
            timeout: Request timeout in seconds (None = httpx default)
            transport: Optional httpx transport (used by tests)
            clock: Time source for signatures (default: time.time)

        Raises:
            ConstructionError: If any credential is missing
        """
        self.credentials = coerce_credentials(credentials)
        self.silent_return = silent_return
        self.base_url = base_url
        self.signer = SignatureGenerator(self.credentials, clock=clock)
        self.dispatcher = Dispatcher(
            self.signer,
            base_url,
            timeout=timeout,
            transport=transport,
        )

    def __repr__(self) -> str:
        return (
            f"UsfClient(authorizer_id={self.credentials.authorizer_id!r}, "
            f"base_url={self.base_url!r}, silent_return={self.silent_return})"
        )

    async def request(
        self,
        operation: Union[OperationKind, str],
        query: Any = None,
        document: Any = None,
        options: Options = None,
    ) -> ApiResult:
        """
        Send one operation to the USF API.

        Args:
            operation: Operation kind or its wire name (e.g. "updateOne")
            query: Query, pipeline or bulk operations for the query slot
            document: Item(s) or update document, if the operation takes one
            options: Operation options (dropped for operations that take none)

        Returns:
            Decoded response body, or {"error": {...}} in silent mode

        Raises:
            ValueError: Unknown operation or malformed pipeline/bulk input
            SignatureError: Request could not be signed
            NetworkError: No response received
            DecodeError: Successful response with an unparsable body
            RemoteError: API reported an error and silent_return is False
        """
        descriptor = OperationDescriptor(
            operation=OperationKind.parse(operation),
            query=query,
            document=document,
            options=dict(options) if options is not None else None,
        )
        encoded = encode(descriptor)
        outcome = await self.dispatcher.dispatch(encoded)
        return reconcile(outcome, self.silent_return)

    # Read

    async def find(
        self,
        query: FindQuery,
        options: Optional[FindOptions] = None,
    ) -> Union[List[Item], ErrorOutcome]:
        """Find items matching a query."""
        return await self.request(OperationKind.FIND, query, options=options)

    async def aggregate(
        self,
        pipeline: Pipeline,
        options: Options = None,
    ) -> Union[List[Dict[str, Any]], ErrorOutcome]:
        """
        Run an aggregation pipeline.

        pipeline may be a flat list of stages, a list of {"stage": ...}
        envelopes or a {"pipeline": [...]} envelope. options are accepted for
        symmetry with the other methods but are not sent.
        """
        return await self.request(OperationKind.AGGREGATE, pipeline, options=options)

    # Create

    async def create(
        self,
        document: Item,
        options: Options = None,
    ) -> Union[Item, ErrorOutcome]:
        """Create a single item."""
        return await self.request(OperationKind.CREATE, None, document, options)

    async def batch_create(
        self,
        documents: Union[List[Item], BatchCreateQuery],
        options: Options = None,
    ) -> Union[BatchOutcome, ErrorOutcome]:
        """Create several items in one call."""
        return await self.request(OperationKind.BATCH_CREATE, None, documents, options)

    # Update

    async def update(
        self,
        query: FindQuery,
        update: UpdateQuery,
        options: Options = None,
    ) -> Union[UpdateOutcome, ErrorOutcome]:
        """Update items matching a query."""
        return await self.request(OperationKind.UPDATE, query, update, options)

    async def update_one(
        self,
        query: FindQuery,
        update: UpdateQuery,
        options: Options = None,
    ) -> Union[UpdateOutcome, ErrorOutcome]:
        """Update the first item matching a query."""
        return await self.request(OperationKind.UPDATE_ONE, query, update, options)

    async def update_many(
        self,
        query: FindQuery,
        update: UpdateQuery,
        options: Options = None,
    ) -> Union[UpdateOutcome, ErrorOutcome]:
        """Update every item matching a query."""
        return await self.request(OperationKind.UPDATE_MANY, query, update, options)

    async def batch_update(
        self,
        filter: FindQuery,
        update: UpdateQuery,
        options: Options = None,
    ) -> Union[BatchOutcome, ErrorOutcome]:
        """Apply one update to every item matching filter. options are not sent."""
        return await self.request(OperationKind.BATCH_UPDATE, filter, update, options)

    async def bulk_write(
        self,
        operations: Union[BulkWriteOperation, List[BulkWriteOperation]],
        options: Options = None,
    ) -> Union[BatchOutcome, ErrorOutcome]:
        """Run one or more updateOne operations. options are not sent."""
        return await self.request(OperationKind.BULK_WRITE, operations, options=options)

    # Delete

    async def delete(
        self,
        query: FindQuery,
        options: Options = None,
    ) -> Union[DeleteOutcome, ErrorOutcome]:
        """Delete items matching a query."""
        return await self.request(OperationKind.DELETE, query, options=options)

    async def delete_one(
        self,
        query: FindQuery,
        options: Options = None,
    ) -> Union[DeleteOutcome, ErrorOutcome]:
        """Delete the first item matching a query."""
        return await self.request(OperationKind.DELETE_ONE, query, options=options)

    async def delete_many(
        self,
        query: FindQuery,
        options: Options = None,
    ) -> Union[DeleteOutcome, ErrorOutcome]:
        """Delete every item matching a query."""
        return await self.request(OperationKind.DELETE_MANY, query, options=options)


def create_client(settings: Optional[Settings] = None, **overrides: Any) -> UsfClient:
    """
    Create a client from USF_* settings.

    Args:
        settings: Settings to use (default: loaded from the environment)
        **overrides: Keyword arguments passed to UsfClient, taking precedence
            over settings (e.g. silent_return=False, transport=...)

    Returns:
        UsfClient instance

    Raises:
        ConstructionError: If the settings lack a credential
    """
    settings = settings or get_settings()

    kwargs: Dict[str, Any] = {
        "silent_return": settings.silent_return,
        "base_url": settings.base_url,
        "timeout": settings.timeout,
    }
    kwargs.update(overrides)

    client = UsfClient(settings.credentials(), **kwargs)
    logger.debug(f"Created {client!r}")
    return client
