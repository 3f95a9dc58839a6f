# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
USF Client Package

Asynchronous, HMAC-signed client for the USF inventory-management API.
"""

__version__ = "1.3.0"

from .client import (
    UsfClient,
    create_client,
    is_error
)

from .config import (
    DEFAULT_BASE_URL,
    Settings,
    get_settings
)

from .credentials import Credentials

from .encoding import (
    encode,
    normalize_bulk_write,
    normalize_pipeline,
    serialize_payload
)

from .exceptions import (
    UsfError,
    ConstructionError,
    SignatureError,
    NetworkError,
    DecodeError,
    RemoteError
)

from .operations import (
    OperationKind,
    OperationDescriptor,
    OperationRule,
    OPERATION_RULES,
    ResultKind
)

from .reconcile import reconcile

from .signing import SignatureGenerator

from .transport import (
    Dispatcher,
    Success,
    HttpFailure,
    NetworkFailure,
    DecodeFailure
)

__all__ = [
    # Version
    '__version__',

    # Client
    'UsfClient',
    'create_client',
    'is_error',

    # Configuration
    'DEFAULT_BASE_URL',
    'Settings',
    'get_settings',
    'Credentials',

    # Protocol
    'OperationKind',
    'OperationDescriptor',
    'OperationRule',
    'OPERATION_RULES',
    'ResultKind',
    'encode',
    'normalize_bulk_write',
    'normalize_pipeline',
    'serialize_payload',
    'SignatureGenerator',
    'Dispatcher',
    'Success',
    'HttpFailure',
    'NetworkFailure',
    'DecodeFailure',
    'reconcile',

    # Errors
    'UsfError',
    'ConstructionError',
    'SignatureError',
    'NetworkError',
    'DecodeError',
    'RemoteError',
]
