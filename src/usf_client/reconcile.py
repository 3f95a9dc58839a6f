# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Result reconciler.

Applies the silent_return policy. Only errors reported by the remote API
can be returned as data; local faults are always raised.
"""

from typing import Any

from .exceptions import DecodeError, NetworkError, RemoteError
from .transport import DecodeFailure, HttpFailure, NetworkFailure, RawOutcome, Success


def reconcile(outcome: RawOutcome, silent_return: bool) -> Any:
    """
    Turn a transport outcome into the caller's result.

    Args:
        outcome: Classified outcome from the dispatcher
        silent_return: Return remote errors instead of raising them

    Returns:
        The decoded success body, or {"error": {...}} in silent mode

    Raises:
        RemoteError: Non-2xx response and silent_return is False
        NetworkError: No response was received
        DecodeError: Unparsable 2xx body, or an undecodable body at any status
    """
    if isinstance(outcome, Success):
        return outcome.body

    if isinstance(outcome, HttpFailure):
        if silent_return:
            return outcome.error
        detail = outcome.error["error"]
        raise RemoteError(detail["message"], detail["code"], status=outcome.status)

    if isinstance(outcome, NetworkFailure):
        raise NetworkError(outcome.message) from outcome.cause

    if isinstance(outcome, DecodeFailure):
        raise DecodeError(outcome.message) from outcome.cause

    raise TypeError(f"Unknown outcome type: {type(outcome).__name__}")
