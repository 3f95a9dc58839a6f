# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Exception hierarchy for the USF client.

Only RemoteError is subject to the client's silent_return policy. Every
other error is a local fault (bad credentials, signing, transport, protocol
corruption) and always propagates to the caller.
"""

from typing import Any, Dict, Optional


class UsfError(Exception):
    """Base class for all errors raised by the USF client."""


class ConstructionError(UsfError, ValueError):
    """A client was constructed with a missing or empty credential."""


class SignatureError(UsfError):
    """The request signature could not be generated. Nothing was sent."""

    def __init__(self, message: str = "Failed to generate signature"):
        super().__init__(message)


class NetworkError(UsfError):
    """The HTTP request failed before any response was received."""


class DecodeError(UsfError):
    """A response body could not be decoded (non-JSON 2xx body or corrupt Content-Encoding)."""

    def __init__(self, message: str = "Failed to parse response"):
        super().__init__(message)


class RemoteError(UsfError):
    """
    The USF API answered with a non-2xx status.

    Attributes:
        message: Error message reported by the API (or the raw body text)
        code: Error code reported by the API, e.g. "BAD_QUERY"
        status: HTTP status code of the response
    """

    def __init__(self, message: str, code: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status

    def to_dict(self) -> Dict[str, Any]:
        """Return the error in the wire shape returned by silent mode."""
        return {"error": {"message": self.message, "code": self.code}}
