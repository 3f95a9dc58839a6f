# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Transport dispatcher for the USF API.

Sends one signed POST per call and classifies what came back:

- Success: 2xx with a JSON body
- HttpFailure: non-2xx, with the error body normalized to {"error": {...}}
- NetworkFailure: no usable exchange (DNS, refused connection, timeout,
  redirect loop)
- DecodeFailure: 2xx whose body is not JSON, or any response whose
  Content-Encoding cannot be decoded

Nothing is retried. Turning an outcome into a return value or an exception
is the reconciler's job.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import httpx

from .schemas import ErrorBody
from .signing import SignatureGenerator

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "sig"


@dataclass(frozen=True)
class Success:
    body: Any


@dataclass(frozen=True)
class HttpFailure:
    status: int
    error: Dict[str, Any]  # {"error": {"message": str, "code": str}}


@dataclass(frozen=True)
class NetworkFailure:
    message: str
    cause: Optional[BaseException] = field(default=None, compare=False)


@dataclass(frozen=True)
class DecodeFailure:
    message: str = "Failed to parse response"
    cause: Optional[BaseException] = field(default=None, compare=False)


RawOutcome = Union[Success, HttpFailure, NetworkFailure, DecodeFailure]


def parse_error_body(text: str) -> Dict[str, Any]:
    """
    Normalize the body of a failed response.

    Returns the structured {"error": {"message", "code"}} body when the
    server sent one, the raw text under code PARSE_ERROR when it did not,
    and a NETWORK_ERROR placeholder when the body is empty.
    """
    error = None
    if text:
        try:
            data = json.loads(text)
        except ValueError:
            data = None
        else:
            error = ErrorBody.parse_failure_body(data)

    if error is None:
        error = ErrorBody.fallback(text)

    return error.to_dict()


def classify_response(response: httpx.Response) -> RawOutcome:
    """Classify a received response as Success, HttpFailure or DecodeFailure."""
    if response.is_success:
        try:
            return Success(body=response.json())
        except ValueError as e:
            logger.error(f"Unparsable {response.status_code} response from {response.url}: {e}")
            return DecodeFailure(cause=e)

    error = parse_error_body(response.text)
    logger.warning(
        f"USF API returned {response.status_code}: "
        f"{error['error']['code']} - {error['error']['message']}"
    )
    return HttpFailure(status=response.status_code, error=error)


class Dispatcher:
    """
    Signs canonical request arrays and POSTs them to the USF API.

    A new httpx.AsyncClient is opened for every call, so concurrent calls
    share no connection state.
    """

    def __init__(
        self,
        signer: SignatureGenerator,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize dispatcher.

        Args:
            signer: Signature generator bound to the client credentials
            base_url: URL every request is POSTed to
            timeout: Request timeout in seconds (None = httpx default)
            transport: Optional httpx transport (used by tests)
        """
        self.signer = signer
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport

    def _client_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {}
        if self.timeout is not None:
            options["timeout"] = self.timeout
        if self.transport is not None:
            options["transport"] = self.transport
        return options

    async def dispatch(self, encoded: List[Any]) -> RawOutcome:
        """
        Sign and send a canonical request array.

        Args:
            encoded: Output of encoding.encode()

        Returns:
            Classified outcome of the single HTTP exchange

        Raises:
            SignatureError: If the request could not be signed (nothing is sent)
        """
        signed = self.signer.sign_request(encoded)
        operation = encoded[0] if encoded else None

        headers = {
            "Content-Type": "application/json",
            SIGNATURE_HEADER: signed.signature,
        }

        logger.debug(f"Sending {operation} request to {self.base_url}")

        try:
            async with httpx.AsyncClient(**self._client_options()) as client:
                response = await client.post(
                    self.base_url,
                    content=signed.body.encode('utf-8'),
                    headers=headers,
                )
        except httpx.DecodingError as e:
            # Corrupt Content-Encoding; the body text is unrecoverable
            logger.error(f"Undecodable response body from {self.base_url} for {operation}: {e!r}")
            return DecodeFailure(cause=e)
        except httpx.RequestError as e:
            logger.error(f"Cannot reach USF API at {self.base_url} for {operation}: {e!r}")
            return NetworkFailure(message=str(e) or type(e).__name__, cause=e)

        return classify_response(response)
