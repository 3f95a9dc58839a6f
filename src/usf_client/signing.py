# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
HMAC-SHA256 request signing for the USF API.

Token format:

    <authorizerId>.<secret>.<hmacHex>.<base64(timeMs)>

where hmacHex = HMAC-SHA256(privateKey, json(payload) + timeMs). The server
recomputes the same HMAC from the request body and the decoded time, so the
serialized payload must match the transmitted body byte for byte.
"""

import base64
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from cryptography.hazmat.primitives import hashes, hmac

from .credentials import Credentials
from .encoding import serialize_payload
from .exceptions import SignatureError

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class SignedRequest:
    """Serialized request body together with the token that signs it."""
    body: str
    signature: str


def compute_hmac_hex(key: bytes, message: str) -> str:
    """
    Compute HMAC-SHA256 of a UTF-8 message.

    Args:
        key: HMAC key
        message: Message text

    Returns:
        64-character lowercase hex digest
    """
    mac = hmac.HMAC(key, hashes.SHA256())
    mac.update(message.encode('utf-8'))
    return mac.finalize().hex()


def encode_time(time_ms: str) -> str:
    """Base64-encode the millisecond timestamp string."""
    return base64.b64encode(time_ms.encode('utf-8')).decode('utf-8')


class SignatureGenerator:
    """
    Produces signature tokens for request payloads.

    Pure apart from reading the clock. Pass a fixed clock to get
    deterministic tokens in tests.
    """

    def __init__(self, credentials: Credentials, clock: Optional[Clock] = None):
        """
        Initialize signature generator.

        Args:
            credentials: Identity to sign with
            clock: Returns the current time in seconds (default: time.time)
        """
        self.credentials = credentials
        self.clock = clock or time.time

    def _now_ms(self) -> str:
        return str(int(self.clock() * 1000))

    def sign_serialized(self, body: str) -> str:
        """
        Sign an already serialized JSON body.

        Raises:
            SignatureError: If the HMAC cannot be computed
        """
        try:
            time_ms = self._now_ms()
            digest = compute_hmac_hex(self.credentials.key_bytes, body + time_ms)
            b64_time = encode_time(time_ms)
        except Exception as e:
            logger.error(f"Signature generation failed for {self.credentials.authorizer_id}: {e}")
            raise SignatureError() from e

        return f"{self.credentials.authorizer_id}.{self.credentials.secret}.{digest}.{b64_time}"

    def sign_request(self, payload: Any) -> SignedRequest:
        """
        Serialize a payload once and sign that exact text.

        Raises:
            SignatureError: If the payload cannot be serialized or signed
        """
        try:
            body = serialize_payload(payload)
        except (TypeError, ValueError) as e:
            logger.error(f"Cannot serialize request payload for signing: {e}")
            raise SignatureError() from e

        return SignedRequest(body=body, signature=self.sign_serialized(body))

    def sign(self, payload: Any) -> str:
        """
        Produce the signature token for a payload.

        Args:
            payload: Any JSON-serializable value

        Returns:
            Signature token for the sig header

        Raises:
            SignatureError: If signing fails
        """
        return self.sign_request(payload).signature
