# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Credential store for the USF client.

Holds the authorizer id, shared secret and private signing key. Values are
validated once at construction and cannot be changed afterwards.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from .exceptions import ConstructionError


def _is_blank(value: Any) -> bool:
    # Falsy only; whitespace-only strings are accepted as given
    return not value


@dataclass(frozen=True)
class Credentials:
    """
    Identity used to sign every request.

    Attributes:
        authorizer_id: Public identifier of the API consumer
        secret: Shared secret embedded in the signature token
        private_key: HMAC key (never transmitted)

    Raises:
        ConstructionError: If any of the three values is missing or empty
    """
    authorizer_id: str
    secret: str = field(repr=False)
    private_key: Union[str, bytes] = field(repr=False)

    def __post_init__(self) -> None:
        # Check order matches the USF Node SDK error messages
        if _is_blank(self.private_key):
            raise ConstructionError("privateKey is required")
        if _is_blank(self.secret):
            raise ConstructionError("secret is required")
        if _is_blank(self.authorizer_id):
            raise ConstructionError("authorizerId is required")

    @property
    def key_bytes(self) -> bytes:
        """Private key as bytes, ready for HMAC."""
        if isinstance(self.private_key, str):
            return self.private_key.encode('utf-8')
        return bytes(self.private_key)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'Credentials':
        """
        Build credentials from a mapping.

        Accepts the camelCase keys used by the API documentation
        (authorizerId, secret, privateKey) as well as snake_case keys.
        """
        return cls(
            authorizer_id=data.get('authorizerId', data.get('authorizer_id')),
            secret=data.get('secret'),
            private_key=data.get('privateKey', data.get('private_key')),
        )


def coerce_credentials(value: Union['Credentials', Mapping[str, Any]]) -> Credentials:
    """Return value as Credentials, converting mappings."""
    if isinstance(value, Credentials):
        return value
    if isinstance(value, Mapping):
        return Credentials.from_mapping(value)
    raise ConstructionError(
        f"credentials must be Credentials or a mapping, got {type(value).__name__}"
    )
