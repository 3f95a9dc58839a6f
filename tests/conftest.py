# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""Pytest configuration and fixtures."""

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from usf_client import Credentials, UsfClient

TEST_BASE_URL = "http://usf.test/api"
FIXED_TIME = 1700000000.5  # exactly representable, 1700000000500 ms


class FakeUsfApi:
    """
    In-process stand-in for the USF API.

    Records every request and answers with a configurable response.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.body: Optional[bytes] = b"[]"
        self.error: Optional[Exception] = None
        self.headers: Dict[str, str] = {}

    def respond_json(self, data: Any, status_code: int = 200) -> None:
        self.status_code = status_code
        self.body = json.dumps(data).encode("utf-8")
        self.headers = {}
        self.error = None

    def respond_text(self, text: str, status_code: int) -> None:
        self.status_code = status_code
        self.body = text.encode("utf-8")
        self.headers = {}
        self.error = None

    def respond_raw(self, content: bytes, status_code: int, headers: Dict[str, str]) -> None:
        self.status_code = status_code
        self.body = content
        self.headers = dict(headers)
        self.error = None

    def fail_connection(self) -> None:
        self.error = httpx.ConnectError("Connection refused")

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, headers=self.headers, content=self.body or b"")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_body(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        authorizer_id="auth_001",
        secret="shared-secret",
        private_key="private-signing-key",
    )


@pytest.fixture
def fixed_clock() -> Callable[[], float]:
    return lambda: FIXED_TIME


@pytest.fixture
def fake_api() -> FakeUsfApi:
    return FakeUsfApi()


@pytest.fixture
def make_client(credentials, fake_api, fixed_clock):
    """Factory for clients wired to the fake API."""

    def _make(silent_return: bool = True) -> UsfClient:
        return UsfClient(
            credentials,
            silent_return,
            TEST_BASE_URL,
            transport=fake_api.transport,
            clock=fixed_clock,
        )

    return _make
