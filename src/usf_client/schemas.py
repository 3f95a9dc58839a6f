# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""Pydantic schemas for USF error responses."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

PARSE_ERROR = "PARSE_ERROR"
NETWORK_ERROR = "NETWORK_ERROR"
FAILED_TO_FETCH = "Failed to fetch"


class ErrorDetail(BaseModel):
    """Error message and code reported by the API."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    message: str
    code: str


class ErrorBody(BaseModel):
    """Body of a non-2xx response: {"error": {"message": ..., "code": ...}}."""

    error: ErrorDetail

    def to_dict(self) -> Dict[str, Any]:
        return {"error": {"message": self.error.message, "code": self.error.code}}

    @classmethod
    def parse_failure_body(cls, data: Any) -> Optional["ErrorBody"]:
        """Return the validated error body, or None if data has another shape."""
        try:
            return cls.model_validate(data)
        except ValidationError:
            return None

    @classmethod
    def fallback(cls, text: str) -> "ErrorBody":
        """Wrap a body that is not a structured error."""
        if not text:
            return cls(error=ErrorDetail(message=FAILED_TO_FETCH, code=NETWORK_ERROR))
        return cls(error=ErrorDetail(message=text, code=PARSE_ERROR))
