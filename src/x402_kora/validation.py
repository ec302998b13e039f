# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from .errors import InvalidRequestError
from .models import FacilitatorRequest


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise InvalidRequestError(msg)


def validate_payment_request(data: Any) -> FacilitatorRequest:
    """Check a decoded /verify or /settle body before any Kora call."""
    _require(isinstance(data, dict), "invalid body: expected a JSON object")
    _require(data.get("paymentPayload") is not None, "invalid body: paymentPayload is required")
    try:
        return FacilitatorRequest.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(p) for p in first.get("loc", ()))
        raise InvalidRequestError(f"invalid body: {loc} {first.get('msg', 'invalid')}".strip()) from e


def parse_payment_request(raw: bytes) -> FacilitatorRequest:
    if not raw:
        raise InvalidRequestError("invalid body: empty request body")
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise InvalidRequestError("invalid body: malformed JSON") from e
    return validate_payment_request(data)
