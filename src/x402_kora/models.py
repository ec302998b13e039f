# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FacilitatorRequest(BaseModel):
    """Body of /verify and /settle.

    ``paymentPayload`` is scheme-defined and passed through untouched; the
    other two fields are accepted for protocol compatibility but not forwarded.
    """

    model_config = ConfigDict(extra="ignore")

    x402Version: Any = Field(None, description="x402 API version")
    paymentPayload: Any = Field(..., description="Opaque, scheme-defined payment payload")
    paymentRequirements: Any = None


class SupportedKind(BaseModel):
    scheme: str
    network: str
    feePayer: Optional[str] = None


class SupportedResponse(BaseModel):
    ok: bool = True
    version: str
    supported: List[SupportedKind]


def extract_transaction(payment_payload: Any) -> Any:
    # Solana exact payments carry the encoded tx under "transaction"
    if isinstance(payment_payload, dict) and "transaction" in payment_payload:
        return payment_payload["transaction"]
    return payment_payload
