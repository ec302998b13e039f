# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""x402 Kora Facilitator

Serves the x402 facilitator surface (/supported, /verify, /settle, /health)
and delegates signing and broadcasting to a Kora JSON-RPC service.

Usage:
    from x402_kora import FacilitatorConfig, build_app

    app = build_app(FacilitatorConfig())
"""

from .app import build_app
from .auth import TOKEN_HEADER, require_facilitator_token, token_matches
from .client import FacilitatorClient
from .config import FacilitatorConfig, get_facilitator_cfg
from .errors import (
    FacilitatorError,
    ForbiddenError,
    InvalidRequestError,
    KoraConfigError,
    KoraRpcError,
    PayloadTooLargeError,
)
from .kora import KoraClient, fee_payer_from, get_kora_client
from .models import FacilitatorRequest, SupportedKind, SupportedResponse, extract_transaction
from .routes import router
from .validation import parse_payment_request, validate_payment_request

__version__ = "0.1.0"

__all__ = [
    "build_app",
    "router",
    "FacilitatorConfig",
    "get_facilitator_cfg",
    "KoraClient",
    "get_kora_client",
    "fee_payer_from",
    "FacilitatorClient",
    "TOKEN_HEADER",
    "token_matches",
    "require_facilitator_token",
    "FacilitatorRequest",
    "SupportedKind",
    "SupportedResponse",
    "extract_transaction",
    "parse_payment_request",
    "validate_payment_request",
    "FacilitatorError",
    "KoraRpcError",
    "KoraConfigError",
    "InvalidRequestError",
    "ForbiddenError",
    "PayloadTooLargeError",
]
