# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import itertools
import logging
from typing import Any, Dict, Optional

import httpx

from .config import FacilitatorConfig
from .errors import KoraConfigError, KoraRpcError

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"

GET_PAYER_SIGNER = "getPayerSigner"
SIGN_TRANSACTION = "signTransaction"
SIGN_AND_SEND_TRANSACTION = "signAndSendTransaction"


def _error_detail(parsed: Any, text: str) -> str:
    if isinstance(parsed, dict):
        err = parsed.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if err:
            return str(err)
        if parsed.get("message"):
            return str(parsed["message"])
    return text


def fee_payer_from(result: Any) -> Optional[str]:
    """Pick the fee payer address out of a ``getPayerSigner`` result."""
    if not isinstance(result, dict):
        return None
    for key in ("signer_address", "address", "payer"):
        value = result.get(key)
        if isinstance(value, str) and value:
            return value
    return None


class KoraClient:
    """JSON-RPC client for a Kora signing service.

    One attempt per call, no retries. Every failure (missing URL, transport,
    non-2xx status, non-JSON body, missing envelope, JSON-RPC ``error``) is
    raised as :class:`KoraRpcError`.
    """

    def __init__(
        self,
        cfg: FacilitatorConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cfg = cfg
        self.transport = transport
        self._ids = itertools.count(1)

    def _headers(self) -> Dict[str, str]:
        headers = {"content-type": "application/json"}
        if self.cfg.kora_api_key:
            headers["authorization"] = f"Bearer {self.cfg.kora_api_key}"
        return headers

    async def call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = self.cfg.kora_rpc_url
        if not url:
            raise KoraConfigError("Missing required env var: KORA_RPC_URL")

        envelope = {
            "jsonrpc": JSONRPC_VERSION,
            "id": next(self._ids),
            "method": method,
            "params": params if params is not None else {},
        }
        prefix = f"Kora RPC {method} failed"
        logger.debug(f"[KORA] -> {method} id={envelope['id']}")

        try:
            async with httpx.AsyncClient(timeout=self.cfg.kora_timeout_s, transport=self.transport) as client:
                resp = await client.post(url, json=envelope, headers=self._headers())
        except httpx.HTTPError as e:
            logger.warning(f"[KORA] {method} transport error: {e!r}")
            raise KoraRpcError(f"{prefix}: transport error: {e}") from e

        text = resp.text
        try:
            parsed = resp.json() if text else None
        except ValueError:
            parsed = None

        if not resp.is_success:
            detail = _error_detail(parsed, text) or str(resp.status_code)
            raise KoraRpcError(
                f"{prefix}: {resp.status_code} {detail}",
                status=resp.status_code,
                body=parsed if parsed is not None else text,
            )

        if parsed is None:
            raise KoraRpcError(
                f"{prefix}: {resp.status_code} {text or 'empty response'}",
                status=resp.status_code,
                body=text,
            )

        if not isinstance(parsed, dict) or parsed.get("jsonrpc") != JSONRPC_VERSION:
            raise KoraRpcError(
                f"{prefix}: invalid JSON-RPC response",
                status=resp.status_code,
                body=parsed,
            )

        err = parsed.get("error")
        if err is not None:
            code = err.get("code") if isinstance(err, dict) else None
            message = _error_detail(parsed, text)
            raise KoraRpcError(
                f"{prefix}: {code} {message}" if code is not None else f"{prefix}: {message}",
                status=code,
                body=parsed,
            )

        logger.debug(f"[KORA] <- {method} id={parsed.get('id')}")
        return parsed.get("result")

    async def get_payer_signer(self) -> Any:
        return await self.call(GET_PAYER_SIGNER, {})

    async def sign_transaction(self, transaction: Any) -> Any:
        return await self.call(SIGN_TRANSACTION, {"transaction": transaction})

    async def sign_and_send_transaction(self, transaction: Any) -> Any:
        return await self.call(SIGN_AND_SEND_TRANSACTION, {"transaction": transaction})


def get_kora_client() -> KoraClient:
    return KoraClient(FacilitatorConfig())
