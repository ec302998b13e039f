# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from .auth import TOKEN_HEADER


class FacilitatorClient:
    """Async client for resource servers calling this facilitator.

    /verify and /settle failures come back as 400 with an ``error`` string; they
    are returned as-is instead of raised so callers can branch on ``isValid``
    and ``success``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        timeout: Optional[float] = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not base_url:
            raise ValueError("base_url required for FacilitatorClient")
        self.base_url = base_url.rstrip("/")
        headers = {TOKEN_HEADER: token} if token else {}
        self.http = httpx.AsyncClient(timeout=timeout, headers=headers, transport=transport)

    async def __aenter__(self) -> "FacilitatorClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    @staticmethod
    def _json(r: httpx.Response, path: str) -> Dict[str, Any]:
        if (r.headers.get("content-type") or "").split(";", 1)[0].strip().lower() != "application/json":
            raise httpx.HTTPError(f"invalid content-type from {path}")
        return r.json()

    async def health(self) -> Dict[str, Any]:
        r = await self.http.get(f"{self.base_url}/health")
        r.raise_for_status()
        return self._json(r, "/health")

    async def supported(self) -> Dict[str, Any]:
        r = await self.http.get(f"{self.base_url}/supported")
        r.raise_for_status()
        return self._json(r, "/supported")

    async def _post_payment(
        self,
        path: str,
        payment_payload: Any,
        payment_requirements: Optional[Dict[str, Any]],
        x402_version: int,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"x402Version": x402_version, "paymentPayload": payment_payload}
        if payment_requirements is not None:
            body["paymentRequirements"] = payment_requirements
        r = await self.http.post(f"{self.base_url}{path}", json=body)
        if r.status_code != 400:
            r.raise_for_status()
        return self._json(r, path)

    async def verify(
        self,
        payment_payload: Any,
        payment_requirements: Optional[Dict[str, Any]] = None,
        *,
        x402_version: int = 1,
    ) -> Dict[str, Any]:
        return await self._post_payment("/verify", payment_payload, payment_requirements, x402_version)

    async def settle(
        self,
        payment_payload: Any,
        payment_requirements: Optional[Dict[str, Any]] = None,
        *,
        x402_version: int = 1,
    ) -> Dict[str, Any]:
        return await self._post_payment("/settle", payment_payload, payment_requirements, x402_version)

    async def verify_then_settle(
        self,
        payment_payload: Any,
        payment_requirements: Optional[Dict[str, Any]] = None,
        *,
        x402_version: int = 1,
    ) -> Dict[str, Any]:
        v = await self.verify(payment_payload, payment_requirements, x402_version=x402_version)
        if not v.get("isValid"):
            raise RuntimeError(v.get("error") or "verification failed")
        return await self.settle(payment_payload, payment_requirements, x402_version=x402_version)
