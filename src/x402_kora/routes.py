# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
import uuid
from typing import Any, Awaitable, Callable, Dict, List, Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from .auth import require_facilitator_token
from .config import FacilitatorConfig, get_facilitator_cfg
from .errors import InvalidRequestError, KoraRpcError, PayloadTooLargeError
from .kora import KoraClient, fee_payer_from, get_kora_client
from .models import FacilitatorRequest, SupportedKind, SupportedResponse, extract_transaction
from .validation import parse_payment_request

logger = logging.getLogger(__name__)

router = APIRouter(tags=["x402-facilitator"])

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def _json(status_code: int, content: Dict[str, Any], req_id: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers={"X-Request-ID": req_id})


async def read_limited_body(request: Request, limit: int) -> bytes:
    """Read the request body, giving up as soon as it passes ``limit`` bytes."""
    length = request.headers.get("content-length")
    if length and length.isdigit() and int(length) > limit:
        raise PayloadTooLargeError(limit)
    received = 0
    chunks: List[bytes] = []
    async for chunk in request.stream():
        received += len(chunk)
        if received > limit:
            raise PayloadTooLargeError(limit)
        chunks.append(chunk)
    return b"".join(chunks)


async def _read_payment_request(request: Request, cfg: FacilitatorConfig) -> FacilitatorRequest:
    return parse_payment_request(await read_limited_body(request, cfg.max_body_bytes))


async def _lookup_fee_payer(kora: KoraClient, req_id: str) -> Optional[str]:
    # Optional enrichment: discovery must not fail because Kora is down
    try:
        out = await kora.get_payer_signer()
    except KoraRpcError as e:
        logger.warning(f"[{req_id}] [FACILITATOR] Fee payer lookup failed, omitting: {e.message}")
        return None
    return fee_payer_from(out)


@router.get("/health")
async def health() -> Dict[str, Any]:
    return {"ok": True}


@router.get(
    "/supported",
    response_model=SupportedResponse,
    dependencies=[Depends(require_facilitator_token)],
)
async def supported(
    response: Response,
    cfg: FacilitatorConfig = Depends(get_facilitator_cfg),
    kora: KoraClient = Depends(get_kora_client),
) -> SupportedResponse:
    """x402 core calls this on startup to learn what the facilitator can do."""
    req_id = uuid.uuid4().hex
    response.headers["X-Request-ID"] = req_id
    fee_payer = await _lookup_fee_payer(kora, req_id)
    return SupportedResponse(
        version=cfg.version,
        supported=[SupportedKind(scheme=cfg.scheme, network=cfg.network, feePayer=fee_payer)],
    )


async def _forward(
    *,
    request: Request,
    cfg: FacilitatorConfig,
    kora_method: Callable[[Any], Awaitable[Any]],
    outcome_key: str,
    action: str,
) -> JSONResponse:
    """Shared /verify and /settle pipeline: validate, extract, call Kora, shape."""
    req_id = uuid.uuid4().hex
    try:
        body = await _read_payment_request(request, cfg)
    except InvalidRequestError as e:
        logger.info(f"[{req_id}] [FACILITATOR] {action} rejected: {e}")
        return _json(400, {outcome_key: False, "error": str(e)}, req_id)

    logger.info(
        f"[{req_id}] [FACILITATOR] {action}: x402Version={body.x402Version}, "
        f"requirements={'yes' if body.paymentRequirements else 'no'}"
    )
    transaction = extract_transaction(body.paymentPayload)
    try:
        out = await kora_method(transaction)
    except KoraRpcError as e:
        logger.warning(f"[{req_id}] [FACILITATOR] {action} failed: {e.message} (status={e.status}, body={e.body!r})")
        return _json(400, {outcome_key: False, "error": e.message or f"{action} failed"}, req_id)

    logger.info(f"[{req_id}] [FACILITATOR] {action} ok")
    return _json(200, {outcome_key: True, "result": out}, req_id)


@router.post("/verify", dependencies=[Depends(require_facilitator_token)])
async def verify(
    request: Request,
    cfg: FacilitatorConfig = Depends(get_facilitator_cfg),
    kora: KoraClient = Depends(get_kora_client),
) -> JSONResponse:
    """Check a payment payload without broadcasting (Kora signTransaction)."""
    return await _forward(
        request=request,
        cfg=cfg,
        kora_method=kora.sign_transaction,
        outcome_key="isValid",
        action="verify",
    )


@router.post("/settle", dependencies=[Depends(require_facilitator_token)])
async def settle(
    request: Request,
    cfg: FacilitatorConfig = Depends(get_facilitator_cfg),
    kora: KoraClient = Depends(get_kora_client),
) -> JSONResponse:
    """Broadcast the transaction; Kora signs as fee payer and sends."""
    return await _forward(
        request=request,
        cfg=cfg,
        kora_method=kora.sign_and_send_transaction,
        outcome_key="success",
        action="settle",
    )


# Some clients call /requirements (faremeter-style); answer explicitly.
@router.api_route("/requirements", methods=ALL_METHODS)
async def requirements() -> JSONResponse:
    return JSONResponse(status_code=405, content={"ok": False, "error": "not supported"})
