# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import FacilitatorConfig, get_facilitator_cfg
from .errors import ForbiddenError, KoraConfigError, PayloadTooLargeError
from .kora import KoraClient, get_kora_client
from .routes import router

logger = logging.getLogger(__name__)


def build_app(
    cfg: Optional[FacilitatorConfig] = None,
    *,
    kora_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Assemble the facilitator app around one immutable config.

    ``kora_transport`` lets tests route Kora calls to an in-process stub.
    """
    cfg = cfg or FacilitatorConfig()
    if not cfg.kora_rpc_url:
        if cfg.strict_startup:
            raise KoraConfigError("Missing required env var: KORA_RPC_URL")
        logger.warning("KORA_RPC_URL not set; /verify, /settle and fee payer discovery will fail until configured")
    if not cfg.auth_enabled:
        logger.warning("FACILITATOR_TOKEN not set; protected routes accept unauthenticated requests")

    kora = KoraClient(cfg, transport=kora_transport)

    app = FastAPI(
        title="x402 Kora Facilitator",
        description="x402 facilitator backed by a Kora signing RPC",
        version=cfg.version,
    )
    app.state.cfg = cfg
    app.state.kora = kora

    # Wire runtime config and Kora client via dependency
    app.dependency_overrides[get_facilitator_cfg] = lambda: cfg
    app.dependency_overrides[get_kora_client] = lambda: kora

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ForbiddenError)
    async def forbidden_handler(_request: Request, exc: ForbiddenError) -> JSONResponse:
        return JSONResponse(status_code=403, content={"ok": False, "error": exc.message})

    @app.exception_handler(PayloadTooLargeError)
    async def too_large_handler(_request: Request, exc: PayloadTooLargeError) -> JSONResponse:
        return JSONResponse(status_code=413, content={"ok": False, "error": "payload too large"})

    app.include_router(router)

    logger.info(
        f"Facilitator app initialized: scheme={cfg.scheme}, network={cfg.network}, "
        f"version={cfg.version}, auth={'on' if cfg.auth_enabled else 'off'}"
    )
    return app
