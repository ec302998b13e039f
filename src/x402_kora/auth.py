# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import hmac
import logging
from typing import Optional

from fastapi import Depends, Header

from .config import FacilitatorConfig, get_facilitator_cfg
from .errors import ForbiddenError

logger = logging.getLogger(__name__)

TOKEN_HEADER = "x-facilitator-token"


def token_matches(configured: Optional[str], presented: Optional[str]) -> bool:
    """Shared-secret check. An empty configured token disables auth."""
    if not configured:
        return True
    if presented is None:
        return False
    return hmac.compare_digest(configured.encode("utf-8"), presented.encode("utf-8"))


async def require_facilitator_token(
    x_facilitator_token: Optional[str] = Header(None, alias=TOKEN_HEADER),
    cfg: FacilitatorConfig = Depends(get_facilitator_cfg),
) -> None:
    if not token_matches(cfg.facilitator_token, x_facilitator_token):
        logger.info(f"[AUTH] Rejected request: {TOKEN_HEADER} {'missing' if x_facilitator_token is None else 'mismatch'}")
        raise ForbiddenError()
