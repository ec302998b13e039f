#!/usr/bin/env python3
# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""
Standalone runner for the x402 Kora Facilitator.

Env:
  - PORT (default: 3000), HOST (default: 0.0.0.0)
  - KORA_RPC_URL (required before the first Kora call, e.g. http://kora-rpc:8080)
  - KORA_API_KEY (optional bearer credential for Kora)
  - KORA_TIMEOUT_S (optional per-call deadline; unset = no deadline)
  - FACILITATOR_TOKEN (optional; enables the x-facilitator-token check)
  - X402_NETWORK (default: solana-devnet), X402_SCHEME (default: exact)
  - FACILITATOR_VERSION (default: 0.1.0)
  - FACILITATOR_STRICT_STARTUP=1 to refuse to start without KORA_RPC_URL
  - LOG_LEVEL (default: INFO)
"""

import logging
import os
import sys

# Add src to Python path when running from a checkout
repo_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.join(repo_root, "src"))

# Load .env BEFORE building the config so env vars are visible to it
from dotenv import load_dotenv  # type: ignore
load_dotenv()

from x402_kora import FacilitatorConfig, build_app


cfg = FacilitatorConfig()

logging.basicConfig(
    level=cfg.log_level,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("x402_kora_facilitator")

app = build_app(cfg)


if __name__ == "__main__":
    import uvicorn

    logger.info(f"x402-kora-facilitator listening on {cfg.host}:{cfg.port}")
    uvicorn.run(app, host=cfg.host, port=cfg.port, log_level=cfg.log_level.lower())
