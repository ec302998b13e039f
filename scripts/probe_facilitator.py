#!/usr/bin/env python3
# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""
Probe a running facilitator: health, advertised capabilities and fee payer.

Usage:
  python scripts/probe_facilitator.py [base_url]

Env:
  - FACILITATOR_URL (default: http://localhost:3000)
  - FACILITATOR_TOKEN (sent as x-facilitator-token when set)
"""

import asyncio
import json
import os
import sys

import httpx
from dotenv import load_dotenv

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))
load_dotenv()

from x402_kora import FacilitatorClient


async def probe(base_url: str, token: str) -> int:
    async with FacilitatorClient(base_url, token=token or None) as client:
        try:
            health = await client.health()
        except httpx.HTTPError as e:
            print(f"❌ Facilitator not running or connection failed: {e}")
            return 1
        print(f"🏥 Health: {json.dumps(health)}")

        try:
            supported = await client.supported()
        except httpx.HTTPStatusError as e:
            print(f"❌ /supported: {e.response.status_code} - {e.response.text}")
            return 1
        except httpx.HTTPError as e:
            print(f"❌ /supported failed: {e}")
            return 1

    print("\n" + "=" * 80)
    print(f"📋 Facilitator version {supported.get('version')}")
    print("=" * 80)
    for kind in supported.get("supported", []):
        fee_payer = kind.get("feePayer") or "(not reported by Kora)"
        print(f"  - scheme={kind.get('scheme')} network={kind.get('network')} feePayer={fee_payer}")
    print("=" * 80 + "\n")
    return 0


def main():
    base_url = sys.argv[1] if len(sys.argv) > 1 else os.getenv("FACILITATOR_URL", "http://localhost:3000")
    token = os.getenv("FACILITATOR_TOKEN", "").strip()
    sys.exit(asyncio.run(probe(base_url, token)))


if __name__ == "__main__":
    main()
