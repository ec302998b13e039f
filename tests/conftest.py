# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
import os
import sys
from typing import Callable, List

import httpx
import pytest


def _add_project_paths_to_syspath() -> None:
    root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    for path in (root, os.path.join(root, "src")):
        if path not in sys.path:
            sys.path.insert(0, path)


_add_project_paths_to_syspath()


# Import after adding to syspath
from fastapi import FastAPI
from fastapi.testclient import TestClient

from mock_kora import build_mock_kora
from x402_kora import FacilitatorConfig, build_app

KORA_URL = "http://kora.test"
TOKEN = "s3cret-facilitator-token"


@pytest.fixture
def test_env(monkeypatch) -> None:
    """Set up test environment variables."""
    monkeypatch.setenv("KORA_RPC_URL", KORA_URL + "/")
    monkeypatch.setenv("KORA_API_KEY", "kora-key")
    monkeypatch.setenv("FACILITATOR_TOKEN", "")
    monkeypatch.setenv("X402_NETWORK", "solana-devnet")
    monkeypatch.setenv("X402_SCHEME", "exact")
    monkeypatch.setenv("FACILITATOR_VERSION", "0.1.0")
    monkeypatch.delenv("KORA_TIMEOUT_S", raising=False)
    monkeypatch.delenv("FACILITATOR_STRICT_STARTUP", raising=False)


@pytest.fixture
def cfg() -> FacilitatorConfig:
    return FacilitatorConfig(
        kora_rpc_url=KORA_URL,
        kora_api_key="",
        facilitator_token="",
        network="solana-devnet",
        scheme="exact",
        version="0.1.0",
    )


@pytest.fixture
def mock_kora() -> FastAPI:
    return build_mock_kora()


@pytest.fixture
def make_client() -> Callable[..., TestClient]:
    """Build a facilitator TestClient wired to an in-process Kora app."""

    def _make(cfg: FacilitatorConfig, kora_app: FastAPI) -> TestClient:
        app = build_app(cfg, kora_transport=httpx.ASGITransport(app=kora_app))
        return TestClient(app)

    return _make


@pytest.fixture
def client(cfg: FacilitatorConfig, mock_kora: FastAPI, make_client) -> TestClient:
    return make_client(cfg, mock_kora)


@pytest.fixture
def kora_calls(mock_kora: FastAPI) -> List[dict]:
    return mock_kora.state.calls


@pytest.fixture
def sample_payment_data() -> dict:
    """Sample Solana exact payment request body."""
    return {
        "x402Version": 1,
        "paymentPayload": {
            "x402Version": 1,
            "scheme": "exact",
            "network": "solana-devnet",
            "transaction": "AQAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAABAAEDBASE64==",
        },
        "paymentRequirements": {
            "scheme": "exact",
            "network": "solana-devnet",
            "maxAmountRequired": "1000000",
            "resource": "https://test.example.com/api/data",
            "payTo": "Merchant111111111111111111111111111111111111",
            "asset": "4zMMC9srt5Ri5X14GAgXhaHii3GnPAEERYPJgZJDncDU",
        },
    }
