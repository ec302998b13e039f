# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""
Test the facilitator client SDK against the in-process app.
"""
import httpx
import pytest

from conftest import TOKEN
from mock_kora import FEE_PAYER, TX_SIGNATURE, build_mock_kora
from x402_kora import FacilitatorClient, build_app


def _client_for(cfg, kora_app, *, token=None) -> FacilitatorClient:
    app = build_app(cfg, kora_transport=httpx.ASGITransport(app=kora_app))
    return FacilitatorClient(
        "http://facilitator.test/",
        token=token,
        transport=httpx.ASGITransport(app=app),
    )


@pytest.mark.asyncio
class TestFacilitatorClient:
    """Round trips through the real routes."""

    async def test_health_and_supported(self, cfg, mock_kora):
        async with _client_for(cfg, mock_kora) as client:
            assert await client.health() == {"ok": True}
            supported = await client.supported()

        assert supported["supported"][0]["feePayer"] == FEE_PAYER

    async def test_verify_then_settle(self, cfg, mock_kora, sample_payment_data):
        async with _client_for(cfg, mock_kora) as client:
            out = await client.verify_then_settle(
                sample_payment_data["paymentPayload"], sample_payment_data["paymentRequirements"]
            )

        assert out["success"] is True
        assert out["result"]["signature"] == TX_SIGNATURE
        methods = [c["envelope"]["method"] for c in mock_kora.state.calls]
        assert methods == ["signTransaction", "signAndSendTransaction"]

    async def test_verify_failure_is_returned_not_raised(self, cfg):
        kora = build_mock_kora(errors={"signTransaction": {"code": -32000, "message": "bad signature"}})
        async with _client_for(cfg, kora) as client:
            out = await client.verify({"transaction": "tx"})

        assert out["isValid"] is False
        assert out["error"].endswith("bad signature")

    async def test_verify_then_settle_stops_on_invalid(self, cfg):
        kora = build_mock_kora(errors={"signTransaction": {"code": -32000, "message": "bad signature"}})
        async with _client_for(cfg, kora) as client:
            with pytest.raises(RuntimeError, match="bad signature"):
                await client.verify_then_settle({"transaction": "tx"})

        assert [c["envelope"]["method"] for c in kora.state.calls] == ["signTransaction"]

    async def test_token_is_sent(self, cfg, mock_kora):
        secured = cfg.model_copy(update={"facilitator_token": TOKEN})
        async with _client_for(secured, mock_kora, token=TOKEN) as client:
            assert (await client.settle({"transaction": "tx"}))["success"] is True

    async def test_forbidden_raises(self, cfg, mock_kora):
        secured = cfg.model_copy(update={"facilitator_token": TOKEN})
        async with _client_for(secured, mock_kora) as client:
            with pytest.raises(httpx.HTTPStatusError) as exc_info:
                await client.supported()

        assert exc_info.value.response.status_code == 403

    async def test_requires_base_url(self):
        with pytest.raises(ValueError):
            FacilitatorClient("")
