"""
Test: fixture loaders against a live Esplora provider.

Runs only with PF_RUN_INTEGRATION=1. The provider comes from PF_PROVIDER_URL
and the transaction from PF_INTEGRATION_TXID.
"""

import os

import pytest
import pytest_asyncio

from proof_fixture_toolkit.proofs.api import EsploraApiClient, Provider
from proof_fixture_toolkit.proofs.loader import ProofFixtureLoader
from proof_fixture_toolkit.shared.services.http_client import (
    aclose_async_client,
)


@pytest_asyncio.fixture
async def loader():
    yield ProofFixtureLoader(EsploraApiClient())
    await aclose_async_client()


@pytest.mark.integration
class TestLiveProvider:
    """Fetch real fixtures and check their shape."""

    @pytest.mark.asyncio
    async def test_proof_info_fixture(self, tmp_path, loader):
        tx_id = os.getenv("PF_INTEGRATION_TXID")
        if not tx_id:
            pytest.skip("PF_INTEGRATION_TXID is not set")
        provider = Provider.from_env()
        info = await loader.api.fetch_transaction_info(provider, tx_id)
        initial_height = info.block_height - 2

        result = await loader.process_proof_info(
            tmp_path / "proof-info.json", provider, tx_id, initial_height
        )

        assert len(result.header) == 160
        assert len(result.parents) == 2
        assert len(result.children) == loader.step
        assert result.merkle_proof.block_height == info.block_height

    @pytest.mark.asyncio
    async def test_block_infos_fixture(self, tmp_path, loader):
        provider = Provider.from_env()
        tip = await loader.api.fetch_tip_height(provider)
        start = tip - 20

        result = await loader.process_block_infos(
            tmp_path / "blocks.json", provider, start
        )

        assert result.block_infos.heights == list(
            range(start, start + loader.block_count)
        )
        assert all(len(header) == 160 for header in result.headers)
