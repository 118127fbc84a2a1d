"""
Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests.
"""

import copy
import os
from typing import Any, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest

from proof_fixture_toolkit.proofs.api import Provider
from proof_fixture_toolkit.proofs.types import (
    BlockInfos,
    MerkleProof,
    ParentsAndChildren,
    ProofInfo,
)

TXID = "3b6d0f3e5b1c7a0a6f1e2c4d8b9a7e6f5d4c3b2a1908f7e6d5c4b3a29180f7e6"
BLOCK_HASH = "00000000000000a1b2c3d4e5f60718293a4b5c6d7e8f90a1b2c3d4e5f6071829"
HEADER = "00" * 80


def block_hash_for(height: int) -> str:
    """Deterministic fake block hash for a height."""
    return f"{height:064x}"


@pytest.fixture
def provider() -> Provider:
    """Provider pointing at a fake Esplora host."""
    return Provider("https://esplora.test/api")


@pytest.fixture
def tx_payload() -> Dict[str, Any]:
    """Esplora /tx/{txid} response for a confirmed transaction at height 100."""
    return {
        "txid": TXID,
        "version": 2,
        "locktime": 0,
        "vin": [],
        "vout": [{"scriptpubkey_type": "v1_p2tr", "value": 131072}],
        "size": 235,
        "weight": 610,
        "fee": 8928,
        "status": {
            "confirmed": True,
            "block_height": 100,
            "block_hash": BLOCK_HASH,
            "block_time": 1722328130,
        },
    }


@pytest.fixture
def block_payloads() -> List[Dict[str, Any]]:
    """Esplora /block/{hash} responses for heights 100..109."""
    return [
        {
            "id": block_hash_for(height),
            "height": height,
            "version": 536870912,
            "timestamp": 1722328130 + height,
            "tx_count": 1,
            "merkle_root": "ab" * 32,
            "previousblockhash": block_hash_for(height - 1),
            "bits": 486604799,
            "nonce": height,
        }
        for height in range(100, 110)
    ]


@pytest.fixture
def make_mock_api(tx_payload, block_payloads):
    """
    Factory for a mocked ProofApiClient.

    Every call is recorded by name in ``api.calls`` so tests can check
    ordering.
    """

    def _factory(block_height: int = 100) -> MagicMock:
        calls: List[str] = []
        payload = copy.deepcopy(tx_payload)
        payload["status"]["block_height"] = block_height

        def recorder(name, result):
            async def _call(*args, **kwargs):
                calls.append(name)
                return result(*args) if callable(result) else result

            return AsyncMock(side_effect=_call)

        api = MagicMock()
        api.calls = calls
        api.fetch_transaction_info = recorder(
            "fetch_transaction_info",
            lambda *_: ProofInfo.from_dict(copy.deepcopy(payload)),
        )
        api.fetch_transaction_hex = recorder("fetch_transaction_hex", "0200aa")
        api.fetch_merkle_proof = recorder(
            "fetch_merkle_proof",
            MerkleProof(block_height=block_height, merkle=["cd" * 32], pos=1),
        )
        api.fetch_parents_and_children_hashes = recorder(
            "fetch_parents_and_children_hashes",
            ParentsAndChildren(
                parents=[block_hash_for(99)],
                children=[block_hash_for(block_height + 1)],
            ),
        )
        api.fetch_proof_block_header = recorder(
            "fetch_proof_block_header", HEADER
        )
        api.fetch_block_infos = recorder(
            "fetch_block_infos",
            lambda *_: BlockInfos.from_list(copy.deepcopy(block_payloads)),
        )
        api.fetch_block_headers = recorder(
            "fetch_block_headers",
            lambda _provider, infos: [HEADER for _ in infos],
        )
        return api

    return _factory


@pytest.fixture
def mock_api(make_mock_api) -> MagicMock:
    """Mocked ProofApiClient whose proof sits at height 100."""
    return make_mock_api()


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )


def pytest_collection_modifyitems(config, items):
    """Skip live provider tests unless PF_RUN_INTEGRATION=1."""
    if os.getenv("PF_RUN_INTEGRATION") == "1":
        return
    skip = pytest.mark.skip(reason="set PF_RUN_INTEGRATION=1 to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)
