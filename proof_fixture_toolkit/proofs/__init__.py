from proof_fixture_toolkit.proofs.api import EsploraApiClient, Provider
from proof_fixture_toolkit.proofs.loader import (
    ProofFixtureLoader,
    load_sample,
    save_test_data,
)
from proof_fixture_toolkit.proofs.types import (
    BlockArtifacts,
    BlockInfo,
    BlockInfos,
    MerkleProof,
    ProofApiClient,
    ProofArtifacts,
    ProofInfo,
    TxStatus,
)

__all__ = [
    "EsploraApiClient",
    "Provider",
    "ProofFixtureLoader",
    "load_sample",
    "save_test_data",
    "BlockArtifacts",
    "BlockInfo",
    "BlockInfos",
    "MerkleProof",
    "ProofApiClient",
    "ProofArtifacts",
    "ProofInfo",
    "TxStatus",
]
