"""Proof Fixture Toolkit - builds cached SPV proof fixtures for bridge tests."""

__version__ = "1.0.0"

from .proofs import EsploraApiClient, ProofFixtureLoader, Provider, load_sample
from .shared.constants import DEFAULT_BLOCK_COUNT, DEFAULT_STEP, SHARED_DATA

__all__ = [
    "DEFAULT_BLOCK_COUNT",
    "DEFAULT_STEP",
    "EsploraApiClient",
    "ProofFixtureLoader",
    "Provider",
    "SHARED_DATA",
    "load_sample",
]
