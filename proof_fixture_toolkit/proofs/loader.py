"""
Proof and block fixture loaders.

Each loader treats a JSON file as a write-through cache keyed by its path:
an existing file short-circuits the initial provider fetch, a missing one is
fetched and written. Dependent artifacts are always fetched again. Errors are
never caught here; they reach the calling test harness unchanged.
"""

import json
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar, Union

from proof_fixture_toolkit.proofs.api import Provider
from proof_fixture_toolkit.proofs.types import (
    BlockArtifacts,
    BlockInfos,
    ProofApiClient,
    ProofArtifacts,
    ProofInfo,
)
from proof_fixture_toolkit.shared.constants import (
    DEFAULT_BLOCK_COUNT,
    DEFAULT_STEP,
    TEST_DATA_FILE,
    TEST_DATA_SAMPLE_FILE,
)
from proof_fixture_toolkit.shared.exceptions import (
    ConfigurationException,
    InvalidHeightError,
    MalformedCacheError,
)
from proof_fixture_toolkit.shared.logging import get_logger
from proof_fixture_toolkit.utils.file_utils import dump_json, load_json

PathLike = Union[str, Path]
T = TypeVar("T")

_logger = get_logger(__name__)


def _read_cache(path: PathLike, parser: Callable[[Any], T]) -> T:
    _logger.info(f">>> reading {path}")
    try:
        return parser(load_json(path))
    except json.JSONDecodeError as e:
        raise MalformedCacheError(str(path), f"invalid JSON ({e})") from e
    except ValueError as e:
        raise MalformedCacheError(str(path), str(e)) from e


def load_sample(sample_file: PathLike = TEST_DATA_SAMPLE_FILE) -> ProofInfo:
    """
    Load the shipped sample proof info fixture.

    Raises:
        FileNotFoundError: if the sample file is absent
        MalformedCacheError: if it does not hold a proof info record
    """
    try:
        return ProofInfo.from_dict(load_json(sample_file))
    except ValueError as e:
        raise MalformedCacheError(str(sample_file), str(e)) from e


def save_test_data(data: Any, path: PathLike = TEST_DATA_FILE) -> Path:
    """Write assembled test data in the cache file format."""
    if hasattr(data, "to_dict"):
        data = data.to_dict()
    written = dump_json(data, path)
    _logger.debug(f"wrote test data to {written}")
    return written


class ProofFixtureLoader:
    """
    Assembles proof and block fixtures from a provider, with file caching.

    Args:
        api: Collaborator performing the raw provider fetches
        step: Step stored on freshly fetched proof infos
        block_count: Range size used when ``process_block_infos`` gets no end
    """

    def __init__(
        self,
        api: ProofApiClient,
        step: int = DEFAULT_STEP,
        block_count: int = DEFAULT_BLOCK_COUNT,
    ):
        if step < 1:
            raise ConfigurationException(f"step must be positive, got {step}")
        if block_count < 1:
            raise ConfigurationException(
                f"block_count must be positive, got {block_count}"
            )
        self.api = api
        self.step = step
        self.block_count = block_count

    async def process_proof_info(
        self,
        proof_info_file: PathLike,
        provider: Provider,
        tx_id: str,
        initial_height: int,
    ) -> ProofArtifacts:
        """
        Load or fetch the proof info for ``tx_id`` and its dependent artifacts.

        The height check runs before any dependent fetch, and the cache file
        is only (re)written once every fetch has succeeded.

        Raises:
            InvalidHeightError: if the proof block is below ``initial_height``
            MalformedCacheError: if the cache file cannot be parsed
            ProviderFetchError: if any provider call fails
        """
        if Path(proof_info_file).exists():
            proof_info = _read_cache(proof_info_file, ProofInfo.from_dict)
        else:
            proof_info = await self.api.fetch_transaction_info(provider, tx_id)
            proof_info.step = self.step
            proof_info.initial_height = initial_height

        block_height = proof_info.block_height
        if block_height is None or block_height < initial_height:
            raise InvalidHeightError(block_height, initial_height)

        raw_tx = await self.api.fetch_transaction_hex(provider, proof_info)
        merkle_proof = await self.api.fetch_merkle_proof(provider, proof_info)
        parents, children = await self.api.fetch_parents_and_children_hashes(
            provider, proof_info
        )
        header = await self.api.fetch_proof_block_header(provider, proof_info)

        dump_json(proof_info.to_dict(), proof_info_file)
        _logger.debug(f"wrote {proof_info_file}")

        return ProofArtifacts(
            proof_info=proof_info,
            raw_tx=raw_tx,
            merkle_proof=merkle_proof,
            parents=parents,
            children=children,
            header=header,
        )

    async def process_block_infos(
        self,
        blocks_file: PathLike,
        provider: Provider,
        initial_height: int,
        end: Optional[int] = None,
    ) -> BlockArtifacts:
        """
        Load or fetch block descriptors for ``[initial_height, end)``.

        Headers are fetched on every call and are not written to the cache
        file; only the block descriptors are persisted.
        """
        if end is None:
            end = initial_height + self.block_count

        if Path(blocks_file).exists():
            block_infos = _read_cache(blocks_file, BlockInfos.from_list)
        else:
            block_infos = await self.api.fetch_block_infos(
                provider, initial_height, end
            )

        headers = await self.api.fetch_block_headers(provider, block_infos)

        dump_json(block_infos.to_list(), blocks_file)
        _logger.debug(f"wrote {blocks_file} ({len(block_infos)} blocks)")

        return BlockArtifacts(block_infos=block_infos, headers=headers)
