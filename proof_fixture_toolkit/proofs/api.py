"""
Esplora REST client for proof fixture data.

Implements the ProofApiClient protocol against any Esplora-compatible
provider (mempool.space, blockstream.info, a local electrs). Every HTTP or
payload failure is raised as ProviderFetchError; nothing is retried.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, List, Optional, TypeVar

import httpx

from proof_fixture_toolkit.proofs.types import (
    BlockInfo,
    BlockInfos,
    MerkleProof,
    ParentsAndChildren,
    ProofInfo,
)
from proof_fixture_toolkit.shared.constants import (
    DEFAULT_STEP,
    GlobalConstants,
)
from proof_fixture_toolkit.shared.exceptions import (
    ConfigurationException,
    InvalidHeightError,
    ProviderFetchError,
)
from proof_fixture_toolkit.shared.logging import get_logger
from proof_fixture_toolkit.shared.services.http_client import get_async_client

T = TypeVar("T")
R = TypeVar("R")

_logger = get_logger(__name__)


@dataclass(frozen=True)
class Provider:
    """An Esplora endpoint, e.g. ``https://mempool.space/testnet4/api``."""

    base_url: str
    name: str = "esplora"

    def __post_init__(self):
        if not self.base_url:
            raise ConfigurationException("provider base URL is empty")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls) -> "Provider":
        """Provider configured by PF_PROVIDER_URL (or the default)."""
        return cls(GlobalConstants.get_provider_url())

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"


def _confirmed_height(proof_info: ProofInfo) -> int:
    height = proof_info.block_height
    if height is None:
        raise InvalidHeightError(None, proof_info.initial_height or 0)
    return height


class EsploraApiClient:
    """Fetches transactions, proofs and blocks from an Esplora provider."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        max_concurrency: int = 5,
    ):
        if max_concurrency < 1:
            raise ConfigurationException(
                f"max_concurrency must be positive, got {max_concurrency}"
            )
        self._client = client
        self.max_concurrency = max_concurrency

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client or get_async_client()

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    async def _get(self, provider: Provider, path: str) -> httpx.Response:
        url = provider.url(path)
        _logger.debug(f"GET {url}")
        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            raise ProviderFetchError(
                f"{provider.name} returned HTTP {status_code} for {url}",
                url=url,
                status_code=status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderFetchError(
                f"request to {url} failed: {e}", url=url
            ) from e
        return response

    async def _get_text(self, provider: Provider, path: str) -> str:
        response = await self._get(provider, path)
        return response.text.strip()

    async def _get_parsed(
        self, provider: Provider, path: str, parser: Callable[[Any], T]
    ) -> T:
        response = await self._get(provider, path)
        try:
            return parser(response.json())
        except ValueError as e:
            raise ProviderFetchError(
                f"unexpected payload from {response.request.url}: {e}",
                url=str(response.request.url),
            ) from e

    async def _map_bounded(
        self, items: Iterable[T], fn: Callable[[T], Awaitable[R]]
    ) -> List[R]:
        """Run ``fn`` over ``items`` concurrently, keeping input order."""
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run(item: T) -> R:
            async with semaphore:
                return await fn(item)

        return list(await asyncio.gather(*(run(item) for item in items)))

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    async def fetch_transaction_info(
        self, provider: Provider, tx_id: str
    ) -> ProofInfo:
        return await self._get_parsed(
            provider, f"tx/{tx_id}", ProofInfo.from_dict
        )

    async def fetch_transaction_hex(
        self, provider: Provider, proof_info: ProofInfo
    ) -> str:
        return await self._get_text(provider, f"tx/{proof_info.txid}/hex")

    async def fetch_merkle_proof(
        self, provider: Provider, proof_info: ProofInfo
    ) -> MerkleProof:
        return await self._get_parsed(
            provider,
            f"tx/{proof_info.txid}/merkle-proof",
            MerkleProof.from_dict,
        )

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    async def fetch_tip_height(self, provider: Provider) -> int:
        text = await self._get_text(provider, "blocks/tip/height")
        try:
            return int(text)
        except ValueError as e:
            raise ProviderFetchError(
                f"unexpected tip height {text!r}",
                url=provider.url("blocks/tip/height"),
            ) from e

    async def fetch_block_hash(self, provider: Provider, height: int) -> str:
        return await self._get_text(provider, f"block-height/{height}")

    async def fetch_block_header(
        self, provider: Provider, block_hash: str
    ) -> str:
        return await self._get_text(provider, f"block/{block_hash}/header")

    async def fetch_parents_and_children_hashes(
        self, provider: Provider, proof_info: ProofInfo
    ) -> ParentsAndChildren:
        """
        Hashes of the blocks around the proof block.

        Parents cover ``[initial_height, block_height)`` and children
        ``(block_height, block_height + step]``.
        """
        height = _confirmed_height(proof_info)
        start = (
            height
            if proof_info.initial_height is None
            else proof_info.initial_height
        )
        step = DEFAULT_STEP if proof_info.step is None else proof_info.step

        async def block_hash(h: int) -> str:
            return await self.fetch_block_hash(provider, h)

        parents = await self._map_bounded(range(start, height), block_hash)
        children = await self._map_bounded(
            range(height + 1, height + step + 1), block_hash
        )
        return ParentsAndChildren(parents=parents, children=children)

    async def fetch_proof_block_header(
        self, provider: Provider, proof_info: ProofInfo
    ) -> str:
        block_hash = proof_info.status.block_hash
        if not block_hash:
            block_hash = await self.fetch_block_hash(
                provider, _confirmed_height(proof_info)
            )
        return await self.fetch_block_header(provider, block_hash)

    async def fetch_block_infos(
        self, provider: Provider, start_height: int, end_height: int
    ) -> BlockInfos:
        """Block descriptors for heights ``[start_height, end_height)``."""
        if end_height < start_height:
            raise ValueError(
                f"end height {end_height} is below start height {start_height}"
            )

        async def block_info(height: int) -> BlockInfo:
            block_hash = await self.fetch_block_hash(provider, height)
            return await self._get_parsed(
                provider, f"block/{block_hash}", BlockInfo.from_dict
            )

        blocks = await self._map_bounded(
            range(start_height, end_height), block_info
        )
        return BlockInfos(blocks=blocks)

    async def fetch_block_headers(
        self, provider: Provider, block_infos: BlockInfos
    ) -> List[str]:
        async def header(block: BlockInfo) -> str:
            return await self.fetch_block_header(provider, block.id)

        return await self._map_bounded(block_infos, header)
