"""
Type definitions for proof fixtures.

Provider payloads are only partly interpreted here: each record declares the
fields the loaders rely on and keeps everything else in an ``extra`` map so
that a cache file round-trips without losing data.
"""

from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    Iterator,
    List,
    NamedTuple,
    Optional,
    Protocol,
    TYPE_CHECKING,
)

if TYPE_CHECKING:
    from proof_fixture_toolkit.proofs.api import Provider


def _require(data: Any, key: str, kind: type) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"expected an object, got {type(data).__name__}")
    if key not in data:
        raise ValueError(f"missing field '{key}'")
    value = data[key]
    # bool is an int subclass, never accept it as a height or position
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(
            f"field '{key}' should be {kind.__name__}, "
            f"got {type(value).__name__}"
        )
    return value


def _optional_int(data: Dict[str, Any], key: str) -> Optional[int]:
    if data.get(key) is None:
        return None
    return _require(data, key, int)


def _ordered_dict(
    source_keys: List[str],
    core: Dict[str, Any],
    extra: Dict[str, Any],
    default_order: List[str],
) -> Dict[str, Any]:
    """
    Serialize a record the way it was read.

    Keys present in the source come first, in source order, nulls included.
    Keys set afterwards follow in ``default_order``; unset core fields are
    left out.
    """
    data: Dict[str, Any] = {}
    for key in source_keys:
        if key in core:
            data[key] = core[key]
        elif key in extra:
            data[key] = extra[key]
    for key in default_order:
        if key in data:
            continue
        if key in extra:
            data[key] = extra[key]
        elif core.get(key) is not None:
            data[key] = core[key]
    return data


# =============================================================================
# TRANSACTION TYPES
# =============================================================================

_STATUS_FIELDS = ("confirmed", "block_height", "block_hash", "block_time")


@dataclass
class TxStatus:
    """Confirmation status of a transaction."""

    confirmed: bool
    block_height: Optional[int] = None  # None while unconfirmed
    block_hash: Optional[str] = None
    block_time: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    source_keys: List[str] = field(
        default_factory=list, repr=False, compare=False
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TxStatus":
        if not isinstance(data, dict):
            raise ValueError("field 'status' should be an object")
        block_height = _optional_int(data, "block_height")
        return cls(
            confirmed=bool(data.get("confirmed", block_height is not None)),
            block_height=block_height,
            block_hash=data.get("block_hash"),
            block_time=_optional_int(data, "block_time"),
            extra={k: v for k, v in data.items() if k not in _STATUS_FIELDS},
            source_keys=list(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        # an inferred ``confirmed`` is only written for records built in code
        core_order = list(
            _STATUS_FIELDS[1:] if self.source_keys else _STATUS_FIELDS
        )
        return _ordered_dict(
            self.source_keys,
            {key: getattr(self, key) for key in _STATUS_FIELDS},
            self.extra,
            core_order + list(self.extra),
        )


_PROOF_INFO_FIELDS = ("txid", "status", "step", "initial_height")


@dataclass
class ProofInfo:
    """
    Metadata for the transaction whose inclusion proof is being built.

    Attributes:
        txid: Transaction id (hex)
        status: Confirmation status, carries the containing block height
        step: Number of blocks after the proof block used as children
        initial_height: Lowest block height the proof may sit at
        extra: Provider fields not interpreted here (vin, vout, fee, ...)
    """

    txid: str
    status: TxStatus
    step: Optional[int] = None
    initial_height: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    source_keys: List[str] = field(
        default_factory=list, repr=False, compare=False
    )

    @property
    def block_height(self) -> Optional[int]:
        return self.status.block_height

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProofInfo":
        """Build from a provider payload or a cache file.

        Raises:
            ValueError: if the core fields are missing or mistyped
        """
        return cls(
            txid=_require(data, "txid", str),
            status=TxStatus.from_dict(_require(data, "status", dict)),
            step=_optional_int(data, "step"),
            initial_height=_optional_int(data, "initial_height"),
            extra={
                k: v for k, v in data.items() if k not in _PROOF_INFO_FIELDS
            },
            source_keys=list(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize in source key order; fresh step/initial_height go last."""
        return _ordered_dict(
            self.source_keys,
            {
                "txid": self.txid,
                "status": self.status.to_dict(),
                "step": self.step,
                "initial_height": self.initial_height,
            },
            self.extra,
            ["txid", *self.extra, "status", "step", "initial_height"],
        )


@dataclass
class MerkleProof:
    """Merkle inclusion path of a transaction inside its block."""

    block_height: int
    merkle: List[str]  # Sibling hashes, leaf to root
    pos: int  # Transaction index in the block

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MerkleProof":
        return cls(
            block_height=_require(data, "block_height", int),
            merkle=list(_require(data, "merkle", list)),
            pos=_require(data, "pos", int),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "block_height": self.block_height,
            "merkle": list(self.merkle),
            "pos": self.pos,
        }


class ParentsAndChildren(NamedTuple):
    """Block hashes before and after the proof block."""

    parents: List[str]  # [initial_height, block_height)
    children: List[str]  # (block_height, block_height + step]


# =============================================================================
# BLOCK TYPES
# =============================================================================


@dataclass
class BlockInfo:
    """A single block descriptor as returned by the provider."""

    id: str  # Block hash
    height: int
    extra: Dict[str, Any] = field(default_factory=dict)
    source_keys: List[str] = field(
        default_factory=list, repr=False, compare=False
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BlockInfo":
        return cls(
            id=_require(data, "id", str),
            height=_require(data, "height", int),
            extra={
                k: v for k, v in data.items() if k not in ("id", "height")
            },
            source_keys=list(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _ordered_dict(
            self.source_keys,
            {"id": self.id, "height": self.height},
            self.extra,
            ["id", "height", *self.extra],
        )


@dataclass
class BlockInfos:
    """Ordered block descriptors for a height range ``[start, end)``."""

    blocks: List[BlockInfo] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.blocks)

    def __iter__(self) -> Iterator[BlockInfo]:
        return iter(self.blocks)

    def __getitem__(self, index: int) -> BlockInfo:
        return self.blocks[index]

    @property
    def heights(self) -> List[int]:
        return [block.height for block in self.blocks]

    @classmethod
    def from_list(cls, data: List[Dict[str, Any]]) -> "BlockInfos":
        if not isinstance(data, list):
            raise ValueError(
                f"expected an array of blocks, got {type(data).__name__}"
            )
        return cls(blocks=[BlockInfo.from_dict(item) for item in data])

    def to_list(self) -> List[Dict[str, Any]]:
        return [block.to_dict() for block in self.blocks]


# =============================================================================
# AGGREGATES
# =============================================================================


@dataclass
class ProofArtifacts:
    """Everything a proof-verification test needs for one transaction."""

    proof_info: ProofInfo
    raw_tx: str
    merkle_proof: MerkleProof
    parents: List[str]
    children: List[str]
    header: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proofInfo": self.proof_info.to_dict(),
            "rawTx": self.raw_tx,
            "merkleProof": self.merkle_proof.to_dict(),
            "parents": list(self.parents),
            "children": list(self.children),
            "header": self.header,
        }


@dataclass
class BlockArtifacts:
    """Block descriptors with their headers, in the same order."""

    block_infos: BlockInfos
    headers: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "blockInfos": self.block_infos.to_list(),
            "headers": list(self.headers),
        }


# =============================================================================
# COLLABORATOR
# =============================================================================


class ProofApiClient(Protocol):
    """Raw provider fetches consumed by the fixture loaders."""

    async def fetch_transaction_info(
        self, provider: "Provider", tx_id: str
    ) -> ProofInfo: ...

    async def fetch_transaction_hex(
        self, provider: "Provider", proof_info: ProofInfo
    ) -> str: ...

    async def fetch_merkle_proof(
        self, provider: "Provider", proof_info: ProofInfo
    ) -> MerkleProof: ...

    async def fetch_parents_and_children_hashes(
        self, provider: "Provider", proof_info: ProofInfo
    ) -> ParentsAndChildren: ...

    async def fetch_proof_block_header(
        self, provider: "Provider", proof_info: ProofInfo
    ) -> str: ...

    async def fetch_block_infos(
        self, provider: "Provider", start_height: int, end_height: int
    ) -> BlockInfos: ...

    async def fetch_block_headers(
        self, provider: "Provider", block_infos: BlockInfos
    ) -> List[str]: ...
