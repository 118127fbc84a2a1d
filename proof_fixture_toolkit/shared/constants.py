"""All constants for the project"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv
from hexbytes import HexBytes

load_dotenv()

DEFAULT_STEP = 10
DEFAULT_BLOCK_COUNT = 10

PACKAGE_FIXTURE_DIR = Path(__file__).resolve().parent.parent / "fixture"

TEST_DATA_SAMPLE_FILE = PACKAGE_FIXTURE_DIR / "test-data.sample.json"
TEST_DATA_FILE = (
    Path(os.getenv("PF_FIXTURE_DIR") or PACKAGE_FIXTURE_DIR)
    / "test-data.json"
)


class GlobalConstants:
    """Global class constants for the project"""

    DEFAULT_PROVIDER_URL = "https://mempool.space/testnet4/api"

    PROVIDER_URL = os.getenv("PF_PROVIDER_URL") or DEFAULT_PROVIDER_URL

    @staticmethod
    def get_provider_url() -> str:
        """Get the Esplora base URL, without a trailing slash"""
        return GlobalConstants.PROVIDER_URL.rstrip("/")


# camelCase keys used by the bridge test-suite fixtures
_SHARED_DATA_KEYS = {
    "depositor_evm_address": "depositorEvmAddress",
    "peg_in_timelock": "pegInTimelock",
    "peg_in_value": "pegInValue",
    "depositor_pub_key": "depositorPubKey",
    "withdrawer_evm_address": "withdrawerEvmAddress",
    "peg_out_value": "pegOutValue",
    "peg_out_timestamp": "pegOutTimestamp",
    "withdrawer_pub_key": "withdrawerPubKey",
    "operator_pub_key": "operatorPubKey",
    "n_of_n_pub_key": "nOfNPubKey",
}


@dataclass(frozen=True)
class SharedTestFixture:
    """Fixed identities used to build reproducible peg-in/peg-out scenarios."""

    depositor_evm_address: str
    peg_in_timelock: int
    peg_in_value: int
    depositor_pub_key: str
    withdrawer_evm_address: str
    peg_out_value: int
    peg_out_timestamp: int
    withdrawer_pub_key: str
    operator_pub_key: str
    n_of_n_pub_key: str

    def pub_key_bytes(self, name: str) -> HexBytes:
        """Return one of the ``*_pub_key`` fields as bytes."""
        if not name.endswith("_pub_key") or not hasattr(self, name):
            raise KeyError(f"unknown public key field: {name}")
        return HexBytes(getattr(self, name))

    def to_dict(self) -> Dict[str, Any]:
        return {
            _SHARED_DATA_KEYS[f.name]: getattr(self, f.name)
            for f in fields(self)
        }


SHARED_DATA = SharedTestFixture(
    depositor_evm_address="0xDDdDddDdDdddDDddDDddDDDDdDdDDdDDdDDDDDDd",
    peg_in_timelock=1,
    peg_in_value=131072,
    depositor_pub_key="0xedf074e2780407ed6ff9e291b8617ee4b4b8d7623e85b58318666f33a422301b",
    withdrawer_evm_address="0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE",
    peg_out_value=131072,
    peg_out_timestamp=1722328130,
    withdrawer_pub_key="0x02f80c9d1ef9ff640df2058c431c282299f48424480d34f1bade2274746fb4df8b",
    operator_pub_key="0x03484db4a2950d63da8455a1b705b39715e4075dd33511d0c7e3ce308c93449deb",
    n_of_n_pub_key="0x8b839569cde368894237913fe4fbd25d75eaf1ed019a39d479e693dac35be19e",
)
