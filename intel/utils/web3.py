import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.contract import AsyncContract

from intel.utils.env import RPC_URL, CHAIN_ID

DEFAULT_ABI_PATH = Path(__file__).parent / "abis"
CHAIN_ID_TO_RPC = {
    CHAIN_ID: RPC_URL,
}

Abi = Union[List[Dict[str, Any]], Dict[str, Any]]


def normalize_address(address: str) -> str:
    """Lowercase, 0x-prefixed form used for lookups and indexer filters."""
    address = address.strip().lower()
    if not address.startswith("0x"):
        address = f"0x{address}"
    return address


@lru_cache(maxsize=None)
def _read_abi(path: Path) -> str:
    if not path.is_file():
        raise ValueError(f"Invalid ABI file path {path}")
    with open(path, "r") as f:
        return f.read()


class AsyncWeb3Helper:
    """Builds an AsyncWeb3 client for one chain and contract objects on it."""

    def __init__(self) -> None:
        self.web3: Optional[AsyncWeb3] = None
        self.rpc_url: Optional[str] = None

    @classmethod
    def make_web3(cls, chain_id: int, rpc_url: Optional[str] = None) -> "AsyncWeb3Helper":
        """
        Args:
            chain_id: Chain to connect to
            rpc_url: Endpoint override; defaults to the configured RPC of the chain
        """
        if rpc_url is None:
            if chain_id not in CHAIN_ID_TO_RPC:
                raise ValueError(f"Invalid chain id {chain_id}")
            rpc_url = CHAIN_ID_TO_RPC[chain_id]
        instance = cls()
        instance.rpc_url = rpc_url
        instance.web3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        return instance

    def load_abi(self, path: Path) -> Abi:
        """Load an ABI file, either a bare ABI list or a build artifact with an `abi` key"""
        abi_data = json.loads(_read_abi(Path(path)))
        if isinstance(abi_data, dict):
            return abi_data.get("abi", abi_data)
        return abi_data

    def make_contract(self, abi_path: Path, addr: str) -> AsyncContract:
        if self.web3 is None:
            raise ValueError("Web3 not initialized")
        return self.web3.eth.contract(
            address=Web3.to_checksum_address(addr), abi=self.load_abi(abi_path)
        )

    def make_contract_by_name(self, name: str, addr: str) -> AsyncContract:
        """Make a contract object from an ABI shipped in utils/abis"""
        return self.make_contract(DEFAULT_ABI_PATH / f"{name}.json", addr)
