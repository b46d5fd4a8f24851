"""
ERC-20 balance reads over web3.
"""
import logging
from typing import Optional

from web3 import Web3

from intel.exceptions import NetworkFetchError
from intel.utils.env import CHAIN_ID, RPC_URL
from intel.utils.web3 import AsyncWeb3Helper

logger = logging.getLogger(__name__)


class TokenBalanceReader:
    """Reads resource token balances of agent wallets."""

    def __init__(self, chain_id: int = CHAIN_ID, rpc_url: Optional[str] = RPC_URL):
        self.chain_id = chain_id
        self.rpc_url = rpc_url
        self.w3_helper = AsyncWeb3Helper.make_web3(chain_id, rpc_url)

    async def get_balance(self, token_address: str, owner_address: str) -> int:
        """
        Get the raw (smallest unit) balance of `owner_address` in a token.

        Raises:
            NetworkFetchError: If the RPC call fails or returns a non-integer
        """
        try:
            token = self.w3_helper.make_contract_by_name("ERC20", token_address)
            balance = await token.functions.balanceOf(
                Web3.to_checksum_address(owner_address)
            ).call()
        except Exception as e:
            logger.debug(f"balanceOf({owner_address}) on {token_address} failed: {e}")
            raise NetworkFetchError(
                f"Failed to read balance of {owner_address} in token {token_address}: {e}"
            ) from e

        if isinstance(balance, bool) or not isinstance(balance, int):
            raise NetworkFetchError(
                f"Token {token_address} returned a non-integer balance: {balance!r}"
            )
        return balance
