"""
Shared fixtures: a registry built from the sample contracts.json and
builders for indexer positions.
"""
import pytest

from intel.registry import ContractRegistry
from protocol.models import LiquidityPosition, StakePosition

CONTRACTS = {
    "core": {
        "router": "0x5FbDB2315678afecb367f032d93F642f64180aa3",
    },
    "resources": {
        "carbon": "0xDc64a140Aa3E981100a9becA4E685f962f0cF6C9",
        "neodymium": "0x5FC8d32690cc91D4c39d9d3abcBD16989F875707",
        "graphite": "0x0165878A594ca255338adfa4d48449f69242Eb8F",
        "dysprosium": "0xa513E6E4b8f2a923D98304ec87F64353C4D5C853",
        "graphene": "0x2279B7A0a67DB372996a5FaB50D91eAA73d2eBe6",
        "yttrium": "0x8A791620dd6260079BF849Dc5567aDC3F2FdC318",
        "helium3": "0x610178dA211FEF7D417bC0e6FeD39F05609AD788",
    },
    "lpPairs": {
        "wdCarbon": "0xB7f8BC63BbcaD18155201308C8f3540b07f84F5e",
        "wdGraphite": "0xA51c1fc2f0D1a1b8494Ed1FE312d7C3a78Ed91C0",
        "wdNeodymium": "0x0DCd1Bf9A1b36cE34237eEaFef220932846BCD82",
        "wdDysprosium": "0x9A676e781A523b5d0C0e43731313A708CB607508",
        "grapheneYttrium": "0x0B306BF915C4d645ff596e518fAf3F9669b97016",
        "wdHelium3": "0x959922bE3CAee4b8Cd9a407cc3ac1C251C2007B1",
    },
    "reactors": {
        "grp": "0x9A9f2CCfdE556A7E9Ff0848998Aa4a0CFD8863AE",
        "gph": "0x68B1D87F95878fE05B998F19b66F4baba5De1aed",
        "dy": "0x3Aa5ebB10DC797CAC828524e59A333d0A371443c",
        "y": "0xc6e7DF5E7b4f2A278906862b61205850344D4e7d",
        "he3": "0x59b670e9fA9D0A427751Af201D676719a970857b",
        "wdHe3": "0x4ed7c70F96B99c776995fB64377f0d4aB3B0e1C1",
        "he3Stake": "0x322813Fd9A801c5507c9de605d63CEA4f2CE6c44",
    },
    "agents": {
        "agent-1": "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
        "agent-2": "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC",
        "agent-3": "0x90F79bf6EB2c4f870365E785982E1f101E93b906",
    },
}

PAIRS = CONTRACTS["lpPairs"]
REACTORS = CONTRACTS["reactors"]
AGENTS = CONTRACTS["agents"]
RESOURCES = CONTRACTS["resources"]


@pytest.fixture
def registry():
    return ContractRegistry(CONTRACTS)


def make_lp(pair_name_or_address: str, liquidity: int = 1000, user: str = AGENTS["agent-1"]) -> LiquidityPosition:
    """LP position in a pair given by name in contracts.json, or by address."""
    pair_address = PAIRS.get(pair_name_or_address, pair_name_or_address)
    return LiquidityPosition(
        id=f"{user}-{pair_address}",
        pair_address=pair_address.lower(),
        user_address=user.lower(),
        liquidity=liquidity,
    )


def make_stake(reactor_name_or_address: str, amount: int = 1000, user: str = AGENTS["agent-1"]) -> StakePosition:
    """Stake in a reactor given by name in contracts.json, or by address."""
    reactor_address = REACTORS.get(reactor_name_or_address, reactor_name_or_address)
    return StakePosition(
        id=f"{user}-{reactor_address}",
        reactor_address=reactor_address.lower(),
        user_address=user.lower(),
        staked_amount=amount,
    )
