"""
Resource topology of the defi.space game.

Two mutually exclusive production paths lead to Helium-3:

    Graphene path: carbon -> graphite -> graphene
    Yttrium path:  neodymium -> dysprosium -> yttrium

Every trading pair and reactor in `contracts.json` is placed on a path
(or on none, for the shared He3 stage) and on a tier.
"""
from enum import Enum
from typing import Dict, NamedTuple, Optional, Tuple


class ResourcePath(str, Enum):
    """Resource conversion chain an agent can specialize in."""
    GRAPHENE = "Graphene"
    YTTRIUM = "Yttrium"


class Tier(str, Enum):
    """Tier of a resource, or of the pair/reactor producing it."""
    BASE = "base"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    SINGLE_STAKE = "single_stake"


class Placement(NamedTuple):
    path: Optional[ResourcePath]
    tier: Tier


TARGET_RESOURCE = "helium3"

PATH_RESOURCES: Dict[ResourcePath, Tuple[str, ...]] = {
    ResourcePath.GRAPHENE: ("carbon", "graphite", "graphene"),
    ResourcePath.YTTRIUM: ("neodymium", "dysprosium", "yttrium"),
}

# Last resource of each path, the inputs of the He3 pair
ADVANCED_PATH_RESOURCES: Dict[ResourcePath, str] = {
    ResourcePath.GRAPHENE: "graphene",
    ResourcePath.YTTRIUM: "yttrium",
}

# Faucet resources feeding each path
BASE_PATH_RESOURCES: Dict[ResourcePath, str] = {
    ResourcePath.GRAPHENE: "carbon",
    ResourcePath.YTTRIUM: "neodymium",
}

# Keys are names in the "lpPairs" category of contracts.json
PAIR_PLACEMENTS: Dict[str, Placement] = {
    "wdCarbon": Placement(ResourcePath.GRAPHENE, Tier.BASE),
    "wdGraphite": Placement(ResourcePath.GRAPHENE, Tier.INTERMEDIATE),
    "wdNeodymium": Placement(ResourcePath.YTTRIUM, Tier.BASE),
    "wdDysprosium": Placement(ResourcePath.YTTRIUM, Tier.INTERMEDIATE),
    "grapheneYttrium": Placement(None, Tier.ADVANCED),
    "wdHelium3": Placement(None, Tier.ADVANCED),
}

# Keys are names in the "reactors" category of contracts.json
REACTOR_PLACEMENTS: Dict[str, Placement] = {
    "grp": Placement(ResourcePath.GRAPHENE, Tier.BASE),
    "gph": Placement(ResourcePath.GRAPHENE, Tier.INTERMEDIATE),
    "dy": Placement(ResourcePath.YTTRIUM, Tier.BASE),
    "y": Placement(ResourcePath.YTTRIUM, Tier.INTERMEDIATE),
    "he3": Placement(None, Tier.ADVANCED),
    "wdHe3": Placement(None, Tier.ADVANCED),
    "he3Stake": Placement(None, Tier.SINGLE_STAKE),
}

# Thresholds on the raw (18 decimals) target resource balance
END_GAME_THRESHOLD = 800_000 * 10**18
LATE_GAME_THRESHOLD = 500_000 * 10**18
