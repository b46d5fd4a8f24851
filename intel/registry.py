"""
Contract address registry for the defi.space game.

Loads the static `contracts.json` mapping (category -> name -> address) and
keeps a reverse index per category so that address membership tests are
dictionary lookups.
"""
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from protocol.game import PAIR_PLACEMENTS, REACTOR_PLACEMENTS, Placement
from intel.exceptions import ConfigurationError
from intel.utils.web3 import normalize_address

logger = logging.getLogger(__name__)


class ContractCategory(str, Enum):
    """Top-level sections of contracts.json."""
    CORE = "core"
    RESOURCES = "resources"
    LP_PAIRS = "lpPairs"
    REACTORS = "reactors"
    AGENTS = "agents"


class ContractRegistry:
    """
    Address book for core contracts, resources, trading pairs, reactors
    and agent wallets.
    """

    def __init__(self, contracts: Mapping[str, Mapping[str, str]]):
        """
        Args:
            contracts: Mapping of category name to {contract name: address}
        """
        self._addresses: Dict[ContractCategory, Dict[str, str]] = {}
        self._reverse: Dict[ContractCategory, Dict[str, str]] = {}

        for category in ContractCategory:
            entries = contracts.get(category.value, {})
            if not isinstance(entries, Mapping):
                raise ConfigurationError(
                    f"Contract category {category.value} must map names to addresses"
                )
            self._addresses[category] = dict(entries)
            self._reverse[category] = {
                normalize_address(address): name
                for name, address in entries.items()
                if address
            }

        unknown = set(contracts) - {c.value for c in ContractCategory}
        if unknown:
            logger.warning(f"Ignoring unknown contract categories: {sorted(unknown)}")

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ContractRegistry":
        """Load a registry from a contracts.json file."""
        path = Path(path)
        if not path.is_file():
            raise ConfigurationError(f"Contracts file not found: {path}")

        try:
            with open(path, "r") as f:
                contracts = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid contracts file {path}: {e}")

        if not isinstance(contracts, dict):
            raise ConfigurationError(f"Contracts file {path} must contain an object")

        logger.info(f"Loaded contract registry from {path}")
        return cls(contracts)

    def get_category_addresses(self, category: ContractCategory) -> Dict[str, str]:
        """All name -> address entries of a category."""
        return dict(self._addresses[ContractCategory(category)])

    def get_address(self, category: ContractCategory, name: str) -> str:
        """
        Look up a single contract address.

        Raises:
            ConfigurationError: If the name is not configured
        """
        category = ContractCategory(category)
        address = self._addresses[category].get(name)
        if not address:
            raise ConfigurationError(
                f"Contract {name} not found in category {category.value}"
            )
        return address

    def category_of(self, address: str, category: ContractCategory) -> Optional[str]:
        """Name under which `address` is registered in `category`, if any."""
        if not address:
            return None
        return self._reverse[ContractCategory(category)].get(normalize_address(address))

    def belongs_to_category(
        self,
        address: str,
        category: ContractCategory,
        name: Optional[str] = None,
    ) -> bool:
        """
        Check whether an address is registered in a category.

        Args:
            address: Address to check
            category: Category to check against
            name: If given, the address must be registered under this name
        """
        found = self.category_of(address, category)
        if found is None:
            return False
        return name is None or found == name

    def pair_placement(self, pair_address: str) -> Optional[Placement]:
        """Path and tier of a trading pair, None for unknown pairs."""
        name = self.category_of(pair_address, ContractCategory.LP_PAIRS)
        return PAIR_PLACEMENTS.get(name) if name else None

    def reactor_placement(self, reactor_address: str) -> Optional[Placement]:
        """Path and tier of a reactor, None for unknown reactors."""
        name = self.category_of(reactor_address, ContractCategory.REACTORS)
        return REACTOR_PLACEMENTS.get(name) if name else None
