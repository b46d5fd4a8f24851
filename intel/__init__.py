"""
defi.space Competitive Intelligence Package

Gathers balances and positions of competing agents and classifies their
strategies.
"""
from intel.classifier import StrategyClassifier
from intel.registry import ContractCategory, ContractRegistry
from intel.services.intelligence import IntelligenceService

__all__ = [
    "StrategyClassifier",
    "ContractCategory",
    "ContractRegistry",
    "IntelligenceService",
]
