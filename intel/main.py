"""
Main entry point for the defi.space competitive intelligence tool.
"""
import sys
import json
import asyncio
import logging
import argparse
from typing import Any, Optional

from intel.classifier import StrategyClassifier
from intel.exceptions import IntelError
from intel.registry import ContractCategory, ContractRegistry
from intel.repositories.indexer import GraphQLIndexerClient
from intel.services.chain import TokenBalanceReader
from intel.services.intelligence import IntelligenceService
from intel.utils.env import (
    CHAIN_ID,
    CONTRACTS_FILE,
    END_GAME_THRESHOLD,
    INDEXER_URL,
    LATE_GAME_THRESHOLD,
    RPC_URL,
    TARGET_RESOURCE,
)
from protocol.numbers import format_token_balance

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler('intel.log'),
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='defi.space competitive intelligence')

    parser.add_argument('--contracts', type=str, default=CONTRACTS_FILE, help='Path to contracts.json')
    parser.add_argument('--rpc-url', type=str, default=RPC_URL, help='JSON-RPC endpoint')
    parser.add_argument('--chain-id', type=int, default=CHAIN_ID, help='Chain id')
    parser.add_argument('--indexer-url', type=str, default=INDEXER_URL, help='GraphQL indexer endpoint')
    parser.add_argument('--json', action='store_true', help='Print machine-readable JSON')

    subparsers = parser.add_subparsers(dest='command', required=True)

    report = subparsers.add_parser('report', help='Classify the strategies of competing agents')
    report.add_argument('--observer', type=str, help='Agent id to exclude from the report (the observing agent)')

    subparsers.add_parser('rank', help='Rank agents by target resource balance')

    compare = subparsers.add_parser('compare', help='Compare positions of two agents')
    compare.add_argument('current', type=str, help='Agent id or address of the observing agent')
    compare.add_argument('target', type=str, help='Agent id or address of the rival')

    pool = subparsers.add_parser('pool', help='Show indexer state of a trading pair')
    pool.add_argument('pair', type=str, help='Pair name from contracts.json or pair address')

    subparsers.add_parser('reactors', help='List all reactors known to the indexer')

    return parser


def resolve_address(registry: ContractRegistry, category: ContractCategory, value: str) -> str:
    """Accept either a registered name or a raw address."""
    addresses = registry.get_category_addresses(category)
    return addresses.get(value, value)


def _print_json(payload: Any):
    print(json.dumps(payload, indent=2))


async def run(args: argparse.Namespace) -> int:
    registry = ContractRegistry.from_file(args.contracts)
    reader = TokenBalanceReader(chain_id=args.chain_id, rpc_url=args.rpc_url)

    async with GraphQLIndexerClient(url=args.indexer_url) as indexer:
        service = IntelligenceService(registry, reader, indexer, target_resource=TARGET_RESOURCE)

        if args.command == 'report':
            classifier = StrategyClassifier(
                registry,
                target_resource=TARGET_RESOURCE,
                end_game_threshold=END_GAME_THRESHOLD,
                late_game_threshold=LATE_GAME_THRESHOLD,
            )
            intel = await service.get_competitive_intelligence(observer_id=args.observer)
            analyses = classifier.analyze_competitors(intel)
            if args.json:
                _print_json({agent_id: a.model_dump(mode='json') for agent_id, a in analyses.items()})
            else:
                for analysis in analyses.values():
                    print(analysis.summary())
                    print()

        elif args.command == 'rank':
            ranking = await service.rank_agents_by_target()
            if args.json:
                _print_json([r.model_dump(mode='json') for r in ranking])
            else:
                for position, agent in enumerate(ranking, start=1):
                    print(f"{position}. {agent.agent_id} {agent.address} "
                          f"{format_token_balance(agent.balance)} {TARGET_RESOURCE}")
            missing = len(registry.get_category_addresses(ContractCategory.AGENTS)) - len(ranking)
            if missing:
                logger.warning(f"{missing} agent(s) missing from ranking, see log for details")

        elif args.command == 'compare':
            comparison = await service.compare_agent_positions(
                resolve_address(registry, ContractCategory.AGENTS, args.current),
                resolve_address(registry, ContractCategory.AGENTS, args.target),
            )
            if args.json:
                _print_json(comparison.model_dump(mode='json'))
            else:
                for label, side in (('Current', comparison.current_agent), ('Target', comparison.target_agent)):
                    print(f"{label} agent {side.address}: "
                          f"{len(side.liquidity_positions)} LP positions, "
                          f"{len(side.stake_positions)} stakes")

        elif args.command == 'pool':
            pair_address = resolve_address(registry, ContractCategory.LP_PAIRS, args.pair)
            info = await indexer.get_pool_info(pair_address)
            if info is None:
                logger.error(f"Pair {args.pair} not found in indexer")
                return 1
            _print_json(info)

        elif args.command == 'reactors':
            reactors = await indexer.get_all_reactors()
            if args.json:
                _print_json(reactors)
            else:
                for reactor in reactors:
                    name = registry.category_of(reactor.get('address', ''), ContractCategory.REACTORS)
                    print(f"{reactor.get('reactorIndex')}: {name or reactor.get('address')} "
                          f"staked={reactor.get('totalStaked')}")

    return 0


def main(argv: Optional[list] = None):
    """Run one CLI command."""
    args = build_parser().parse_args(argv)
    logger.info(f"Running {args.command}")

    try:
        exit_code = asyncio.run(run(args))
    except IntelError as e:
        logger.error(f"{args.command} failed: {e}")
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == '__main__':
    main()
