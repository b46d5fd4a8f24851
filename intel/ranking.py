"""
Ranking of agents by their target resource balance.
"""
import asyncio
import logging
from typing import Awaitable, Callable, List, Mapping

from protocol.models import RankedAgent

logger = logging.getLogger(__name__)

BalanceFetcher = Callable[[str], Awaitable[int]]


async def rank_agents_by_target(
    agent_addresses: Mapping[str, str],
    fetch_balance: BalanceFetcher,
) -> List[RankedAgent]:
    """
    Rank agents by balance, highest first.

    Balances are fetched concurrently. Agents whose fetch failed are left
    out of the result and logged; callers can compare the result length
    with `agent_addresses` to detect them. Equal balances are ordered by
    agent id.

    Args:
        agent_addresses: Mapping of agent id to wallet address
        fetch_balance: Coroutine function returning the balance of an address

    Returns:
        Ranked agents
    """
    agent_ids = list(agent_addresses)
    results = await asyncio.gather(
        *(fetch_balance(agent_addresses[agent_id]) for agent_id in agent_ids),
        return_exceptions=True,
    )

    ranked = []
    for agent_id, result in zip(agent_ids, results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.warning(f"Excluding {agent_id} from ranking: {result}")
            continue
        if isinstance(result, bool) or not isinstance(result, int):
            logger.warning(f"Excluding {agent_id} from ranking: balance {result!r}")
            continue
        ranked.append(
            RankedAgent(
                agent_id=agent_id,
                address=agent_addresses[agent_id],
                balance=result,
            )
        )

    ranked.sort(key=lambda r: (-r.balance, r.agent_id))

    if len(ranked) < len(agent_ids):
        logger.info(f"Ranked {len(ranked)} of {len(agent_ids)} agents")
    return ranked
