"""
Client for the defi.space position indexer.

The indexer exposes liquidity and stake positions, pairs and reactors over
GraphQL. Transport failures are retried with exponential backoff; any
other failure surfaces as NetworkFetchError.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from functools import wraps
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from protocol.models import LiquidityPosition, StakePosition
from intel.exceptions import NetworkFetchError
from intel.repositories.queries import (
    GET_ALL_REACTORS,
    GET_POOL_INFO,
    GET_REACTOR_INDEX_BY_LP_TOKEN,
    GET_REACTOR_INFO,
    GET_USER_LIQUIDITY_POSITIONS,
    GET_USER_STAKE_POSITIONS,
)
from intel.utils.env import FETCH_MAX_RETRIES, INDEXER_TIMEOUT, INDEXER_URL
from intel.utils.web3 import normalize_address

logger = logging.getLogger(__name__)


class IndexerClient(ABC):
    """
    Abstract source of agent positions.

    Lets the intelligence service work against the GraphQL indexer or any
    other backend (fixtures, caches) without being coupled to one.
    """

    @abstractmethod
    async def get_liquidity_positions(self, user_address: str) -> List[LiquidityPosition]:
        """Fetch all LP positions held by an address."""
        pass

    @abstractmethod
    async def get_stake_positions(self, user_address: str) -> List[StakePosition]:
        """Fetch all reactor stakes held by an address."""
        pass


# Retry configuration
MAX_RETRIES = FETCH_MAX_RETRIES
RETRY_DELAY_BASE = 1.0  # Base delay in seconds (exponential backoff)
RETRYABLE_ERRORS = (
    httpx.TransportError,
    ConnectionError,
    TimeoutError,
)


def retry_on_fetch_error(func):
    """
    Decorator that retries async indexer requests on transient failures.
    Uses exponential backoff.
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        last_exception = None
        for attempt in range(MAX_RETRIES):
            try:
                return await func(*args, **kwargs)
            except RETRYABLE_ERRORS as e:
                last_exception = e
                if attempt + 1 == MAX_RETRIES:
                    break
                delay = RETRY_DELAY_BASE * (2**attempt)
                logger.warning(
                    f"Indexer request failed (attempt {attempt + 1}/{MAX_RETRIES}): {e}. "
                    f"Retrying in {delay:.1f}s..."
                )
                await asyncio.sleep(delay)
        logger.error(f"Indexer request failed after {MAX_RETRIES} attempts")
        raise NetworkFetchError(
            f"Indexer unreachable after {MAX_RETRIES} attempts: {last_exception}"
        ) from last_exception

    return wrapper


class GraphQLIndexerClient(IndexerClient):
    """
    httpx implementation of the IndexerClient interface.

    Addresses are normalized before being used as query filters because
    the indexer stores them lowercase.
    """

    def __init__(
        self,
        url: str = INDEXER_URL,
        timeout: float = INDEXER_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self.client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )

    async def close(self):
        await self.client.aclose()

    async def __aenter__(self) -> "GraphQLIndexerClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    @retry_on_fetch_error
    async def execute_query(
        self, query: str, variables: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Run a GraphQL query and return its `data` object.

        Raises:
            NetworkFetchError: On HTTP errors, GraphQL errors or a payload
                without data
        """
        try:
            response = await self.client.post(
                self.url, json={"query": query, "variables": variables or {}}
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise NetworkFetchError(
                f"Indexer returned HTTP {e.response.status_code}"
            ) from e
        except ValueError as e:
            raise NetworkFetchError(f"Indexer returned invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise NetworkFetchError("Indexer response is not a JSON object")
        if payload.get("errors"):
            logger.error(f"GraphQL error: {payload['errors']}")
            raise NetworkFetchError(f"GraphQL query failed: {payload['errors']}")

        data = payload.get("data")
        if not isinstance(data, dict):
            raise NetworkFetchError("Indexer response has no data")
        return data

    async def _fetch_rows(
        self, query: str, field: str, variables: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        data = await self.execute_query(query, variables)
        rows = data.get(field) or []
        if not isinstance(rows, list):
            raise NetworkFetchError(f"Indexer field '{field}' is not a list")
        return rows

    async def get_liquidity_positions(self, user_address: str) -> List[LiquidityPosition]:
        rows = await self._fetch_rows(
            GET_USER_LIQUIDITY_POSITIONS,
            "liquidityPosition",
            {"userAddress": normalize_address(user_address)},
        )
        try:
            return [LiquidityPosition.model_validate(row) for row in rows]
        except ValidationError as e:
            raise NetworkFetchError(f"Malformed liquidity position: {e}") from e

    async def get_stake_positions(self, user_address: str) -> List[StakePosition]:
        rows = await self._fetch_rows(
            GET_USER_STAKE_POSITIONS,
            "userStake",
            {"userAddress": normalize_address(user_address)},
        )
        try:
            return [StakePosition.model_validate(row) for row in rows]
        except ValidationError as e:
            raise NetworkFetchError(f"Malformed stake position: {e}") from e

    async def get_pool_info(self, pair_address: str) -> Optional[Dict[str, Any]]:
        """Pair state, or None when the indexer does not know the pair."""
        rows = await self._fetch_rows(
            GET_POOL_INFO, "pair", {"address": normalize_address(pair_address)}
        )
        return rows[0] if rows else None

    async def get_reactor_info(self, reactor_address: str) -> Optional[Dict[str, Any]]:
        """Reactor state with its latest reward event, or None."""
        rows = await self._fetch_rows(
            GET_REACTOR_INFO, "reactor", {"address": normalize_address(reactor_address)}
        )
        return rows[0] if rows else None

    async def get_all_reactors(self) -> List[Dict[str, Any]]:
        return await self._fetch_rows(GET_ALL_REACTORS, "reactor")

    async def get_reactor_index_by_lp_token(self, lp_token_address: str) -> Optional[int]:
        rows = await self._fetch_rows(
            GET_REACTOR_INDEX_BY_LP_TOKEN,
            "reactor",
            {"lpTokenAddress": normalize_address(lp_token_address)},
        )
        if not rows or rows[0].get("reactorIndex") is None:
            return None
        return int(rows[0]["reactorIndex"])
