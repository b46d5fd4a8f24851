import os
from pathlib import Path
from typing import TypeVar, Type, Optional

from dotenv import load_dotenv

from protocol import game

load_dotenv()

T = TypeVar("T")


def get_env_variable(name: str, type_: Type[T], default: Optional[T]) -> T:
    """Type-safe wrapper for `os.getenv`.

    Args:
        name (str): Name of the environment variable.
        type_ (Type[T]): Type of the environment variable.
        default (T): Default value if the environment variable is not set.

    Returns:
        T: Value of the environment variable.

    Usage:
        ```python
        from intel.utils.env import get_env_variable

        # Get a string environment variable with a default value.
        get_env_variable("INDEXER_URL", str, "http://localhost:8080/v1/graphql")

        # Get an integer environment variable with a default value.
        get_env_variable("CHAIN_ID", int, 31337)
        ```
    """

    try:
        value = os.getenv(name, default)
        return type_.__call__(value)
    except ValueError:
        raise ValueError(
            f"Environment variable '{name}' is not of type '{type_.__name__}'."
        )
    except TypeError:
        raise TypeError(
            f"Environment variable '{name}' is not set and has no default value."
        )


ROOT_DIR = Path(__file__).resolve().parents[2]

# Chain configuration
RPC_URL = get_env_variable(
    name="RPC_URL",
    type_=str,
    default="http://localhost:8545",
)
CHAIN_ID = get_env_variable(
    name="CHAIN_ID",
    type_=int,
    default=31337,
)

# Indexer configuration
INDEXER_URL = get_env_variable(
    name="INDEXER_URL",
    type_=str,
    default="http://localhost:8080/v1/graphql",
)
INDEXER_TIMEOUT = get_env_variable(
    name="INDEXER_TIMEOUT",
    type_=float,
    default=30.0,
)
FETCH_MAX_RETRIES = get_env_variable(
    name="FETCH_MAX_RETRIES",
    type_=int,
    default=3,
)

# Game configuration
CONTRACTS_FILE = get_env_variable(
    name="CONTRACTS_FILE",
    type_=str,
    default=str(ROOT_DIR / "contracts.json"),
)
TARGET_RESOURCE = get_env_variable(
    name="TARGET_RESOURCE",
    type_=str,
    default=game.TARGET_RESOURCE,
)
END_GAME_THRESHOLD = get_env_variable(
    name="END_GAME_THRESHOLD",
    type_=int,
    default=game.END_GAME_THRESHOLD,
)
LATE_GAME_THRESHOLD = get_env_variable(
    name="LATE_GAME_THRESHOLD",
    type_=int,
    default=game.LATE_GAME_THRESHOLD,
)
