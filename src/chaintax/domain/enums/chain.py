from enum import Enum


class Chain(str, Enum):
    """Chains served by the Nodit Web3 Data API. Values lowercase to match its URL path."""

    ETHEREUM = "ethereum"
    BSC = "bsc"
    TRON = "tron"
    ARBITRUM = "arbitrum"
    POLYGON = "polygon"
    OPTIMISM = "optimism"
