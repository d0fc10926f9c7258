"""
Chain registry for aggregator contract addresses.

Multicall3 lives at the same address on almost every EVM chain; the
exceptions are listed in AGGREGATOR_OVERRIDES.

Example:
    >>> get_aggregator_address(Networks.ETHEREUM_MAINNET)
    '0xcA11bde05977b3631167028862bE2a173976CA11'
"""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, Optional, Union

from evm_multicall.constants import MULTICALL3_ADDRESS
from evm_multicall.errors import UnsupportedNetworkError
from evm_multicall.utils.validation import validate_address

__all__ = [
    "Networks",
    "AGGREGATOR_OVERRIDES",
    "get_aggregator_address",
    "is_supported_network",
]


class Networks(IntEnum):
    AMOY = 80002
    ARBITRUM = 42161
    ARBITRUM_SEPOLIA = 421614
    ASTAR = 592
    AURORA = 1313161554
    AVALANCHE = 43114
    AVALANCHE_FUJI = 43113
    BASE = 8453
    BASE_TESTNET = 84531
    BLAST = 81457
    BLAST_SEPOLIA = 168587773
    BOBA = 288
    BOB = 60808
    BSC = 56
    BSC_TESTNET = 97
    CELO = 42220
    CELO_ALFAJORES = 44787
    CRONOS = 25
    ENERGI_MAINNET = 39797
    ENERGI_TESTNET = 49797
    ETHEREUM_MAINNET = 1
    ETHEREUM_SEPOLIA = 11155111
    ETHERLITE = 111
    EVMOS = 9001
    EVMOS_TESTNET = 9000
    FANTOM = 250
    FANTOM_TESTNET = 4002
    FLARE = 14
    FUSE = 122
    GODWOKEN = 71402
    GODWOKEN_TESTNET = 71401
    HARMONY = 1666600000
    HECO = 128
    KLAYTN = 8217
    KOVAN = 42
    KOVAN_OPTIMISM = 69
    KCC = 321
    LINEA = 59144
    LINEA_TESTNET = 59140
    MANTA_PACIFIC = 169
    MANTLE = 5000
    MANTLE_TESTNET = 5001
    METIS = 1088
    MILKOMEDA = 2001
    MODE = 34443
    MODE_TESTNET = 919
    MOONBASE_ALPHA_TESTNET = 1287
    MOONBEAM = 1284
    MOONRIVER = 1285
    OPTIMISM = 10
    OPTIMISM_GOERLI = 420
    OPTIMISM_SEPOLIA = 11155420
    OASIS = 26863
    OKC = 66
    POLYGON = 137
    POLYGON_MUMBAI = 80001
    POLYGON_ZKEVM = 1101
    POLYGON_ZKEVM_TESTNET = 1442
    PULSECHAIN = 369
    PULSECHAIN_TESTNET = 943
    RINKEBY_ARBITRUM = 421611
    RSK = 30
    RSK_TESTNET = 31
    SAPPHIRE = 23294
    SCROLL = 534352
    SCROLL_SEPOLIA = 534351
    SHIBARIUM = 109
    SONGBIRD_CANARY_NETWORK = 19
    THUNDERCORE = 108
    THUNDERCORE_TESTNET = 18
    XDAI = 100
    XDAI_TESTNET = 10200
    ZKSYNC_ERA = 324
    ZKSYNC_ERA_SEPOLIA_TESTNET = 300
    ZKSYNC_ERA_TESTNET = 280
    ZORA = 7777777
    ZORA_TESTNET = 999999999


# Chains where the aggregator is not the canonical Multicall3 deployment
AGGREGATOR_OVERRIDES: Dict[Networks, str] = {
    Networks.MODE_TESTNET: "0xBAba8373113Fb7a68f195deF18732e01aF8eDfCF",
    Networks.ETHERLITE: "0x21681750D7ddCB8d1240eD47338dC984f94AF2aC",
    Networks.ZKSYNC_ERA: "0xF9cda624FBC7e059355ce98a31693d299FACd963",
    Networks.ZKSYNC_ERA_TESTNET: "0xF9cda624FBC7e059355ce98a31693d299FACd963",
    Networks.ZKSYNC_ERA_SEPOLIA_TESTNET: "0xF9cda624FBC7e059355ce98a31693d299FACd963",
    Networks.SHIBARIUM: "0xd1727fC8F78aBA7DD6294f6033D74c72Ccd3D3B0",
}


def is_supported_network(chain_id: Union[int, Networks]) -> bool:
    try:
        Networks(chain_id)
    except ValueError:
        return False
    return True


def get_aggregator_address(
    chain_id: Optional[Union[int, Networks]],
    custom_address: Optional[str] = None,
) -> str:
    """Resolve the aggregator contract address for a chain.

    Args:
        chain_id: Chain id of the active network
        custom_address: Address of a self-deployed aggregator; always wins

    Returns:
        Checksummed aggregator address

    Raises:
        UnsupportedNetworkError: If the chain is unknown and no custom
            address was supplied
        ConfigurationError: If custom_address is malformed
    """
    if custom_address:
        return validate_address(custom_address, "aggregator_address")

    if chain_id is None or not is_supported_network(chain_id):
        raise UnsupportedNetworkError(chain_id)

    return AGGREGATOR_OVERRIDES.get(Networks(chain_id), MULTICALL3_ADDRESS)
