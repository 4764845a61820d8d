from __future__ import annotations

from enum import Enum
from typing import List

from .errors import ValidationError
from .types import QueryKind


class Chain(str, Enum):
    """Tatum 支援的區塊鏈網路。"""

    ETHEREUM = "ethereum"
    ETHEREUM_SEPOLIA = "ethereum-sepolia"
    ETHEREUM_HOLESKY = "ethereum-holesky"
    CELO = "celo"
    CELO_TESTNET = "celo-testnet"
    BSC = "bsc"
    BSC_TESTNET = "bsc-testnet"
    POLYGON = "polygon"
    TEZOS = "tezos"
    EON = "eon"
    CHILIZ = "chiliz"


_SHARED_CHAINS = (
    Chain.ETHEREUM,
    Chain.ETHEREUM_SEPOLIA,
    Chain.CELO,
    Chain.CELO_TESTNET,
    Chain.BSC,
    Chain.BSC_TESTNET,
    Chain.POLYGON,
    Chain.EON,
    Chain.CHILIZ,
)

# 上游覆蓋範圍不對稱：tezos 只有餘額，ethereum-holesky 只有 NFT
BALANCE_CHAINS = _SHARED_CHAINS + (Chain.TEZOS,)
NFT_CHAINS = _SHARED_CHAINS + (Chain.ETHEREUM_HOLESKY,)

_CHAINS_BY_KIND = {
    QueryKind.BALANCES: BALANCE_CHAINS,
    QueryKind.NFTS: NFT_CHAINS,
}


def supported_chains(kind: QueryKind) -> List[str]:
    """回傳指定查詢種類支援的鏈名稱。"""

    return [chain.value for chain in _CHAINS_BY_KIND[kind]]


def validate_chain(chain: str | None, kind: QueryKind) -> Chain:
    """確認鏈名稱適用於指定查詢種類。"""

    normalized = (chain or "").strip().lower()
    for candidate in _CHAINS_BY_KIND[kind]:
        if candidate.value == normalized:
            return candidate
    raise ValidationError(
        f"Unsupported chain for {kind.value}: {chain!r}. "
        f"Supported: {', '.join(supported_chains(kind))}",
        code=ValidationError.UNSUPPORTED_CHAIN,
    )
