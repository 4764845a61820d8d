from __future__ import annotations

from typing import Any, Dict, List, Sequence

from ..core.chains import Chain


class MockTatumClient:
    """提供測試與離線展示使用的固定資料回應。"""

    def __init__(self) -> None:
        self.calls: List[str] = []

    async def fetch_balances(self, chain: Chain, addresses: Sequence[str]) -> Dict[str, Any]:
        self.calls.append("balances")
        result = []
        for index, address in enumerate(addresses, start=1):
            result.append(
                {
                    "address": address,
                    "chain": chain.value,
                    "balance": f"{index}.5",
                    "tokenAddress": "",
                    "tokenId": "",
                    "type": "native",
                    "lastUpdateBlock": 19_000_000 + index,
                    "metadataURI": "",
                    "metadata": {},
                }
            )
            result.append(
                {
                    "address": address,
                    "chain": chain.value,
                    "balance": f"{index * 1000}",
                    "tokenAddress": f"0xmocktoken{index}",
                    "tokenId": "",
                    "type": "fungible",
                    "lastUpdateBlock": 19_000_000 + index,
                    "metadataURI": "",
                    "metadata": {"symbol": f"MOCK{index}", "decimals": 18},
                }
            )
        return {"result": result, "prevPage": "", "nextPage": ""}

    async def fetch_nfts(self, chain: Chain, addresses: Sequence[str]) -> Dict[str, Any]:
        self.calls.append("nfts")
        result = []
        for index, address in enumerate(addresses, start=1):
            result.append(
                {
                    "chain": chain.value,
                    "tokenAddress": address,
                    "tokenId": str(index),
                    "tokenType": "nft",
                    "metadataURI": f"ipfs://mockcid/{index}.json",
                    "metadata": {
                        "name": f"Mock NFT #{index}",
                        "image": f"ipfs://mockcid/{index}.png",
                        "attributes": [{"trait_type": "mock", "value": index}],
                    },
                }
            )
        return {"result": result, "prevPage": "", "nextPage": ""}
