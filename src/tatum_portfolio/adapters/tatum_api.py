from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import httpx
import structlog

from ..core.chains import Chain
from ..core.errors import NormalizationError, TransportError, UpstreamError


logger = structlog.get_logger(__name__)


class TatumAPIClient:
    """Tatum Data API 介面層，只包含餘額與 NFT 兩種查詢。"""

    BALANCES_PATH = "/v4/data/balances"
    COLLECTIONS_PATH = "/v4/data/collections"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "x-api-key": api_key,
                "User-Agent": "tatum-portfolio/0.1.0",
            },
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        """關閉底層 HTTP 連線。"""

        await self._client.aclose()

    async def __aenter__(self) -> "TatumAPIClient":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.aclose()

    async def _get(self, path: str, params: Dict[str, Any]) -> Any:
        logger.debug("tatum_request", path=path, chain=params.get("chain"))
        try:
            response = await self._client.get(path, params=params)
        except httpx.TimeoutException as error:
            raise TransportError(f"Tatum 請求逾時：{path}", code=TransportError.TIMEOUT) from error
        except httpx.HTTPError as error:
            raise TransportError(f"Tatum 連線失敗：{error}") from error

        if response.is_error:
            body = _decode_body(response)
            logger.warning("tatum_error", path=path, status_code=response.status_code)
            raise UpstreamError(response.status_code, body)

        try:
            return response.json()
        except ValueError as error:
            raise NormalizationError(f"Tatum 回應不是 JSON：{path}") from error

    async def fetch_balances(self, chain: Chain, addresses: Sequence[str]) -> Any:
        """取得多個地址的代幣餘額。"""

        return await self._get(
            self.BALANCES_PATH,
            {"chain": chain.value, "addresses": ",".join(addresses)},
        )

    async def fetch_nfts(self, chain: Chain, addresses: Sequence[str]) -> Any:
        """取得多個地址的 NFT，限定 nft 代幣類型。"""

        return await self._get(
            self.COLLECTIONS_PATH,
            {
                "chain": chain.value,
                "collectionAddresses": ",".join(addresses),
                "tokenTypes": "nft",
            },
        )


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
