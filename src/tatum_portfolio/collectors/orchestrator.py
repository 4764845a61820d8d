from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Dict, Iterable, List, Optional, Tuple

import structlog

from ..adapters.mock_tatum import MockTatumClient
from ..adapters.tatum_api import TatumAPIClient
from ..core.chains import Chain, validate_chain
from ..core.errors import PortfolioError, QueryFailedError, TransportError, ValidationError
from ..core.types import BalanceRecord, NftRecord, QueryKind, QueryResult
from .addresses import normalize_addresses
from .normalize import ResponseNormalizer


logger = structlog.get_logger(__name__)


class QueryOrchestrator:
    """驗證輸入、並行查詢餘額與 NFT，並整理成統一結果。

    每次呼叫都是獨立的：先驗證地址與鏈，再對仍有效的查詢種類發出請求。
    任一半失敗時回傳部分結果與錯誤標記；兩半都失敗才拋出例外。
    """

    def __init__(
        self,
        client: TatumAPIClient | MockTatumClient,
        normalizer: Optional[ResponseNormalizer] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._client = client
        self._normalizer = normalizer or ResponseNormalizer()
        self._timeout = timeout

    async def get_balances(self, raw_addresses: Iterable[str], raw_chain: Optional[str]) -> List[BalanceRecord]:
        """單獨查詢餘額，任何失敗皆拋出例外。"""

        addresses = normalize_addresses(raw_addresses)
        chain = validate_chain(raw_chain, QueryKind.BALANCES)
        return await self._query(QueryKind.BALANCES, chain, addresses)

    async def get_nfts(self, raw_addresses: Iterable[str], raw_chain: Optional[str]) -> List[NftRecord]:
        """單獨查詢 NFT，任何失敗皆拋出例外。"""

        addresses = normalize_addresses(raw_addresses)
        chain = validate_chain(raw_chain, QueryKind.NFTS)
        return await self._query(QueryKind.NFTS, chain, addresses)

    async def run(self, raw_addresses: Iterable[str], raw_chain: Optional[str]) -> QueryResult:
        """執行合併查詢。"""

        addresses = normalize_addresses(raw_addresses)

        errors: Dict[QueryKind, PortfolioError] = {}
        chains: Dict[QueryKind, Chain] = {}
        for kind in QueryKind:
            try:
                chains[kind] = validate_chain(raw_chain, kind)
            except ValidationError as error:
                errors[kind] = error
        if not chains:
            raise errors[QueryKind.BALANCES]

        kinds = list(chains)
        outcomes = await asyncio.gather(
            *(self._settle(kind, chains[kind], addresses) for kind in kinds)
        )

        records: Dict[QueryKind, List[Any]] = {}
        for kind, (result, error) in zip(kinds, outcomes):
            if error is not None:
                errors[kind] = error
            else:
                records[kind] = result

        if not records:
            raise QueryFailedError(errors)
        if errors:
            logger.info(
                "query_partial",
                failed={kind.value: error.code for kind, error in errors.items()},
            )

        chain = next(iter(chains.values()))
        return QueryResult(
            chain=chain.value,
            addresses=addresses,
            balances=records.get(QueryKind.BALANCES, []),
            nfts=records.get(QueryKind.NFTS, []),
            errors={kind: error.to_failure() for kind, error in errors.items()},
        )

    async def _settle(
        self,
        kind: QueryKind,
        chain: Chain,
        addresses: List[str],
    ) -> Tuple[Optional[List[Any]], Optional[PortfolioError]]:
        try:
            return await self._query(kind, chain, addresses), None
        except PortfolioError as error:
            return None, error

    async def _query(self, kind: QueryKind, chain: Chain, addresses: List[str]) -> List[Any]:
        if kind is QueryKind.BALANCES:
            payload = await self._bounded(self._client.fetch_balances(chain, addresses), kind)
            return self._normalizer.to_balances(payload)
        payload = await self._bounded(self._client.fetch_nfts(chain, addresses), kind)
        return self._normalizer.to_nfts(payload)

    async def _bounded(self, call: Awaitable[Any], kind: QueryKind) -> Any:
        if self._timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self._timeout)
        except asyncio.TimeoutError as error:
            raise TransportError(
                f"{kind.value} query exceeded {self._timeout}s",
                code=TransportError.TIMEOUT,
            ) from error
