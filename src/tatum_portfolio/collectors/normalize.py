from __future__ import annotations

from typing import Any, Dict, List, Mapping

from ..core.errors import NormalizationError
from ..core.types import BalanceRecord, NftMetadata, NftRecord


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_block(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as error:
        raise NormalizationError(f"lastUpdateBlock 無法解析：{value!r}") from error


def _require_items(items: Any, source: str) -> List[Dict[str, Any]]:
    if not isinstance(items, list):
        raise NormalizationError(f"{source} 回應缺少結果陣列")
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise NormalizationError(f"{source} 第 {index} 筆資料不是物件")
    return items


class ResponseNormalizer:
    """將 Tatum 原始回應轉換為內部紀錄。"""

    def to_balances(self, payload: Any) -> List[BalanceRecord]:
        if not isinstance(payload, Mapping):
            raise NormalizationError("balances 回應不是物件")
        records: List[BalanceRecord] = []
        for item in _require_items(payload.get("result"), "balances"):
            metadata = item.get("metadata")
            records.append(
                BalanceRecord(
                    address=_as_text(item.get("address")),
                    token_address=_as_text(item.get("tokenAddress")),
                    chain=_as_text(item.get("chain")),
                    balance=_as_text(item.get("balance")),
                    token_id=_as_text(item.get("tokenId")),
                    type=_as_text(item.get("type")),
                    last_update_block=_as_block(item.get("lastUpdateBlock")),
                    metadata_uri=_as_text(item.get("metadataURI")),
                    metadata=dict(metadata) if isinstance(metadata, Mapping) else {},
                )
            )
        return records

    def to_nfts(self, payload: Any) -> List[NftRecord]:
        if isinstance(payload, list):
            items = payload
        elif isinstance(payload, Mapping):
            items = payload.get("result")
            if items is None:
                items = payload.get("data")
        else:
            items = None

        records: List[NftRecord] = []
        for item in _require_items(items, "nfts"):
            metadata = item.get("metadata")
            records.append(
                NftRecord(
                    chain=_as_text(item.get("chain")),
                    token_address=_as_text(item.get("tokenAddress")),
                    token_id=_as_text(item.get("tokenId")),
                    token_type=_as_text(item.get("tokenType")),
                    metadata_uri=_as_text(item.get("metadataURI")),
                    metadata=self._nft_metadata(metadata),
                )
            )
        return records

    @staticmethod
    def _nft_metadata(metadata: Any) -> NftMetadata:
        if not isinstance(metadata, Mapping):
            return NftMetadata()
        data = dict(metadata)
        attributes = data.get("attributes")
        if not isinstance(attributes, list):
            data["attributes"] = []
        image = data.get("image")
        if image is not None and not isinstance(image, str):
            data["image"] = str(image)
        return NftMetadata.model_validate(data)
