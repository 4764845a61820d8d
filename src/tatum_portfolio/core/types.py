from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class QueryKind(str, Enum):
    """查詢種類：餘額或 NFT。"""

    BALANCES = "balances"
    NFTS = "nfts"


class BalanceRecord(BaseModel):
    """單一地址持有單一代幣的餘額。"""

    model_config = ConfigDict(populate_by_name=True)

    address: str
    token_address: str = Field("", alias="tokenAddress")
    chain: str
    # 保留上游十進位字串，避免精度流失
    balance: str
    token_id: str = Field("", alias="tokenId")
    type: str = ""
    last_update_block: Optional[int] = Field(None, alias="lastUpdateBlock")
    metadata_uri: str = Field("", alias="metadataURI")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class NftMetadata(BaseModel):
    """NFT 中繼資料，保留上游額外欄位。"""

    model_config = ConfigDict(extra="allow")

    image: Optional[str] = None
    attributes: List[Any] = Field(default_factory=list)


class NftRecord(BaseModel):
    """單一 NFT 或 multitoken 持有紀錄。"""

    model_config = ConfigDict(populate_by_name=True)

    chain: str
    token_address: str = Field("", alias="tokenAddress")
    token_id: str = Field("", alias="tokenId")
    token_type: str = Field("", alias="tokenType")
    metadata_uri: str = Field("", alias="metadataURI")
    metadata: NftMetadata = Field(default_factory=NftMetadata)


class QueryFailure(BaseModel):
    """子查詢失敗時附加的錯誤標記。"""

    kind: str
    code: str
    message: str
    status_code: Optional[int] = None
    body: Any = None


class QueryResult(BaseModel):
    """合併的餘額與 NFT 查詢結果，可能只有部分成功。"""

    chain: str
    addresses: List[str] = Field(default_factory=list)
    balances: List[BalanceRecord] = Field(default_factory=list)
    nfts: List[NftRecord] = Field(default_factory=list)
    errors: Dict[QueryKind, QueryFailure] = Field(default_factory=dict)

    @property
    def is_partial(self) -> bool:
        return bool(self.errors)

    @property
    def balances_error(self) -> Optional[QueryFailure]:
        return self.errors.get(QueryKind.BALANCES)

    @property
    def nfts_error(self) -> Optional[QueryFailure]:
        return self.errors.get(QueryKind.NFTS)

    def to_payload(self) -> Dict[str, Any]:
        """輸出給前端使用的 camelCase JSON 結構。"""

        return self.model_dump(mode="json", by_alias=True)
