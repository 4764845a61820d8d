from __future__ import annotations

from typing import Iterable, List, Optional

from ..core.errors import ValidationError
from ..core.utils import split_csv


def split_addresses(raw: Optional[str]) -> List[str]:
    """切分 HTTP 查詢參數中以逗號串接的地址。"""

    return split_csv(raw)


def normalize_addresses(raw_addresses: Iterable[str]) -> List[str]:
    """去除空白並丟棄空白項目，保留原始順序與重複項目。

    地址格式交由上游 API 驗證，這裡只確認至少有一筆輸入。
    """

    addresses = [item.strip() for item in raw_addresses if item and item.strip()]
    if not addresses:
        raise ValidationError(
            "Please enter at least one address",
            code=ValidationError.EMPTY_INPUT,
        )
    return addresses
