from __future__ import annotations

from typing import List, Optional


IPFS_SCHEME = "ipfs://"


def split_csv(value: Optional[str]) -> List[str]:
    """將逗號分隔字串切成清單，保留空白項目交由呼叫端處理。"""

    if value is None:
        return []
    return value.split(",")


def to_gateway_url(url: Optional[str], gateway: str) -> Optional[str]:
    """將 ipfs:// 位址轉為 HTTP gateway 網址。"""

    if not url:
        return url
    if url.startswith(IPFS_SCHEME):
        base = gateway if gateway.endswith("/") else f"{gateway}/"
        return f"{base}{url[len(IPFS_SCHEME):]}"
    return url
