"""查詢結果的文字表格輸出。"""

from __future__ import annotations

from typing import List, Sequence

from ..core.types import BalanceRecord, NftRecord, QueryResult
from ..core.utils import to_gateway_url


def _row(cells: Sequence[str]) -> str:
    return "| " + " | ".join(cell.replace("|", "\\|") for cell in cells) + " |"


def render_balances(balances: Sequence[BalanceRecord]) -> List[str]:
    lines = [
        "## Token Balances",
        "",
        _row(["Address", "Chain", "Token Address", "Token Balance"]),
        _row(["---", "---", "---", "---:"]),
    ]
    for item in balances:
        lines.append(_row([item.address, item.chain, item.token_address or "-", item.balance]))
    return lines


def render_nfts(nfts: Sequence[NftRecord], gateway: str) -> List[str]:
    lines = [
        "## NFTs",
        "",
        _row(["Chain", "Token Id", "Token Address", "NFT"]),
        _row(["---", "---", "---", "---"]),
    ]
    for item in nfts:
        image = to_gateway_url(item.metadata.image, gateway) or "-"
        lines.append(_row([item.chain, item.token_id, item.token_address, image]))
    return lines


def render_portfolio(result: QueryResult, gateway: str) -> str:
    """輸出餘額與 NFT 兩張表格，空結果的區塊略過。"""

    lines: List[str] = []
    if result.balances:
        lines.extend(render_balances(result.balances))
        lines.append("")
    if result.nfts:
        lines.extend(render_nfts(result.nfts, gateway))
        lines.append("")
    if not lines:
        lines.append("No balances or NFTs found.")
    return "\n".join(lines).rstrip() + "\n"
