from __future__ import annotations

import asyncio
import json
from typing import List, NoReturn, Optional

import typer

from ..adapters.mock_tatum import MockTatumClient
from ..adapters.tatum_api import TatumAPIClient
from ..collectors.addresses import split_addresses
from ..collectors.orchestrator import QueryOrchestrator
from ..config.settings import AppSettings, get_settings
from ..core.chains import supported_chains
from ..core.errors import PortfolioError, QueryFailedError
from ..core.logging import configure_logging
from ..core.types import QueryKind, QueryResult
from ..reports.tables import render_portfolio

app = typer.Typer(help="Tatum wallet portfolio CLI")


@app.command("query")
def command_query(
    addresses: List[str] = typer.Argument(..., help="錢包地址，可用空白或逗號分隔多筆"),
    chain: str = typer.Option("ethereum", "--chain", "-c", help="區塊鏈名稱"),
    use_mock: bool = typer.Option(False, help="是否使用模擬 Tatum 回應資料"),
    as_json: bool = typer.Option(False, "--json", help="以 JSON 輸出查詢結果"),
) -> None:
    """查詢地址的代幣餘額與 NFT。"""

    settings = get_settings()
    configure_logging(settings.log_level)
    raw_addresses = [part for item in addresses for part in split_addresses(item)]

    try:
        result = asyncio.run(_run_query(settings, raw_addresses, chain, use_mock))
    except PortfolioError as error:
        exit_with_error(error)

    if as_json:
        typer.echo(json.dumps(result.to_payload(), indent=2, ensure_ascii=False))
    else:
        typer.echo(render_portfolio(result, settings.ipfs_gateway), nl=False)
    for kind, failure in result.errors.items():
        typer.echo(f"[{kind.value}] {failure.code}: {failure.message}", err=True)


@app.command("chains")
def command_chains() -> None:
    """列出各查詢種類支援的鏈。"""

    for kind in QueryKind:
        typer.echo(f"{kind.value}: {', '.join(supported_chains(kind))}")


@app.command("serve")
def command_serve(
    host: Optional[str] = typer.Option(None, help="監聽位址，預設讀取 API_HOST"),
    port: Optional[int] = typer.Option(None, help="監聽埠號，預設讀取 API_PORT"),
) -> None:
    """啟動 HTTP API 服務。"""

    import uvicorn

    from ..api.app import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=host or settings.api_host,
        port=port or settings.api_port,
        log_level=settings.log_level.lower(),
    )


async def _run_query(
    settings: AppSettings,
    raw_addresses: List[str],
    chain: str,
    use_mock: bool,
) -> QueryResult:
    if use_mock:
        return await QueryOrchestrator(MockTatumClient(), timeout=settings.query_timeout).run(raw_addresses, chain)

    async with TatumAPIClient(
        base_url=settings.base_url,
        api_key=settings.tatum_api_key,
        timeout=settings.tatum_timeout,
    ) as client:
        orchestrator = QueryOrchestrator(client, timeout=settings.query_timeout)
        return await orchestrator.run(raw_addresses, chain)


def exit_with_error(error: PortfolioError) -> NoReturn:
    """輸出錯誤訊息並以代碼 1 結束程式。"""

    typer.echo(f"[{error.kind}] {error.code}: {error.message}", err=True)
    if isinstance(error, QueryFailedError):
        for kind, failure in error.failures().items():
            typer.echo(f"  {kind.value}: {failure.code}: {failure.message}", err=True)
    raise typer.Exit(code=1)
