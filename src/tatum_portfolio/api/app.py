from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import structlog
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ..adapters.mock_tatum import MockTatumClient
from ..adapters.tatum_api import TatumAPIClient
from ..collectors.addresses import split_addresses
from ..collectors.orchestrator import QueryOrchestrator
from ..config.settings import AppSettings, get_settings
from ..core.errors import PortfolioError, QueryFailedError, UpstreamError, ValidationError
from ..core.logging import configure_logging


logger = structlog.get_logger(__name__)

MISSING_PARAMETERS_MESSAGE = "Missing required parameters."

router = APIRouter(prefix="/api", tags=["Portfolio"])


def get_orchestrator(request: Request) -> QueryOrchestrator:
    return request.app.state.orchestrator


def _require_params(chain: Optional[str], addresses: Optional[str]) -> None:
    # chain 只檢查是否存在，空字串交給鏈驗證
    if chain is None or addresses is None or addresses == "":
        raise ValidationError(MISSING_PARAMETERS_MESSAGE, code=ValidationError.MISSING_PARAMETERS)


@router.get("/getbalance")
async def get_balance(
    chain: Optional[str] = None,
    addresses: Optional[str] = None,
    orchestrator: QueryOrchestrator = Depends(get_orchestrator),
) -> List[Dict[str, Any]]:
    """查詢多個地址在指定鏈上的代幣餘額。"""

    _require_params(chain, addresses)
    records = await orchestrator.get_balances(split_addresses(addresses), chain)
    return [record.model_dump(mode="json", by_alias=True) for record in records]


@router.get("/getnfts")
async def get_nfts(
    chain: Optional[str] = None,
    addresses: Optional[str] = None,
    orchestrator: QueryOrchestrator = Depends(get_orchestrator),
) -> List[Dict[str, Any]]:
    """查詢多個地址在指定鏈上的 NFT。"""

    _require_params(chain, addresses)
    records = await orchestrator.get_nfts(split_addresses(addresses), chain)
    return [record.model_dump(mode="json", by_alias=True) for record in records]


@router.get("/portfolio")
async def get_portfolio(
    chain: Optional[str] = None,
    addresses: Optional[str] = None,
    orchestrator: QueryOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """同時查詢餘額與 NFT，允許部分成功。"""

    _require_params(chain, addresses)
    result = await orchestrator.run(split_addresses(addresses), chain)
    return result.to_payload()


def _error_response(error: PortfolioError) -> Response:
    if isinstance(error, UpstreamError):
        if isinstance(error.body, (dict, list)):
            return JSONResponse(status_code=error.status_code, content=error.body)
        return PlainTextResponse(status_code=error.status_code, content=str(error.body or ""))
    if isinstance(error, QueryFailedError):
        return JSONResponse(
            status_code=error.status_code,
            content={
                "error": error.message,
                "errors": {
                    kind.value: failure.model_dump(mode="json")
                    for kind, failure in error.failures().items()
                },
            },
        )
    return JSONResponse(
        status_code=error.status_code,
        content={"error": error.message, "code": error.code},
    )


async def _handle_portfolio_error(request: Request, error: PortfolioError) -> Response:
    if error.status_code >= 500:
        logger.warning(
            "request_failed",
            path=request.url.path,
            code=error.code,
            error=error.message,
        )
    return _error_response(error)


def create_app(
    settings: Optional[AppSettings] = None,
    client: TatumAPIClient | MockTatumClient | None = None,
) -> FastAPI:
    """建立 FastAPI 應用程式；未提供 client 時依設定建立 Tatum 連線。"""

    settings = settings or get_settings()
    owns_client = client is None
    if client is None:
        client = TatumAPIClient(
            base_url=settings.base_url,
            api_key=settings.tatum_api_key,
            timeout=settings.tatum_timeout,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        if owns_client:
            await client.aclose()

    configure_logging(settings.log_level)
    app = FastAPI(
        title="Tatum Portfolio API",
        description="Wallet token balances and NFTs proxied from the Tatum Data API.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.orchestrator = QueryOrchestrator(client, timeout=settings.query_timeout)
    app.add_exception_handler(PortfolioError, _handle_portfolio_error)
    app.include_router(router)

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    return app
