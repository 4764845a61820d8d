from __future__ import annotations

from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from tatum_portfolio.adapters.tatum_api import TatumAPIClient
from tatum_portfolio.api.app import create_app
from tatum_portfolio.config.settings import AppSettings


BALANCE_ROW = {
    "address": "0xabc",
    "tokenAddress": "0xtoken",
    "chain": "ethereum",
    "balance": "1000000000000000000000",
    "tokenId": "",
    "type": "fungible",
    "lastUpdateBlock": 19000000,
    "metadataURI": "",
    "metadata": {"symbol": "TKN"},
}

NFT_ROW = {
    "chain": "ethereum",
    "tokenAddress": "0xabc",
    "tokenId": "9",
    "tokenType": "nft",
    "metadataURI": "ipfs://cid/9.json",
    "metadata": {"image": "ipfs://cid/9.png", "attributes": []},
}


def _make_test_client(handler: Callable[[httpx.Request], httpx.Response]) -> TestClient:
    settings = AppSettings(TATUM_API_KEY="test-key", TATUM_BASE_URL="https://api.tatum.test")
    client = TatumAPIClient(
        settings.base_url,
        settings.tatum_api_key,
        transport=httpx.MockTransport(handler),
    )
    return TestClient(create_app(settings=settings, client=client))


def _default_handler(seen: List[httpx.Request]) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/v4/data/balances":
            return httpx.Response(200, json={"result": [BALANCE_ROW]})
        if request.url.path == "/v4/data/collections":
            return httpx.Response(200, json=[NFT_ROW])
        pytest.fail(f"Unexpected request path: {request.url.path}")

    return handler


def test_health() -> None:
    with _make_test_client(_default_handler([])) as client:
        response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_getbalance_returns_camel_case_records() -> None:
    seen: List[httpx.Request] = []
    with _make_test_client(_default_handler(seen)) as client:
        response = client.get("/api/getbalance", params={"chain": "ethereum", "addresses": "0xabc, ,0xdef"})

    assert response.status_code == 200
    body = response.json()
    assert body == [BALANCE_ROW]
    assert seen[0].url.params["addresses"] == "0xabc,0xdef"
    assert seen[0].headers["x-api-key"] == "test-key"


def test_getnfts_returns_records() -> None:
    seen: List[httpx.Request] = []
    with _make_test_client(_default_handler(seen)) as client:
        response = client.get("/api/getnfts", params={"chain": "ethereum-holesky", "addresses": "0xabc"})

    assert response.status_code == 200
    body = response.json()
    assert body[0]["tokenId"] == "9"
    assert body[0]["metadata"]["image"] == "ipfs://cid/9.png"
    assert seen[0].url.params["tokenTypes"] == "nft"


@pytest.mark.parametrize(
    "params",
    [{}, {"chain": "ethereum"}, {"addresses": "0xabc"}, {"chain": "ethereum", "addresses": ""}],
)
def test_missing_parameters_return_400(params: dict) -> None:
    seen: List[httpx.Request] = []
    with _make_test_client(_default_handler(seen)) as client:
        response = client.get("/api/getbalance", params=params)

    assert response.status_code == 400
    assert response.json()["error"] == "Missing required parameters."
    assert seen == []


def test_blank_addresses_and_bad_chain_return_400() -> None:
    seen: List[httpx.Request] = []
    with _make_test_client(_default_handler(seen)) as client:
        blank = client.get("/api/getnfts", params={"chain": "ethereum", "addresses": " , "})
        tezos = client.get("/api/getnfts", params={"chain": "tezos", "addresses": "tz1"})

    assert blank.status_code == 400
    assert blank.json()["code"] == "EmptyInput"
    assert tezos.status_code == 400
    assert tezos.json()["code"] == "UnsupportedChain"
    assert seen == []


def test_upstream_error_is_passed_through() -> None:
    upstream_body = {"statusCode": 403, "errorCode": "subscription.invalid", "message": "Forbidden"}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json=upstream_body)

    with _make_test_client(handler) as client:
        response = client.get("/api/getbalance", params={"chain": "bsc", "addresses": "0xabc"})

    assert response.status_code == 403
    assert response.json() == upstream_body


def test_schema_drift_is_an_internal_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"rows": []})

    with _make_test_client(handler) as client:
        response = client.get("/api/getbalance", params={"chain": "ethereum", "addresses": "0xabc"})

    assert response.status_code == 500
    assert response.json()["code"] == "UnexpectedShape"


def test_transport_failure_is_a_bad_gateway() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with _make_test_client(handler) as client:
        response = client.get("/api/getnfts", params={"chain": "ethereum", "addresses": "0xabc"})

    assert response.status_code == 502
    assert response.json()["code"] == "NetworkError"


def test_portfolio_returns_partial_result() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v4/data/balances":
            return httpx.Response(200, json={"result": [BALANCE_ROW]})
        return httpx.Response(500, json={"message": "Internal server error"})

    with _make_test_client(handler) as client:
        response = client.get("/api/portfolio", params={"chain": "ethereum", "addresses": "0xabc"})

    assert response.status_code == 200
    body = response.json()
    assert body["balances"] == [BALANCE_ROW]
    assert body["nfts"] == []
    assert body["errors"]["nfts"]["status_code"] == 500
    assert body["errors"]["nfts"]["code"] == "ServerError"


def test_portfolio_total_failure_uses_balance_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "Unauthorized"})

    with _make_test_client(handler) as client:
        response = client.get("/api/portfolio", params={"chain": "ethereum", "addresses": "0xabc"})

    assert response.status_code == 401
    body = response.json()
    assert set(body["errors"]) == {"balances", "nfts"}
    assert body["errors"]["balances"]["code"] == "Unauthorized"


def test_portfolio_survives_undecodable_nft_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v4/data/balances":
            return httpx.Response(200, json={"result": [BALANCE_ROW]})
        return httpx.Response(200, content=b"\xff\xfe\xfa garbage")

    with _make_test_client(handler) as client:
        response = client.get("/api/portfolio", params={"chain": "ethereum", "addresses": "0xabc"})

    assert response.status_code == 200
    body = response.json()
    assert body["balances"] == [BALANCE_ROW]
    assert body["errors"]["nfts"]["code"] == "UnexpectedShape"


def test_empty_chain_is_rejected_as_unsupported() -> None:
    seen: List[httpx.Request] = []
    with _make_test_client(_default_handler(seen)) as client:
        response = client.get("/api/getbalance", params={"chain": "", "addresses": "0xabc"})

    assert response.status_code == 400
    assert response.json()["code"] == "UnsupportedChain"
    assert seen == []
