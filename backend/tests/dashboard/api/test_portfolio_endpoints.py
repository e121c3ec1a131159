from __future__ import annotations

from decimal import Decimal

import pytest


def _create_portfolio(api_client) -> int:
    response = api_client.post("/api/v1/portfolios")
    assert response.status_code == 200
    assert response.json()["name"] == "My Portfolio"
    return response.json()["id"]


def _lot(symbol: str, qty: float, cost_basis: float, fee: float = 0) -> dict:
    return {
        "symbol": symbol,
        "qty": qty,
        "cost_basis": cost_basis,
        "fee": fee,
        "trade_date": "2026-01-05T14:30:00Z",
    }


def test_holdings_combine_lots_and_prices(api_client, quote_gateway) -> None:
    portfolio_id = _create_portfolio(api_client)
    quote_gateway.prices["AAPL"] = Decimal("180")
    for body in (_lot("AAPL", 10, 100, fee=1), _lot("AAPL", 10, 200, fee=1), _lot("XYZ", 5, 20)):
        assert api_client.post(f"/api/v1/portfolios/{portfolio_id}/lots", json=body).status_code == 200

    response = api_client.get(f"/api/v1/portfolios/{portfolio_id}/holdings")

    assert response.status_code == 200
    payload = response.json()
    aapl, xyz = payload["holdings"]
    assert aapl["symbol"] == "AAPL"
    assert aapl["qty"] == 20
    assert aapl["avg_cost"] == 150
    assert aapl["total_fees"] == 2
    assert aapl["unrealized_pl"] == 600
    assert aapl["unrealized_pl_pct"] == 20
    assert xyz["market_value"] == 0
    assert xyz["unrealized_pl"] == -100
    assert payload["totals"]["total_cost"] == 3100
    assert payload["totals"]["total_value"] == 3600
    assert payload["totals"]["total_unrealized_pl"] == 500
    assert payload["totals"]["total_unrealized_pl_pct"] == pytest.approx(500 / 3100 * 100)


@pytest.mark.parametrize("body", [_lot("AAPL", 0, 10), _lot("AAPL", 1, -5), _lot("AAPL", 1, 10, fee=-1)])
def test_invalid_lots_are_rejected(api_client, body: dict) -> None:
    portfolio_id = _create_portfolio(api_client)

    response = api_client.post(f"/api/v1/portfolios/{portfolio_id}/lots", json=body)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_portfolio_detail_and_lot_removal(api_client) -> None:
    portfolio_id = _create_portfolio(api_client)
    lot = api_client.post(f"/api/v1/portfolios/{portfolio_id}/lots", json=_lot("msft", 2, 300)).json()

    detail = api_client.get(f"/api/v1/portfolios/{portfolio_id}").json()
    assert [item["symbol"] for item in detail["lots"]] == ["MSFT"]

    removed = api_client.delete(f"/api/v1/portfolios/{portfolio_id}/lots/{lot['id']}")
    assert removed.json() == {"success": True}
    missing = api_client.delete(f"/api/v1/portfolios/{portfolio_id}/lots/{lot['id']}")
    assert missing.status_code == 404


def test_unknown_portfolio_holdings_not_found(api_client) -> None:
    response = api_client.get("/api/v1/portfolios/404/holdings")

    assert response.status_code == 404
