"""Tests for the REST API."""

from datetime import date, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.services import MarketDataService, PortfolioService
from core.models import Holding, Portfolio, PriceBar, Quote


def _make_bars(closes: list[float]) -> list[PriceBar]:
    start = date(2024, 1, 1)
    return [
        PriceBar(date=start + timedelta(days=i), open=c, high=c, low=c, close=c, volume=1000)
        for i, c in enumerate(closes)
    ]


PEAK = _make_bars([95.0] * 10 + [100, 104, 108, 112, 116, 120, 125, 130, 130.5, 130.9])
FLAT = _make_bars([100.0] * 30)

PRICES = {"7203.T": 2500.0, "6758.T": 13000.0, "PEAK": 130.9}


def _make_yahoo_client() -> MagicMock:
    client = MagicMock()

    async def fetch_quote(symbol):
        if symbol not in PRICES:
            return None
        return Quote(symbol=symbol, name=f"{symbol} Corp", price=PRICES[symbol], change_percent=1.5)

    async def fetch_history(symbol, period="6mo", interval="1d"):
        return PEAK if symbol == "PEAK" else FLAT

    client.fetch_quote = AsyncMock(side_effect=fetch_quote)
    client.fetch_history = AsyncMock(side_effect=fetch_history)
    return client


@pytest.fixture
def service():
    store = MagicMock()
    store.load = AsyncMock(return_value=Portfolio())
    store.save = AsyncMock(return_value=True)
    store.ping = AsyncMock(return_value=False)
    market = MarketDataService(_make_yahoo_client())
    return PortfolioService(store, market)


@pytest.fixture
def client(service):
    app = create_app(use_lifespan=False)
    app.state.market = service.market
    app.state.portfolio_service = service
    return TestClient(app)


def _seed(service: PortfolioService, *holdings: Holding) -> None:
    service._portfolio = Portfolio(items=holdings)


def _make_holding(symbol: str, shares: float = 10, average_price: float = 100.0) -> Holding:
    return Holding(
        symbol=symbol,
        shares=shares,
        average_price=average_price,
        purchase_date=date(2024, 1, 15),
    )


class TestSystemRoutes:
    """Tests for root, health and status."""

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_status(self, client, service):
        _seed(service, _make_holding("7203.T"))

        data = client.get("/api/status").json()

        assert data["status"] == "running"
        assert data["holdings"] == 1
        assert data["storeAvailable"] is False


class TestStockRoutes:
    """Tests for the single-symbol endpoints."""

    def test_quote(self, client):
        resp = client.get("/api/stock/7203.T/quote")

        assert resp.status_code == 200
        data = resp.json()
        assert data["price"] == 2500.0
        assert data["changePercent"] == 1.5

    def test_quote_unknown(self, client):
        assert client.get("/api/stock/NOPE/quote").status_code == 404

    def test_history(self, client):
        data = client.get("/api/stock/7203.T/history").json()

        assert len(data) == 30
        assert data[0]["date"] == "2024-01-01"

    def test_analysis(self, client):
        resp = client.get("/api/stock/PEAK/analysis")

        assert resp.status_code == 200
        data = resp.json()
        assert data["sell"]["isSignal"] is True
        assert data["sell"]["reason"] == "peak_after_rally"
        assert data["sell"]["message"] == "reached a likely peak after a sharp rally"
        assert data["buy"]["isSignal"] is False

    def test_analysis_unavailable(self, client):
        assert client.get("/api/stock/NOPE/analysis").status_code == 502

    def test_screener(self, client):
        with patch("app.api.routes.get_settings") as settings:
            settings.return_value.watchlist = ["7203.T", "NOPE"]
            data = client.get("/api/screener").json()

        assert [e["symbol"] for e in data] == ["7203.T"]
        assert data[0]["score"] == 0


class TestPortfolioRoutes:
    """Tests for the portfolio endpoints."""

    def test_empty_portfolio(self, client):
        assert client.get("/api/portfolio").json() == {"items": []}

    def test_add_holding(self, client, service):
        resp = client.post(
            "/api/portfolio/holdings",
            json={
                "symbol": "7203.T",
                "shares": 100,
                "averagePrice": 2400.0,
                "purchaseDate": "2024-01-15",
            },
        )

        assert resp.status_code == 200
        item = resp.json()["items"][0]
        assert item["symbol"] == "7203.T"
        assert item["name"] == "7203.T Corp"
        assert item["averagePrice"] == 2400.0
        assert item["purchaseDate"] == "2024-01-15"
        service.store.save.assert_awaited_once()

    def test_add_unknown_symbol(self, client):
        resp = client.post(
            "/api/portfolio/holdings",
            json={"symbol": "NOPE", "shares": 1, "averagePrice": 1, "purchaseDate": "2024-01-15"},
        )

        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid stock symbol: NOPE"

    def test_add_invalid_shares(self, client):
        resp = client.post(
            "/api/portfolio/holdings",
            json={"symbol": "7203.T", "shares": 0, "averagePrice": 1, "purchaseDate": "2024-01-15"},
        )

        assert resp.status_code == 400

    def test_add_missing_field(self, client):
        resp = client.post("/api/portfolio/holdings", json={"symbol": "7203.T"})
        assert resp.status_code == 422

    def test_update_holding(self, client, service):
        _seed(service, _make_holding("7203.T"))

        resp = client.patch("/api/portfolio/holdings/7203.T", json={"shares": 42})

        assert resp.status_code == 200
        assert resp.json()["items"][0]["shares"] == 42

    def test_update_unknown_field(self, client, service):
        _seed(service, _make_holding("7203.T"))

        resp = client.patch("/api/portfolio/holdings/7203.T", json={"colour": "red"})

        assert resp.status_code == 400

    def test_remove_holding(self, client, service):
        _seed(service, _make_holding("7203.T"), _make_holding("6758.T"))

        resp = client.delete("/api/portfolio/holdings/7203.T")

        assert [h["symbol"] for h in resp.json()["items"]] == ["6758.T"]

    def test_remove_absent(self, client, service):
        _seed(service, _make_holding("7203.T"))

        resp = client.delete("/api/portfolio/holdings/ZZZ")

        assert resp.status_code == 200
        assert len(resp.json()["items"]) == 1

    def test_valuation(self, client, service):
        _seed(
            service,
            _make_holding("7203.T", 10, 2000.0),
            _make_holding("6758.T", 1, 10000.0),
            _make_holding("DELISTED", 5, 10.0),
        )

        data = client.get("/api/portfolio/valuation").json()

        assert [r["holding"]["symbol"] for r in data["items"]] == ["7203.T", "6758.T"]
        assert data["totalValue"] == pytest.approx(38000.0)
        assert data["items"][0]["profit"] == pytest.approx(5000.0)
        assert data["items"][0]["profitPercent"] == pytest.approx(25.0)

    def test_sell_signals(self, client, service):
        _seed(service, _make_holding("7203.T"), _make_holding("PEAK"))

        data = client.get("/api/portfolio/sell-signals").json()

        assert [e["holding"]["symbol"] for e in data] == ["PEAK", "7203.T"]
        assert data[0]["sellSignal"]["isSignal"] is True
        assert data[1]["sellSignal"]["reason"] == "no_sell_signal"
