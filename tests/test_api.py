"""API tests over an in-memory database with a fake advisory client."""

from datetime import date


def _create_trade(client, **overrides) -> dict:
    payload = {
        "portfolio_id": "default",
        "trade_date": "2024-01-01",
        "symbol": "eur/usd",
        "entry": 100,
        "stop_loss": 90,
        "take_profit": 130,
        "result": "Win",
        "pnl": 150,
    }
    payload.update(overrides)
    response = client.post("/api/trades", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


# ---------------------------------------------------------------------------
# 1. Portfolios and system
# ---------------------------------------------------------------------------

def test_health(client):
    assert client.get("/api/system/health").json() == {"status": "ok"}


def test_list_portfolios_seeds_default(client):
    portfolios = client.get("/api/portfolios").json()
    assert portfolios == [{"id": "default", "name": "Main Portfolio", "currency": "USD", "initial_balance": 10000.0}]


def test_create_and_update_portfolio(client):
    created = client.post("/api/portfolios", json={"name": "  Prop  ", "currency": "eur", "initial_balance": 2500})
    assert created.status_code == 201
    body = created.json()
    assert body["name"] == "Prop"
    assert body["currency"] == "EUR"

    updated = client.put(f"/api/portfolios/{body['id']}", json={"initial_balance": 3000})
    assert updated.json()["initial_balance"] == 3000
    assert updated.json()["name"] == "Prop"


def test_unknown_path_is_404(client):
    assert client.get("/dashboard/overview").status_code == 404


def test_unknown_portfolio_is_404(client):
    assert client.get("/api/portfolios/nope").status_code == 404
    assert client.get("/api/dashboard/nope/summary").status_code == 404


def test_onboarding_flag(client):
    assert client.get("/api/system/onboarding").json() == {"onboarded": False}
    client.put("/api/system/onboarding", json={"onboarded": True})
    assert client.get("/api/system/onboarding").json() == {"onboarded": True}


# ---------------------------------------------------------------------------
# 2. Trades
# ---------------------------------------------------------------------------

class TestTradesApi:
    def test_create_stamps_rr_and_symbol(self, client, portfolio):
        trade = _create_trade(client)
        assert trade["rr"] == 3.0
        assert trade["symbol"] == "EUR/USD"
        assert trade["portfolio_id"] == "default"

    def test_create_rejects_empty_symbol(self, client, portfolio):
        response = client.post("/api/trades", json={"portfolio_id": "default", "symbol": "   "})
        assert response.status_code == 422

    def test_create_for_unknown_portfolio_is_404(self, client, portfolio):
        response = client.post("/api/trades", json={"portfolio_id": "ghost", "symbol": "EURUSD"})
        assert response.status_code == 404

    def test_update_recomputes_rr(self, client, portfolio):
        trade = _create_trade(client)
        response = client.put(f"/api/trades/{trade['id']}", json={"take_profit": 120, "notes": "scaled out"})
        assert response.status_code == 200
        assert response.json()["rr"] == 2.0
        assert response.json()["notes"] == "scaled out"

    def test_update_ignores_null_for_required_fields(self, client, portfolio):
        trade = _create_trade(client)
        response = client.put(
            f"/api/trades/{trade['id']}",
            json={"entry": None, "symbol": None, "session": None, "trade_date": None},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["entry"] == 100
        assert body["symbol"] == "EUR/USD"
        assert body["session"] == trade["session"]
        assert body["trade_date"] == "2024-01-01"
        assert body["rr"] == 3.0

    def test_update_null_clears_screenshot(self, client, portfolio):
        trade = _create_trade(client, entry_image="data:image/png;base64,aGk=")
        response = client.put(f"/api/trades/{trade['id']}", json={"entry_image": None})
        assert response.status_code == 200
        assert response.json()["entry_image"] is None

    def test_update_cannot_move_portfolio(self, client, portfolio):
        trade = _create_trade(client)
        response = client.put(f"/api/trades/{trade['id']}", json={"portfolio_id": "other"})
        assert response.json()["portfolio_id"] == "default"

    def test_list_filters(self, client, portfolio):
        _create_trade(client, trade_date="2024-01-02")
        _create_trade(client, result="Pending", pnl=0)
        assert len(client.get("/api/trades", params={"portfolio_id": "default"}).json()) == 2
        pending = client.get("/api/trades", params={"portfolio_id": "default", "result": "Pending"}).json()
        assert [t["result"] for t in pending] == ["Pending"]

    def test_delete_removes_exactly_one(self, client, portfolio):
        keep = _create_trade(client)
        gone = _create_trade(client)
        assert client.delete(f"/api/trades/{gone['id']}").status_code == 204
        assert client.get(f"/api/trades/{gone['id']}").status_code == 404
        remaining = client.get("/api/trades", params={"portfolio_id": "default"}).json()
        assert [t["id"] for t in remaining] == [keep["id"]]
        assert client.delete(f"/api/trades/{gone['id']}").status_code == 404


# ---------------------------------------------------------------------------
# 3. Dashboard
# ---------------------------------------------------------------------------

class TestDashboardApi:
    def test_summary(self, client, portfolio):
        _create_trade(client, pnl=150)
        _create_trade(client, result="Loss", pnl=-50, take_profit=110)
        _create_trade(client, result="Pending", pnl=0)

        summary = client.get("/api/dashboard/default/summary").json()
        assert summary["equity"] == 10100
        assert summary["net_pnl"] == 100
        assert summary["win_rate"] == 50.0
        assert summary["avg_rr"] == 2.0
        assert summary["closed_trades"] == 2
        assert summary["total_trades"] == 3

    def test_equity_curve(self, client, portfolio):
        _create_trade(client, trade_date="2024-01-03", pnl=-25)
        _create_trade(client, trade_date="2024-01-02", pnl=100)
        curve = client.get("/api/dashboard/default/equity").json()
        assert curve == [
            {"date": "Initial", "balance": 10000},
            {"date": "2024-01-02", "balance": 10100},
            {"date": "2024-01-03", "balance": 10075},
        ]

    def test_breakdowns(self, client, portfolio):
        _create_trade(client, trade_date="2024-01-01", entry_type="Retest", pnl=40)
        _create_trade(client, trade_date="2024-01-08", entry_type="Breakout", result="Loss", pnl=-10)
        data = client.get("/api/dashboard/default/breakdowns").json()
        assert [row["key"] for row in data["strategy"]] == ["Retest", "Breakout"]
        assert data["day"] == [{"key": "Monday", "count": 2, "wins": 1, "pnl": 30, "win_rate": 50.0}]

    def test_calendar(self, client, portfolio):
        _create_trade(client, trade_date="2023-02-06", pnl=80)
        data = client.get("/api/dashboard/default/calendar", params={"year": 2023, "month": 2}).json()
        assert data["leading_blanks"] == 3
        assert len(data["days"]) == 28
        assert data["days"][5] == {"day": 6, "key": "2023-02-06", "pnl": 80.0, "trade_count": 1}
        assert data["weeks"][1]["active"] is True
        assert data["weeks"][1]["pnl"] == 80.0
        assert data["weeks"][0]["active"] is False
        assert data["weeks"][0]["pnl"] is None
        assert data["previous"] == {"year": 2023, "month": 1}
        assert data["next"] == {"year": 2023, "month": 3}

    def test_calendar_defaults_to_current_month(self, client, portfolio):
        today = date.today()
        data = client.get("/api/dashboard/default/calendar").json()
        assert (data["year"], data["month"]) == (today.year, today.month)

    def test_calendar_rejects_bad_month(self, client, portfolio):
        response = client.get("/api/dashboard/default/calendar", params={"year": 2024, "month": 13})
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# 4. Analysis
# ---------------------------------------------------------------------------

class TestAnalysisApi:
    def test_trade_critique_is_applied_and_shown(self, client, portfolio, fake_advisor):
        trade = _create_trade(client)
        response = client.post(f"/api/analysis/trades/{trade['id']}").json()
        assert response["applied"] is True
        assert response["content"] == "critique of EUR/USD"
        assert fake_advisor.critiqued == [trade["id"]]

        latest = client.get("/api/analysis/default/latest").json()
        assert latest["trade_id"] == trade["id"]
        assert latest["request_id"] == response["request_id"]

    def test_deleting_trade_clears_its_critique(self, client, portfolio):
        trade = _create_trade(client)
        client.post(f"/api/analysis/trades/{trade['id']}")
        client.delete(f"/api/trades/{trade['id']}")
        assert client.get("/api/analysis/default/latest").json()["content"] is None

    def test_critique_unknown_trade_is_404(self, client, portfolio):
        assert client.post("/api/analysis/trades/missing").status_code == 404

    def test_patterns(self, client, portfolio, fake_advisor):
        response = client.post("/api/analysis/default/patterns").json()
        assert response["applied"] is True
        assert response["themes"][0]["theme"] == "Revenge Escalation"
        assert response["themes"][0]["totalPnL"] == -250.0
        assert fake_advisor.pattern_calls == 1

    def test_market_search(self, client, fake_advisor):
        response = client.post("/api/analysis/market", json={"query": "gold"}).json()
        assert response["text"] == "notes on gold"
        assert response["sources"] == [{"title": "Wire", "uri": "https://example.com"}]
        assert fake_advisor.queries == ["gold"]

    def test_market_search_requires_query(self, client):
        assert client.post("/api/analysis/market", json={"query": ""}).status_code == 422
