"""Tests for /quotes and /rates routes."""


class TestQuotesRoutes:
    def test_health(self, client):
        assert client.get("/").json() == {"status": "ok"}

    def test_dollar_quotes_merged(self, client):
        body = client.get("/quotes/dollar").json()

        assert body["available"] is True
        assert [q["name"] for q in body["items"]] == [
            "USD Oficial", "USD Blue", "USD CCL", "Banco Nacion", "Fiwind",
        ]

    def test_dollar_category_and_sort(self, client):
        body = client.get("/quotes/dollar", params={"category": "usd", "sort": "sell_desc"}).json()

        assert [q["name"] for q in body["items"]] == ["USD Blue", "USD CCL", "USD Oficial"]

    def test_invalid_sort_rejected(self, client):
        assert client.get("/quotes/dollar", params={"sort": "random"}).status_code == 422

    def test_crypto_token_filter(self, client):
        body = client.get("/quotes/crypto", params={"token": "btc"}).json()

        assert [q["name"] for q in body["items"]] == ["Lemon (BTC)"]

    def test_pix_currency_filter(self, client):
        body = client.get("/quotes/pix", params={"currency": "USD"}).json()

        assert [q["currency"] for q in body["items"]] == ["USD"]

    def test_reference_rate(self, client):
        body = client.get("/quotes/reference-rate").json()

        assert body["rate"] == 1000.0

    def test_assets_by_type(self, client):
        body = client.get("/quotes/assets", params={"type": "accion"}).json()

        assert [a["ticker"] for a in body["items"]] == ["GGAL"]

    def test_assets_unknown_type(self, client):
        assert client.get("/quotes/assets", params={"type": "bono"}).status_code == 422

    def test_refresh_unknown_section(self, client):
        assert client.post("/quotes/refresh", params={"section": "stocks"}).status_code == 422


class TestRatesRoutes:
    def test_rates_sorted_by_rate(self, client):
        body = client.get("/rates", params={"sort": "rate_desc"}).json()

        assert [o["rate"] for o in body["items"]] == [36.0, 28.0, 5.0]

    def test_rates_by_type(self, client):
        body = client.get("/rates", params={"type": "Staking"}).json()

        assert [o["entity"] for o in body["items"]] == ["USDT (Binance)"]

    def test_inflation(self, client):
        assert client.get("/rates/inflation").json() == {"date": "2025-01-01", "percent": 2.5}
