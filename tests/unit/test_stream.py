"""Tests for polling streams and stream-parameter parsing."""

import asyncio

from fastapi.websockets import WebSocketState

from stock_watchlist.providers import MockProvider
from stock_watchlist.providers.core.stream_helpers import stream_by_polling
from stock_watchlist.schemas import Quote, StockRef
from stock_watchlist.services.utils import handle_websocket_stream, parse_stocks_param


def make_quote(symbol: str, price: float) -> Quote:
    return Quote(symbol=symbol, exchange="US", price=price, change=0.0, change_percent=0.0)


class ScriptedFetch:
    """fetch_quotes stand-in returning one scripted round per call."""

    def __init__(self, rounds: list[dict[str, Quote]]) -> None:
        self.rounds = rounds
        self.calls = 0

    async def __call__(self, stocks):
        round_ = self.rounds[min(self.calls, len(self.rounds) - 1)]
        self.calls += 1
        return round_


class TestStreamByPolling:
    async def test_dedups_unchanged_prices(self):
        provider = MockProvider(simulate_latency=False)
        stocks = [StockRef(symbol="AAPL", exchange="US")]
        fetch = ScriptedFetch(
            [
                {"AAPL:US": make_quote("AAPL", 100.0)},
                {"AAPL:US": make_quote("AAPL", 100.0)},
                {"AAPL:US": make_quote("AAPL", 101.0)},
            ]
        )
        stop = asyncio.Event()
        prices = []

        async for quote in stream_by_polling(provider, stocks, 0, fetch, stop_event=stop):
            prices.append(quote.price)
            if len(prices) == 2:
                stop.set()

        assert prices == [100.0, 101.0]
        assert fetch.calls == 3

    async def test_without_dedup_repeats(self):
        provider = MockProvider(simulate_latency=False)
        stocks = [StockRef(symbol="AAPL", exchange="US")]
        fetch = ScriptedFetch([{"AAPL:US": make_quote("AAPL", 100.0)}])
        stop = asyncio.Event()
        prices = []

        async for quote in stream_by_polling(
            provider, stocks, 0, fetch, dedup_by_value=False, stop_event=stop
        ):
            prices.append(quote.price)
            if len(prices) == 3:
                stop.set()

        assert prices == [100.0, 100.0, 100.0]

    async def test_close_stops_provider_driven_stream(self):
        provider = MockProvider(simulate_latency=False)
        stocks = [StockRef(symbol="AAPL", exchange="US")]
        count = 0

        async for _ in stream_by_polling(
            provider, stocks, 0, provider.get_batch_quotes, dedup_by_value=False
        ):
            count += 1
            assert provider.streaming is True
            if count == 2:
                await provider.close()

        assert count == 2
        assert provider.streaming is False

    async def test_no_pairs(self):
        provider = MockProvider(simulate_latency=False)
        fetch = ScriptedFetch([{}])
        assert [q async for q in stream_by_polling(provider, [], 0, fetch)] == []
        assert fetch.calls == 0


class TestParseStocksParam:
    def test_pairs(self):
        stocks = parse_stocks_param({"stocks": "AAPL:NASDAQ, shop.to:TSX"})
        assert [s.key for s in stocks] == ["AAPL:NASDAQ", "SHOP.TO:TSX"]

    def test_default_exchange(self):
        assert parse_stocks_param({"stocks": "MSFT"})[0].key == "MSFT:US"

    def test_duplicates_and_blanks_dropped(self):
        stocks = parse_stocks_param({"stocks": "AAPL:NASDAQ,,AAPL:NASDAQ, :X"})
        assert [s.key for s in stocks] == ["AAPL:NASDAQ"]

    def test_missing(self):
        assert parse_stocks_param({}) == []


class FakeWebSocket:
    """Records what the handler sends; the client leaves after `leave_after` messages."""

    def __init__(self, leave_after: int | None = None) -> None:
        self.leave_after = leave_after
        self.sent: list[dict] = []
        self.closed_with: int | None = None
        self.client_state = WebSocketState.CONNECTING
        self.application_state = WebSocketState.CONNECTING
        self._left = asyncio.Event()

    async def accept(self):
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED

    async def send_json(self, data):
        self.sent.append(data)
        if self.leave_after is not None and len(self.sent) >= self.leave_after:
            self._left.set()

    async def receive(self):
        await self._left.wait()
        self.client_state = WebSocketState.DISCONNECTED
        return {"type": "websocket.disconnect", "code": 1000}

    async def close(self, code=1000, reason=None):
        self.closed_with = code
        self.application_state = WebSocketState.DISCONNECTED


class FiniteSource:
    def __init__(self, quotes: list[Quote]) -> None:
        self.quotes = quotes

    async def stream_quotes(self, stocks, *, stop_event=None):
        for quote in self.quotes:
            yield quote


class EndlessSource:
    def __init__(self) -> None:
        self.stop_event: asyncio.Event | None = None

    async def stream_quotes(self, stocks, *, stop_event=None):
        self.stop_event = stop_event
        price = 100.0
        while True:
            price += 1
            yield make_quote("AAPL", price)
            await asyncio.sleep(0)


class FailingSource:
    async def stream_quotes(self, stocks, *, stop_event=None):
        yield make_quote("AAPL", 100.0)
        raise RuntimeError("upstream exploded")


class TestHandleWebsocketStream:
    stocks = [StockRef(symbol="AAPL", exchange="US")]

    async def test_closes_after_finite_stream(self):
        ws = FakeWebSocket()
        source = FiniteSource([make_quote("AAPL", 100.0), make_quote("AAPL", 101.0)])

        await asyncio.wait_for(handle_websocket_stream(ws, source, self.stocks, "need stocks"), 1)

        assert [m["price"] for m in ws.sent] == [100.0, 101.0]
        assert "changePercent" in ws.sent[0]
        assert ws.closed_with == 1000

    async def test_client_disconnect_stops_endless_stream(self):
        ws = FakeWebSocket(leave_after=3)
        source = EndlessSource()

        await asyncio.wait_for(handle_websocket_stream(ws, source, self.stocks, "need stocks"), 1)

        assert len(ws.sent) >= 3
        assert ws.closed_with is None
        assert source.stop_event is not None and source.stop_event.is_set()

    async def test_stream_error_closes_with_1011(self):
        ws = FakeWebSocket()

        await asyncio.wait_for(handle_websocket_stream(ws, FailingSource(), self.stocks, "need stocks"), 1)

        assert len(ws.sent) == 1
        assert ws.closed_with == 1011

    async def test_no_pairs_closes_with_4000(self):
        ws = FakeWebSocket()

        await handle_websocket_stream(ws, FiniteSource([]), [], "need stocks")

        assert ws.sent == []
        assert ws.closed_with == 4000
