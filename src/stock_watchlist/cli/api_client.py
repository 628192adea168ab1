"""CLI to exercise the stock watchlist API and a local quote stream.

Usage:
  stock-watchlist-cli health
  stock-watchlist-cli search apple
  stock-watchlist-cli quote AAPL --exchange NASDAQ
  stock-watchlist-cli batch AAPL:NASDAQ SHOP.TO:TSX
  stock-watchlist-cli history AAPL --timeframe 1Y --head 5
  stock-watchlist-cli stream AAPL:NASDAQ MSFT:NASDAQ --messages 5 --interval 2
"""
import argparse
import asyncio
import json
import logging
import os
import sys
from collections.abc import Sequence

import httpx

from stock_watchlist.schemas import StockRef, Timeframe


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def parse_pair(value: str) -> StockRef:
    """Parse "SYMBOL:EXCHANGE" (exchange defaults to US) for argparse."""
    symbol, _, exchange = value.partition(":")
    if not symbol.strip():
        raise argparse.ArgumentTypeError(f"invalid pair '{value}', expected SYMBOL:EXCHANGE")
    return StockRef(symbol=symbol.strip().upper(), exchange=exchange.strip() or "US")


def cmd_health(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/health")
    r.raise_for_status()
    data = r.json()
    print_json(data)
    return 0 if data.get("healthy") else 2


def cmd_search(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get("/stocks/search", params={"q": args.query})
    r.raise_for_status()
    data = r.json()
    print(f"Found {len(data)} results for '{args.query}'")
    print_json(data)
    return 0


def cmd_quote(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get(f"/stocks/{args.symbol}", params={"exchange": args.exchange})
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_batch(client: httpx.Client, args: argparse.Namespace) -> int:
    body = {"stocks": [stock.model_dump() for stock in args.stocks]}
    r = client.post("/stocks/quotes", json=body)
    r.raise_for_status()
    data = r.json()
    missing = [stock.key for stock in args.stocks if stock.key not in data]
    print(f"Got {len(data)} of {len(args.stocks)} quotes")
    if missing:
        print(f"No quote for: {', '.join(missing)}", file=sys.stderr)
    print_json(data)
    return 0


def cmd_history(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get(
        f"/stocks/{args.symbol}/history",
        params={"exchange": args.exchange, "timeframe": args.timeframe},
    )
    r.raise_for_status()
    data = r.json()
    print(f"Found {len(data)} candles for {args.symbol} ({args.timeframe})")
    print_json(data[: args.head] if args.head else data)
    return 0


def _stream_run(
    stocks: Sequence[StockRef],
    interval: float,
    duration: float | None,
    max_messages: int | None,
    provider_type: str | None,
) -> int:
    """Poll the configured provider locally and print each changed Quote."""
    from stock_watchlist.providers import create_market_data_provider
    from stock_watchlist.providers.core.stream_helpers import stream_by_polling

    count = 0

    async def run() -> None:
        nonlocal count
        async with create_market_data_provider(provider_type) as provider:
            print(
                f"Streaming {provider.name} quotes for {[s.key for s in stocks]} "
                f"(interval={interval}s, duration={duration}s, "
                f"max_messages={max_messages or 'unlimited'})",
                file=sys.stderr,
            )
            async for quote in stream_by_polling(
                provider, stocks, interval, provider.get_batch_quotes
            ):
                count += 1
                print_json(quote.model_dump(mode="json", by_alias=True))
                if max_messages and count >= max_messages:
                    return

    async def run_with_timeout() -> None:
        if duration and duration > 0:
            try:
                await asyncio.wait_for(run(), timeout=duration)
            except asyncio.TimeoutError:
                print(f"Stopped after {duration}s ({count} messages)", file=sys.stderr)
        else:
            await run()

    try:
        asyncio.run(run_with_timeout())
    except KeyboardInterrupt:
        print(f"\nStopped by user ({count} messages)", file=sys.stderr)
        return 130
    return 0


def cmd_stream(_client: httpx.Client | None, args: argparse.Namespace) -> int:
    return _stream_run(
        args.stocks,
        args.interval,
        args.duration,
        args.messages,
        args.provider,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Exercise the stock watchlist API and a local quote stream.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default="http://localhost:8000",
        help="API base URL (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds (default: 30)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    subparsers.add_parser("health", help="GET /health")

    p = subparsers.add_parser("search", help="GET /stocks/search")
    p.add_argument("query", help="Symbol or company name (e.g. AAPL, apple)")

    p = subparsers.add_parser("quote", help="GET /stocks/{symbol}")
    p.add_argument("symbol", help="Ticker (e.g. AAPL, SHOP.TO)")
    p.add_argument("--exchange", default="US", help="Exchange code (default: US)")

    p = subparsers.add_parser("batch", help="POST /stocks/quotes")
    p.add_argument("stocks", nargs="+", type=parse_pair, help="Pairs as SYMBOL:EXCHANGE")

    p = subparsers.add_parser("history", help="GET /stocks/{symbol}/history")
    p.add_argument("symbol", help="Ticker")
    p.add_argument("--exchange", default="US", help="Exchange code (default: US)")
    p.add_argument(
        "--timeframe",
        choices=[t.value for t in Timeframe],
        default=Timeframe.ONE_MONTH.value,
        help="Chart range (default: 1M)",
    )
    p.add_argument("--head", type=int, default=0, help="Show only first N candles (0 = all)")

    # stream (local provider; no server required)
    p = subparsers.add_parser("stream", help="Poll batch quotes locally and print changes")
    p.add_argument("stocks", nargs="+", type=parse_pair, help="Pairs as SYMBOL:EXCHANGE")
    p.add_argument(
        "--provider",
        default=None,
        help="Provider id (default: MARKET_DATA_PROVIDER or mock)",
    )
    p.add_argument(
        "--interval",
        type=float,
        default=30.0,
        metavar="SECS",
        help="Seconds between polls (default: 30)",
    )
    p.add_argument(
        "--duration",
        type=float,
        default=None,
        metavar="SECS",
        help="Stop after SECS seconds (default: run until Ctrl+C)",
    )
    p.add_argument(
        "--messages",
        type=int,
        default=None,
        metavar="N",
        help="Stop after N messages (default: no limit)",
    )
    return parser


HANDLERS = {
    "health": cmd_health,
    "search": cmd_search,
    "quote": cmd_quote,
    "batch": cmd_batch,
    "history": cmd_history,
}


def main(argv: Sequence[str] | None = None, transport: httpx.BaseTransport | None = None) -> int:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "stream":
        try:
            return cmd_stream(None, args)
        except Exception as e:  # pylint: disable=broad-except
            print(f"Stream error: {e}", file=sys.stderr)
            return 1

    handler = HANDLERS[args.command]
    base_url = args.base_url.rstrip("/")
    try:
        with httpx.Client(base_url=base_url, timeout=args.timeout, transport=transport) as client:
            return handler(client, args)
    except httpx.HTTPStatusError as e:
        print(f"HTTP error: {e.response.status_code}", file=sys.stderr)
        if e.response.content:
            try:
                print(e.response.json(), file=sys.stderr)
            except ValueError:
                print(e.response.text, file=sys.stderr)
        return 1
    except httpx.RequestError as e:
        print(f"Request error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
