from __future__ import annotations

import argparse
import json
import logging
import sys
from decimal import ROUND_DOWN, Decimal, InvalidOperation

from bfx.errors import BfxError
from cag.config import GatewayConfig
from cag.service import GatewayService
from mkt.catalog import CRYPTO_ASSETS, CryptoAsset, find_by_symbol
from ops.errors import OpsInsufficientBalanceError, OpsValidationError
from ops.service import CreateOrderCommand
from thr.errors import ThrStorageError, ThrValidationError
from thr.validators import ASSET_FILTERS, TIME_FILTERS

DEFAULT_DISCOUNT = Decimal("0.97")

_LOGGER = logging.getLogger("cryptoconnector.cli")


def _print_json(payload: object) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def discounted_price(ltp: Decimal, discount: Decimal) -> Decimal:
    return (ltp * discount).quantize(Decimal("1"), rounding=ROUND_DOWN)


def place_discounted_buy(service: GatewayService, asset: CryptoAsset, discount: Decimal) -> dict:
    ticker = service.exchange_gateway.fetch_ticker(asset.product_code)
    price = discounted_price(ticker.ltp, discount)
    _LOGGER.info(
        "Placing discounted buy: pair=%s ltp=%s price=%s size=%s",
        asset.pair,
        format(ticker.ltp, "f"),
        format(price, "f"),
        format(asset.min_order_size, "f"),
    )
    command = CreateOrderCommand(pair=asset.pair, order_type="limit", price=price, amount=asset.min_order_size)
    return service.ops_service.create_order(command)


def _parse_discount(value: str) -> Decimal | None:
    try:
        discount = Decimal(value)
    except InvalidOperation:
        return None
    if not discount.is_finite() or not Decimal("0") < discount <= Decimal("1"):
        return None
    return discount


def _run_buy(service: GatewayService, args: argparse.Namespace) -> int:
    if args.asset:
        asset = find_by_symbol(args.asset)
        if asset is None:
            print(f"unsupported asset: {args.asset}", file=sys.stderr)
            return 2
        assets: tuple[CryptoAsset, ...] = (asset,)
    else:
        assets = CRYPTO_ASSETS

    discount = _parse_discount(args.discount)
    if discount is None:
        print(f"discount must be in (0, 1]: {args.discount}", file=sys.stderr)
        return 2

    failures = 0
    for asset in assets:
        try:
            _print_json(place_discounted_buy(service, asset, discount))
        except (OpsValidationError, OpsInsufficientBalanceError, BfxError) as exc:
            failures += 1
            _LOGGER.error("Buy order failed: pair=%s error=%s", asset.pair, exc)
    return 1 if failures else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Crypto connector CLI")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("balance", help="Show available JPY balance")

    buy_parser = subparsers.add_parser("buy", help="Place a minimum-size limit buy below the current price")
    buy_parser.add_argument("--asset", help="BTC or ETH; all catalog assets when omitted")
    buy_parser.add_argument("--discount", default=str(DEFAULT_DISCOUNT), help="Fraction of the last price (default 0.97)")

    stats_parser = subparsers.add_parser("stats", help="Show trade statistics")
    stats_parser.add_argument("--asset", default="all", choices=ASSET_FILTERS)
    stats_parser.add_argument("--period", default="all", choices=TIME_FILTERS)
    return parser


def main(argv: list[str] | None = None, *, service: GatewayService | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    if service is None:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
        service = GatewayService(GatewayConfig.from_env())

    try:
        if args.command == "balance":
            _print_json(service.get_balance())
            return 0
        if args.command == "buy":
            return _run_buy(service, args)
        if args.command == "stats":
            _print_json(service.get_trade_statistics(args.asset, args.period))
            return 0
    except (ThrValidationError, ThrStorageError, BfxError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return 1


if __name__ == "__main__":
    sys.exit(main())
