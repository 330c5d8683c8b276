"""Command-line interface for the perp risk calculator."""
from __future__ import annotations

import argparse
import asyncio
import sys

from .config import load_config
from .logging_setup import configure_logging
from .models import SIDES
from .services import RiskService


def _add_position_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("market", help="Market symbol, e.g. BTC/USD")
    parser.add_argument("side", choices=list(SIDES), help="Position side")
    parser.add_argument(
        "--collateral", type=float, required=True, help="Collateral in USD"
    )
    parser.add_argument(
        "--leverage", type=float, default=10.0, help="Leverage (default: 10)"
    )
    parser.add_argument(
        "--entry-price",
        type=float,
        default=None,
        help="Entry price (default: current price)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="perp-risk",
        description="Liquidation price and dynamic spread calculator",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    check_parser = sub.add_parser("check", help="Evaluate a position once")
    _add_position_args(check_parser)
    check_parser.add_argument(
        "--current-price",
        type=float,
        default=None,
        help="Current price (default: fetched from Binance)",
    )
    check_parser.add_argument(
        "--no-spread",
        action="store_true",
        help="Skip the dynamic spread adjustment",
    )

    watch_parser = sub.add_parser("watch", help="Re-evaluate on every price refresh")
    _add_position_args(watch_parser)
    watch_parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Refresh interval in seconds (overrides config)",
    )

    profile_parser = sub.add_parser(
        "profile", help="Liquidation distance across leverage settings"
    )
    profile_parser.add_argument("side", choices=list(SIDES), help="Position side")
    profile_parser.add_argument("--collateral", type=float, default=100.0)
    profile_parser.add_argument("--entry-price", type=float, required=True)
    profile_parser.add_argument("--current-price", type=float, default=None)
    profile_parser.add_argument(
        "--step", type=int, default=5, help="Leverage step (default: 5)"
    )

    return parser


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    service = RiskService(config)

    if args.command == "check":
        assessment = await service.assess(
            args.market,
            args.side,
            args.collateral,
            args.leverage,
            entry_price=args.entry_price,
            current_price=args.current_price,
            with_spread=not args.no_spread,
        )
        if assessment is None:
            return 1
        print(service.format_result(assessment))
    elif args.command == "watch":
        await service.run_continuous(
            args.market,
            args.side,
            args.collateral,
            args.leverage,
            entry_price=args.entry_price,
            interval_seconds=args.interval,
        )
    elif args.command == "profile":
        points = service.profile(
            args.side,
            args.collateral,
            args.entry_price,
            current_price=args.current_price,
            step=args.step,
        )
        print(service.format_profile(points))
    else:
        build_parser().print_help()
        return 1
    return 0


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        sys.exit(asyncio.run(_run(args)))
    except ValueError as e:
        parser.error(str(e))
