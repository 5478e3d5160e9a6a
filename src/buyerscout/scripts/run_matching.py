"""
Script to rank the buyer database for one property.

Scores every buyer against the property given on the command line and
prints the ranking.

Usage:
    python -m buyerscout.scripts.run_matching --county Orange --price 50000 --acres 0.25
    buyerscout-match --county Polk --price 30000 --acres 1 --flood-zone "Zone AE" --json
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from typing import Optional

import structlog

from buyerscout.config import BUYER_TYPES, FLORIDA_COUNTIES, PURCHASE_STRATEGIES, get_settings
from buyerscout.database import BuyerRepository
from buyerscout.matching import BuyerMatch, BuyerSearchFilters, MatchingEngine, filter_buyers
from buyerscout.matching.engine import SORT_KEYS
from buyerscout.models import FloodZone, Property, RoadAccess, Utilities

logger = structlog.get_logger()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        stream=sys.stderr,
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _county(value: str) -> str:
    for county in FLORIDA_COUNTIES:
        if county.casefold() == value.strip().casefold():
            return county
    raise argparse.ArgumentTypeError(f"Unknown Florida county: {value}")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Not an integer: {value}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"Must be 1 or more: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Rank land buyers for a Florida property"
    )
    prop = parser.add_argument_group("property")
    prop.add_argument("--county", required=True, type=_county, help="Florida county")
    prop.add_argument("--price", required=True, type=float, help="Asking price in USD")
    prop.add_argument("--acres", required=True, type=float, help="Lot size in acres")
    prop.add_argument("--address", default="", help="Street address")
    prop.add_argument("--zoning", default="Residential", help="Zoning (not scored)")
    prop.add_argument(
        "--flood-zone",
        default=FloodZone.UNKNOWN.value,
        choices=[z.value for z in FloodZone],
    )
    prop.add_argument(
        "--utilities",
        default=Utilities.NONE.value,
        choices=[u.value for u in Utilities],
    )
    prop.add_argument(
        "--road-access",
        default=RoadAccess.PAVED.value,
        choices=[r.value for r in RoadAccess],
    )

    search = parser.add_argument_group("buyers")
    search.add_argument("--buyers", default=None, help="Buyers JSON file (default: settings)")
    search.add_argument("--buyer-id", default=None, help="Score a single buyer from the database")
    search.add_argument(
        "--filter-county",
        action="append",
        type=_county,
        default=[],
        help="Keep buyers targeting this county (repeatable)",
    )
    search.add_argument("--filter-price-min", type=float, default=0, help="Buyer price range overlaps this minimum")
    search.add_argument("--filter-price-max", type=float, default=None, help="Buyer price range overlaps this maximum")
    search.add_argument("--filter-acres-min", type=float, default=0, help="Buyer lot range overlaps this minimum")
    search.add_argument("--filter-acres-max", type=float, default=None, help="Buyer lot range overlaps this maximum")
    search.add_argument("--buyer-type", default=None, choices=BUYER_TYPES)
    search.add_argument("--strategy", default=None, choices=PURCHASE_STRATEGIES)
    search.add_argument("--min-deals", type=int, default=0, help="Minimum lots bought in 6 months")
    search.add_argument("--active-only", action="store_true", help="Skip inactive buyers")
    search.add_argument(
        "--consistent-history", action="store_true", help="Keep buyers with 5+ lots in 12 months"
    )

    output = parser.add_argument_group("output")
    output.add_argument("--min-score", type=int, default=None, help="Minimum total score")
    output.add_argument("--limit", type=_positive_int, default=20, help="Maximum buyers to show")
    output.add_argument("--sort-by", default="score", choices=SORT_KEYS)
    output.add_argument("--reasoning", action="store_true", help="Include match reasoning")
    output.add_argument("--ai", action="store_true", help="Add AI analysis for top matches")
    output.add_argument("--outreach", action="store_true", help="Draft SMS, email and call script for top matches")
    output.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    return parser


def match_to_dict(match: BuyerMatch) -> dict:
    data = {
        "buyer_id": match.buyer.id,
        "company_name": match.buyer.company_name,
        "total_score": match.result.total_score,
        "breakdown": dict(match.result.breakdown),
        "confidence": asdict(match.result.confidence),
    }
    if match.reasoning is not None:
        data["reasoning"] = {
            "matched": match.reasoning.matched,
            "not_matched": match.reasoning.not_matched,
            "summary": match.reasoning.summary,
            "suggested_offer": asdict(match.reasoning.suggested_offer),
            "strength_level": match.reasoning.strength_level.value,
        }
    if match.analysis is not None:
        data["analysis"] = asdict(match.analysis)
    if match.outreach is not None:
        data["outreach"] = asdict(match.outreach)
    return data


def render_table(matches: list[BuyerMatch]) -> str:
    if not matches:
        return "No matching buyers."
    lines = [f"{'#':>3}  {'Score':>5}  {'Company':<32} {'Deals 6mo':>9}  Counties"]
    for rank, match in enumerate(matches, start=1):
        buyer = match.buyer
        lines.append(
            f"{rank:>3}  {match.score:>5}  {buyer.display_name[:32]:<32} "
            f"{buyer.total_lots_acquired_6mo:>9}  {', '.join(buyer.target_counties)}"
        )
        if match.reasoning is not None:
            lines.append(f"{'':>12}{match.reasoning.summary}")
            offer = match.reasoning.suggested_offer
            lines.append(f"{'':>12}Suggested offer: ${offer.low:,} - ${offer.high:,}")
        if match.analysis is not None and match.analysis.why_good_fit:
            lines.append(f"{'':>12}AI: {match.analysis.why_good_fit[0]}")
        if match.outreach is not None:
            lines.append(f"{'':>12}SMS: {match.outreach.sms}")
    return "\n".join(lines)


def run(args: argparse.Namespace, engine: Optional[MatchingEngine] = None) -> list[BuyerMatch]:
    """Loads buyers, applies the search filters and ranks them."""
    prop = Property(
        address=args.address,
        county=args.county,
        asking_price=args.price,
        lot_size_acres=args.acres,
        zoning=args.zoning,
        flood_zone=args.flood_zone,
        utilities=args.utilities,
        road_access=args.road_access,
    )

    repo = BuyerRepository(args.buyers)
    if args.buyer_id is not None:
        buyer = repo.get(args.buyer_id)
        if buyer is None:
            raise ValueError(f"Unknown buyer id: {args.buyer_id}")
        buyers = [buyer]
    else:
        filters = BuyerSearchFilters(
            counties=args.filter_county,
            price_min=args.filter_price_min,
            price_max=args.filter_price_max,
            lot_size_min=args.filter_acres_min,
            lot_size_max=args.filter_acres_max,
            buyer_type=args.buyer_type,
            strategy=args.strategy,
            min_deals=args.min_deals,
            active_only=args.active_only,
            consistent_history=args.consistent_history,
        )
        buyers = filter_buyers(repo.list(), filters)

    engine = engine or MatchingEngine()
    matches = engine.rank_buyers(
        prop,
        buyers,
        min_score=args.min_score,
        sort_by=args.sort_by,
        limit=args.limit,
        with_reasoning=args.reasoning,
    )

    if args.ai and matches:
        asyncio.run(engine.analyze_matches(prop, matches))
    if args.outreach and matches:
        asyncio.run(engine.draft_outreach(prop, matches))

    return matches


def main(argv: Optional[list[str]] = None):
    """Script entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(get_settings().log_level)

    try:
        matches = run(args)
        if args.json:
            print(json.dumps([match_to_dict(m) for m in matches], indent=2))
        else:
            print(render_table(matches))
        sys.exit(0)

    except KeyboardInterrupt:
        logger.info("Matching interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.error("Fatal error while matching", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
