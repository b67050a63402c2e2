import asyncio
import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .config import RankerSettings
from .errors import PreferenceValidationError
from .pipeline import DiningRanker
from .schemas import Location, PlaceRecord, RankResult
from .store import HttpAttributeStore, InMemoryAttributeStore
from .validation import parse_preferences

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Dining Ranker - rank nearby restaurants by your preferences")
    parser.add_argument(
        "--candidates", "-c",
        type=Path,
        required=True,
        help="JSON file with a list of place records"
    )
    parser.add_argument(
        "--preferences", "-p",
        type=Path,
        help="JSON file with dining preferences (defaults when omitted)"
    )
    parser.add_argument("--lat", type=float, help="User latitude")
    parser.add_argument("--lng", type=float, help="User longitude")
    parser.add_argument(
        "--limit", "-n",
        type=int,
        default=10,
        help="Number of results to show"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on invalid preferences instead of sanitizing them"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output raw JSON result"
    )
    return parser


def load_candidates(path: Path) -> list[PlaceRecord]:
    with open(path) as f:
        data = json.load(f)
    return [PlaceRecord.model_validate(item) for item in data]


def print_result(result: RankResult, limit: int) -> None:
    if not result.ranked:
        print("\n❌ No businesses to rank")
        return

    if result.used_fallback:
        print("\nℹ️  No preferences set - sorted by rating and distance")
    if result.relaxed:
        print("\n⚠️  Nothing met every must-have; showing closest matches instead")

    print(f"\n🍽️  Top {min(limit, len(result.ranked))} of {len(result.ranked)}:")
    for position, item in enumerate(result.ranked[:limit], start=1):
        attrs = item.attributes
        cuisines = ", ".join(attrs.cuisine_types) or "unknown"
        price = "$" * attrs.price_level if attrs.price_level else "?"
        distance = f"{attrs.distance_from_user:.1f}mi" if attrs.distance_from_user is not None else "?"
        line = f"   {position}. {item.business.name or item.business_id} ({cuisines}, {price}, {distance})"
        if item.score:
            line += f" - {item.score.total_score:.1f}"
            if item.score.unmatched_preferences:
                line += f" | missing: {', '.join(item.score.unmatched_preferences)}"
        print(line)

    metrics = result.metrics
    print(f"\n⏱️  {metrics.total_time:.1f}ms | cache hit rate {metrics.cache_hit_rate:.0%}")


async def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    settings = RankerSettings.from_env()
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO), format=LOG_FORMAT)

    if (args.lat is None) != (args.lng is None):
        print("❌ --lat and --lng must be given together", file=sys.stderr)
        return 2

    raw_preferences = {}
    if args.preferences:
        with open(args.preferences) as f:
            raw_preferences = json.load(f)

    try:
        preferences = parse_preferences(raw_preferences, strict=args.strict)
        candidates = load_candidates(args.candidates)
    except PreferenceValidationError as e:
        print("❌ Invalid preferences:", file=sys.stderr)
        for error in e.errors:
            print(f"   ⚠️ {error}", file=sys.stderr)
        return 2
    except ValidationError as e:
        print(f"❌ Invalid candidates file: {e}", file=sys.stderr)
        return 2

    user_location = Location(lat=args.lat, lng=args.lng) if args.lat is not None else None

    if settings.attribute_store_url:
        store = HttpAttributeStore(settings.attribute_store_url, timeout=settings.attribute_store_timeout)
    else:
        store = InMemoryAttributeStore()

    ranker = DiningRanker(store=store, settings=settings)
    try:
        result = await ranker.rank(candidates, preferences, user_location)
    finally:
        await ranker.aclose()

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        print_result(result, args.limit)
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
