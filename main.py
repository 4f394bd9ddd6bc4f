"""
LeedsLink - Local Marketplace Matching

CLI entry point for the matching engine and rating summaries.
"""

import argparse
import logging
import os
import sys

from leedslink.models.listing import Listing, ListingCategory
from leedslink.models.rating import Rating, RatingCategory
from leedslink.models.user import UserRole
from leedslink.orchestrator import MarketplaceOrchestrator
import config.settings as settings


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="LeedsLink - Local Marketplace Matching",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Seed storage with mock Leeds businesses
  python main.py seed

  # Top matches for one listing
  python main.py top-matches --listing-id <id> --limit 3

  # Urgent requests a supplier could pick up
  python main.py browse --role Supplier --urgent

  # All matches and badge status for a user
  python main.py matches --user-id <id>

  # Rate a user, then show their summary
  python main.py rate --from-user <id> --to-user <id> --rating 5 \\
                      --category "Communication" --review "Quick replies"
  python main.py summary --user-id <id>

  # Export a user's match table to CSV
  python main.py report --user-id <id>
        """
    )

    parser.add_argument(
        "--data-root",
        default=str(settings.DATA_ROOT),
        help=f"Data directory (default: {settings.DATA_ROOT})"
    )

    parser.add_argument(
        "--registry-path",
        default=None,
        help="Path to rating registry JSON (default: <data-root>/rating_registry.json)"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("seed", help="Load mock users, listings and ratings")

    top = subparsers.add_parser("top-matches", help="Ranked matches for a listing")
    top.add_argument("--listing-id", required=True)
    top.add_argument(
        "--limit",
        type=int,
        default=settings.TOP_MATCHES_LIMIT,
        help=f"Maximum matches (default: {settings.TOP_MATCHES_LIMIT})"
    )

    browse = subparsers.add_parser("browse", help="Discover listings, newest first")
    browse.add_argument(
        "--role",
        choices=[r.value for r in UserRole],
        help="Viewer role (default: the signed-in user's role)"
    )
    browse.add_argument("--category", choices=[c.value for c in ListingCategory])
    browse.add_argument("--urgent", action="store_true", help="Only urgent listings")

    matches = subparsers.add_parser("matches", help="Unique matches across a user's listings")
    matches.add_argument("--user-id", required=True)

    rate = subparsers.add_parser("rate", help="Submit a rating (replaces an earlier one)")
    rate.add_argument("--from-user", required=True)
    rate.add_argument("--to-user", required=True)
    rate.add_argument("--rating", type=int, required=True, help="Stars, clamped to 1-5")
    rate.add_argument(
        "--category",
        default=RatingCategory.OVERALL.value,
        choices=[c.value for c in RatingCategory]
    )
    rate.add_argument("--review")

    summary = subparsers.add_parser("summary", help="Rating summary for a user")
    summary.add_argument("--user-id", required=True)

    report = subparsers.add_parser("report", help="Write a user's match table to CSV")
    report.add_argument("--user-id", required=True)
    report.add_argument("--output-dir", default=str(settings.OUTPUT_ROOT))

    return parser


def _describe(listing: Listing) -> str:
    urgent = " [URGENT]" if listing.is_urgent else ""
    return f"{listing.title} ({listing.type.value}, {listing.category.value}){urgent}"


def run_command(args, orchestrator: MarketplaceOrchestrator) -> None:
    if args.command == "seed":
        if orchestrator.seed_mock_data():
            print(f"Seeded mock data into {args.data_root}")
        else:
            print("Listings already present, nothing seeded")
        for user in orchestrator.storage.get_all_users():
            print(f"  {user.id}  {user.name} ({user.role.value})")

    elif args.command == "top-matches":
        listing = orchestrator.get_listing(args.listing_id)
        print(f"Top matches for: {_describe(listing)}")
        ranked = orchestrator.top_matches(args.listing_id, args.limit)
        if not ranked:
            print("  No matches")
        for rank, (match, score) in enumerate(ranked, start=1):
            print(f"  {rank}. [{score}] {_describe(match)}  {match.id}")

    elif args.command == "browse":
        found = orchestrator.browse_listings(
            role=args.role,
            category=args.category,
            urgent_only=args.urgent
        )
        print(f"Listings: {len(found)}")
        for listing in found:
            print(f"  - {_describe(listing)}  {listing.id}")

    elif args.command == "matches":
        found = orchestrator.matches_for_user(args.user_id)
        print(f"Matches found: {len(found)}")
        for match in found:
            print(f"  - {_describe(match)}  {match.id}")
        badge = len(found) >= orchestrator.match_aggregator.badge_threshold
        print(f"Local Partner badge: {'yes' if badge else 'no'}")

    elif args.command == "rate":
        rating = Rating(
            from_user_id=args.from_user,
            to_user_id=args.to_user,
            rating=args.rating,
            category=args.category,
            review=args.review
        )
        summary = orchestrator.submit_rating(rating)
        print(f"Stored {rating.rating}-star rating for {args.to_user}")
        print(f"New average: {summary.average_rating:.2f} ({summary.total_ratings} ratings)")

    elif args.command == "summary":
        summary = orchestrator.rating_summary(args.user_id)
        print(f"User: {summary.user_id}")
        print(f"Average: {summary.average_rating:.2f} from {summary.total_ratings} ratings")
        for stars in range(5, 0, -1):
            print(f"  {stars} stars: {summary.rating_breakdown.get(stars, 0)}")
        for category, mean in summary.category_ratings.items():
            print(f"  {category.value}: {mean:.2f}")

    elif args.command == "report":
        output_path = orchestrator.generate_match_report(args.user_id, args.output_dir)
        print(f"Match table: {output_path}")
        print(f"Metadata: {output_path.replace('.csv', '_metadata.json')}")


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    # Ratings live beside the users and listings they refer to
    args.registry_path = args.registry_path or os.path.join(args.data_root, settings.REGISTRY_FILENAME)

    try:
        orchestrator = MarketplaceOrchestrator(
            data_root=args.data_root,
            registry_path=args.registry_path
        )
        run_command(args, orchestrator)
        logger.info(f"Command '{args.command}' completed successfully")
        sys.exit(0)

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        print("\nInterrupted")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Command '{args.command}' failed: {e}", exc_info=True)
        print(f"\nFailed: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        sys.exit(1)


if __name__ == "__main__":
    main()
