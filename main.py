"""
RateKeeper - Game Ratings & Reviews

CLI entry point for managing the local user's ratings and reviews.
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from typing import List, Optional

import config.settings as settings
from ratekeeper.models.errors import UserRatingReviewError
from ratekeeper.repository import UserRatingReviewRepository
from ratekeeper.store.json_store import JsonFileRatingReviewStore
from ratekeeper.utils.storage import ExportManager


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler("ratekeeper.log")
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="RateKeeper - Game Ratings & Reviews",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Rate a game 4 stars
  python main.py rate 42 4

  # Write a review
  python main.py review 42 "Great co-op, short campaign"

  # Show rating and review for several games
  python main.py show 42 7 13

  # Latest 20 activity entries
  python main.py activity --limit 20

  # Export everything to CSV
  python main.py export --output-dir ./output
        """
    )

    parser.add_argument(
        "--store-path",
        default=str(settings.DATA_ROOT / settings.STORE_FILENAME),
        help="Path to the JSON store file"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    parser.add_argument(
        "--sanitize",
        action="store_true",
        default=settings.SANITIZE_REVIEW_TEXT,
        help="Clean review text (whitespace, tags) before saving"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    rate = subparsers.add_parser("rate", help="Set the rating (1-5) for a game")
    rate.add_argument("game_id", type=int)
    rate.add_argument("rating", type=int)

    review = subparsers.add_parser("review", help="Set the review text for a game")
    review.add_argument("game_id", type=int)
    review.add_argument("text")

    delete_rating = subparsers.add_parser("delete-rating", help="Remove a game's rating")
    delete_rating.add_argument("game_id", type=int)

    delete_review = subparsers.add_parser("delete-review", help="Remove a game's review")
    delete_review.add_argument("game_id", type=int)

    show = subparsers.add_parser("show", help="Show rating and review for games")
    show.add_argument("game_ids", type=int, nargs="+")

    subparsers.add_parser("stats", help="Show rating statistics")

    activity = subparsers.add_parser("activity", help="Show recent ratings and reviews")
    activity.add_argument(
        "--limit",
        type=int,
        default=settings.DEFAULT_ACTIVITY_LIMIT,
        help=f"Maximum entries (default: {settings.DEFAULT_ACTIVITY_LIMIT})"
    )

    export = subparsers.add_parser("export", help="Export ratings, reviews and stats to CSV")
    export.add_argument(
        "--output-dir",
        default=str(settings.OUTPUT_ROOT),
        help=f"Output directory (default: {settings.OUTPUT_ROOT})"
    )

    return parser


def _format_date(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp / 1000).strftime("%Y-%m-%d %H:%M")


async def run_command(repository: UserRatingReviewRepository, args: argparse.Namespace) -> None:
    """Execute one CLI command against the repository."""
    if args.command == "rate":
        await repository.set_user_rating(args.game_id, args.rating)
        print(f"Rated game {args.game_id}: {args.rating}/5")

    elif args.command == "review":
        await repository.set_user_review(args.game_id, args.text)
        print(f"Saved review for game {args.game_id}")

    elif args.command == "delete-rating":
        await repository.delete_user_rating(args.game_id)
        print(f"Removed rating for game {args.game_id}")

    elif args.command == "delete-review":
        await repository.delete_user_review(args.game_id)
        print(f"Removed review for game {args.game_id}")

    elif args.command == "show":
        for game in await repository.get_games_with_user_data(args.game_ids):
            rating = f"{game.user_rating.rating}/5" if game.has_user_rating else "-"
            print(f"Game {game.game_id}: rating {rating}")
            if game.has_user_review:
                print(f"  Review: {game.user_review.review_text}")

    elif args.command == "stats":
        stats = await repository.get_user_rating_stats()
        print(f"Rated games: {stats.total_rated_games}")
        print(f"Reviews: {stats.total_reviews}")
        print(f"Average rating: {stats.average_rating:.2f}")
        for value, count in sorted(stats.rating_distribution.items(), reverse=True):
            print(f"  {value} stars: {count} ({stats.percentage_for_rating(value):.1f}%)")

    elif args.command == "activity":
        activities = await repository.get_recent_user_activity(args.limit)
        if not activities:
            print("No activity yet")
        for activity in activities:
            when = _format_date(activity.activity_date)
            if activity.rating is not None:
                print(f"[{when}] Rated {activity.game_name}: {activity.rating}/5")
            else:
                print(f"[{when}] Reviewed {activity.game_name}: {activity.review_text}")

    elif args.command == "export":
        ratings = await repository.get_all_user_ratings()
        reviews = await repository.get_all_user_reviews()
        game_ids = sorted({r.game_id for r in ratings} | {r.game_id for r in reviews})

        games = await repository.get_games_with_user_data(game_ids)
        stats = await repository.get_user_rating_stats()

        exporter = ExportManager(args.output_dir)
        data_path = exporter.export_user_data(games, "user_data")
        stats_path = exporter.export_stats(stats, "user_stats")
        print(f"User data: {data_path}")
        print(f"Stats: {stats_path}")


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        store = JsonFileRatingReviewStore(args.store_path)
        repository = UserRatingReviewRepository(store, sanitize_reviews=args.sanitize)

        asyncio.run(run_command(repository, args))

        logger.info(f"Command '{args.command}' completed")
        sys.exit(0)

    except UserRatingReviewError as e:
        logger.warning(f"Command '{args.command}' failed: {e.technical_message}")
        print(f"\n❌ {e.user_message}")
        print(f"   {e.suggested_action}")
        sys.exit(1)

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        print("\n⚠️  Interrupted")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Command '{args.command}' failed: {e}", exc_info=True)
        print(f"\n❌ Command failed: {e}")
        print("Check ratekeeper.log for details")
        sys.exit(1)


if __name__ == "__main__":
    main()


# Design Rationale and Trade-offs:
#
# 1. Why argparse subcommands?
#    - One verb per repository operation
#    - Standard library, matches the rest of the tooling
#    - Trade-off: No interactive prompts
#
# 2. Why one asyncio.run per invocation?
#    - The repository is async; the CLI runs exactly one command
#    - Store locks are created inside that single event loop
#    - Trade-off: No long-lived loop to reuse across commands
#
# 3. Why print user_message and suggested_action instead of the traceback?
#    - The error catalog already holds user-facing wording
#    - Full details still go to ratekeeper.log
#    - Trade-off: Terminal output hides the underlying cause
