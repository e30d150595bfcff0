"""
Suggestion Box - administration CLI

Seeds demo data, prints analytics and the leaderboard, exports CSV files
and maintains the local record store.
"""

import argparse
import logging
import os
import sys

import config.settings as settings
from src.application import SuggestionBoxApp
from src.engine.aggregation import LEADERBOARD_SORT_KEYS
from src.engine.analytics import TIME_WINDOW_DAYS, SuggestionFilter
from src.models.enums import Status
from src.utils.export import export_tables, review_queue_rows, save_csv, to_csv_text


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


def print_banner(title: str, lines=()):
    print("=" * 60)
    print(title)
    print("=" * 60)
    for line in lines:
        print(line)
    if lines:
        print("=" * 60)


def cmd_seed(app: SuggestionBoxApp, args) -> None:
    added = app.suggestions.seed_demo(args.count)
    print(f"Added {added} demo suggestions ({app.store.suggestions.count()} total)")


def cmd_stats(app: SuggestionBoxApp, args) -> None:
    report = app.analytics.report(SuggestionFilter(
        time_window=args.time_window,
        category=args.category,
        status=args.status,
        department=args.department
    ))
    kpis = app.analytics.admin_kpis()

    print(f"Total suggestions:    {report.total_suggestions}")
    print(f"Active users:         {report.active_users}")
    print(f"Implementation rate:  {report.implementation_rate}%")
    print(f"Avg response time:    {report.avg_response_time}")
    print(
        "Sentiment:            "
        + ", ".join(f"{label} {value}%" for label, value in report.sentiment_breakdown.items())
    )
    print()
    print("Categories:")
    for row in report.category_distribution:
        print(f"  {row['category']:<24} {row['count']:>4}  {row['percentage']:>3}%")
    print()
    print("Funnel:")
    for row in report.status_funnel:
        print(f"  {row['stage']:<12} {row['count']:>4}")
    print()
    print("Top tags: " + ", ".join(f"{row['tag']} ({row['count']})" for row in report.top_tags))
    print()
    print(
        f"Review pending: {kpis.review_pending_count} | "
        f"approved this week: {kpis.approved_this_week} | "
        f"implemented this month: {kpis.implemented_this_month} | "
        f"avg pending age: {kpis.avg_pending_age_days} days"
    )


def cmd_leaderboard(app: SuggestionBoxApp, args) -> None:
    entries = app.aggregator.leaderboard(
        department=args.department,
        sort_by=args.sort_by,
        descending=args.descending
    )
    for entry in entries[:args.limit]:
        badges = f"  [{', '.join(entry.badges)}]" if entry.badges else ""
        print(
            f"#{entry.rank:<3} {entry.name:<24} {entry.department:<26} "
            f"{entry.points:>6} pts  {entry.suggestions:>3} ideas  "
            f"{entry.implementations:>3} implemented{badges}"
        )

    print()
    print("Department totals:")
    table = app.aggregator.department_points()
    for row in table.itertuples(index=False):
        print(f"  {row.department:<26} {int(row.points):>6} pts  {int(row.contributors):>3} contributors")


def cmd_export(app: SuggestionBoxApp, args) -> None:
    if args.what == "review-queue":
        rows = review_queue_rows(app.suggestions.review_queue(), app.store.now())
        output = args.output or os.path.join(str(settings.EXPORT_ROOT), "admin_review_queue.csv")
        path = save_csv(to_csv_text(rows), output)
        print(f"Review queue: {path} ({len(rows)} rows)")
        return

    report = app.analytics.report(SuggestionFilter(time_window=args.time_window))
    directory = args.output or str(settings.EXPORT_ROOT)
    for path in export_tables(report.tables(), directory):
        print(f"Analytics table: {path}")


def cmd_recompute(app: SuggestionBoxApp, args) -> None:
    changed = app.suggestions.recompute_all_sentiments()
    print(f"Recomputed sentiments: {changed} of {app.store.suggestions.count()} changed")


def cmd_reset(app: SuggestionBoxApp, args) -> None:
    if not args.yes:
        print("Refusing to reset without --yes")
        sys.exit(2)
    app.store.full_reset()
    print("All stored collections removed")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Suggestion Box - administration CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Add 60 demo suggestions
  python main.py seed

  # Analytics for the last 90 days of one department
  python main.py stats --time-window 90days --department Logistics

  # Export the admin review queue
  python main.py export review-queue --output out/queue.csv
        """
    )

    parser.add_argument(
        "--data-root",
        default=str(settings.DATA_ROOT),
        help=f"Data directory (default: {settings.DATA_ROOT})"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    seed = subparsers.add_parser("seed", help="Append demo suggestions")
    seed.add_argument("--count", type=int, default=settings.DEMO_SEED_COUNT)
    seed.set_defaults(handler=cmd_seed)

    stats = subparsers.add_parser("stats", help="Print the analytics report")
    stats.add_argument("--time-window", default=settings.DEFAULT_TIME_WINDOW, choices=list(TIME_WINDOW_DAYS))
    stats.add_argument("--category")
    stats.add_argument("--status", choices=[status.value for status in Status])
    stats.add_argument("--department")
    stats.set_defaults(handler=cmd_stats)

    leaderboard = subparsers.add_parser("leaderboard", help="Print the contributor ranking")
    leaderboard.add_argument("--department")
    leaderboard.add_argument("--sort-by", default="rank", choices=list(LEADERBOARD_SORT_KEYS))
    leaderboard.add_argument("--descending", action="store_true")
    leaderboard.add_argument("--limit", type=int, default=20)
    leaderboard.set_defaults(handler=cmd_leaderboard)

    export = subparsers.add_parser("export", help="Write CSV exports")
    export.add_argument("what", choices=["review-queue", "analytics"])
    export.add_argument("--output", help="File (review-queue) or directory (analytics)")
    export.add_argument("--time-window", default=settings.DEFAULT_TIME_WINDOW, choices=list(TIME_WINDOW_DAYS))
    export.set_defaults(handler=cmd_export)

    recompute = subparsers.add_parser("recompute-sentiments", help="Re-classify every suggestion")
    recompute.set_defaults(handler=cmd_recompute)

    reset = subparsers.add_parser("reset", help="Remove every stored collection")
    reset.add_argument("--yes", action="store_true", help="Confirm the reset")
    reset.set_defaults(handler=cmd_reset)

    return parser


def main():
    """Main CLI entry point."""
    args = build_parser().parse_args()

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    print_banner("Suggestion Box", [
        f"Command: {args.command}",
        f"Data root: {args.data_root}",
    ])
    print()

    try:
        # A reset must not re-seed the store it is about to clear
        with SuggestionBoxApp(data_root=args.data_root, seed_defaults=args.command != "reset") as app:
            args.handler(app, args)

        logger.info(f"Command {args.command} completed successfully")
        sys.exit(0)

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        print("\n⚠️  Interrupted")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Command {args.command} failed: {e}", exc_info=True)
        print(f"\n❌ Command failed: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        sys.exit(1)


if __name__ == "__main__":
    main()
