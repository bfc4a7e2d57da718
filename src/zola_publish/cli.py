"""Command-line entry point for zola-publish."""

import argparse
import json
import logging
import sys

import yaml
from dotenv import load_dotenv

from . import __version__
from .activity import ActivityLog, DocumentLogStore
from .articles import ArticleCatalog, new_article
from .config import Settings, load_settings
from .config_loader import ensure_config, load_hierarchical_config, resolve_config_path
from .config_schema import build_config
from .errors import PublishError
from .logger import setup_logging
from .publish import (
    GitPublisher,
    PreviewStatus,
    PublishOutcome,
    ZolaPreviewLauncher,
    site_project_root,
)
from .sync import (
    SyncEngine,
    compute_sync_status,
    format_activity_log,
    format_dry_run_preview,
    format_sync_report,
    report_to_json,
)

logger = logging.getLogger(__name__)


def _activity_log(args: argparse.Namespace) -> ActivityLog:
    return ActivityLog(DocumentLogStore(resolve_config_path(args.config)))


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


def cmd_init(args: argparse.Namespace, settings: Settings) -> int:
    path = ensure_config(resolve_config_path(args.config))
    print(f"Config file: {path}")
    return 0


def cmd_sync(args: argparse.Namespace, settings: Settings) -> int:
    engine = SyncEngine(settings, activity_log=_activity_log(args))
    report = engine.run(args.command, dry_run=args.dry_run)

    if args.json:
        print(json.dumps(report_to_json(report), indent=2))
    elif args.dry_run:
        print(format_dry_run_preview(report))
    else:
        print(format_sync_report(report))
    return 1 if report.failed else 0


def cmd_status(args: argparse.Namespace, settings: Settings) -> int:
    status = compute_sync_status(settings)
    print(status.message())
    if status.unreadable:
        print(f"{status.unreadable} files could not be compared")
    return 0


def cmd_articles(args: argparse.Namespace, settings: Settings) -> int:
    articles = ArticleCatalog(settings).list_articles()
    if not articles:
        print("No articles found.")
        return 0
    for article in articles:
        marker = " [draft]" if article.draft else ""
        tags = f"  #{' #'.join(article.tags)}" if article.tags else ""
        print(f"{article.date or '----------':<10}  {article.title}{marker}{tags}")
    return 0


def cmd_tags(args: argparse.Namespace, settings: Settings) -> int:
    catalog = ArticleCatalog(settings)
    if args.tag:
        articles = catalog.articles_by_tag(args.tag)
        if not articles:
            print(f"No articles tagged '{args.tag}'.")
        for article in articles:
            print(f"{article.date or '----------':<10}  {article.title}")
        return 0

    counts = catalog.tag_counts()
    if not counts:
        print("No tags found.")
    for tag, count in counts.items():
        print(f"{tag} ({count})")
    return 0


def cmd_new(args: argparse.Namespace, settings: Settings) -> int:
    try:
        path = new_article(settings)
    except FileExistsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Article created: {path}")
    return 0


def cmd_log(args: argparse.Namespace, settings: Settings) -> int:
    activity = _activity_log(args)
    if args.clear:
        activity.clear()
        print("Activity log cleared.")
        return 0
    print(format_activity_log(activity.entries(), verbose=args.verbose))
    return 0


def cmd_publish(args: argparse.Namespace, settings: Settings) -> int:
    workdir = site_project_root(settings)
    publisher = GitPublisher(branch=settings.branch, repo_url=settings.repo_url)
    result = publisher.publish(workdir)

    print(result.message)
    for line in result.details:
        print(f"  {line}")
    if result.outcome is PublishOutcome.PUBLISHED and settings.dashboard_url:
        print(f"Deployment status: {settings.dashboard_url}")

    if result.outcome is not PublishOutcome.NOTHING_TO_COMMIT:
        _activity_log(args).append("publish", result.message, result.details)
    return 1 if result.outcome is PublishOutcome.FAILED else 0


def cmd_preview(args: argparse.Namespace, settings: Settings) -> int:
    launcher = ZolaPreviewLauncher()
    status = launcher.launch(site_project_root(settings))
    if status is PreviewStatus.FAILED:
        print("Failed to start preview. Is zola installed?", file=sys.stderr)
        return 1
    if status is PreviewStatus.ALREADY_RUNNING:
        print(f"Preview already running at {launcher.url}")
        return 0
    print(f"Preview starting at {launcher.url}")
    _activity_log(args).append("preview", f"Started preview at {launcher.url}")
    return 0


_HANDLERS = {
    "init": cmd_init,
    "push": cmd_sync,
    "pull": cmd_sync,
    "status": cmd_status,
    "articles": cmd_articles,
    "tags": cmd_tags,
    "new": cmd_new,
    "log": cmd_log,
    "publish": cmd_publish,
    "preview": cmd_preview,
}


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zola-publish",
        description="Sync an Obsidian vault with a Zola site and publish it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create a starter config in ./.zola_publish/config.yml
  zola-publish init

  # Preview, then push vault articles and images to the site
  zola-publish push --dry-run
  zola-publish push

  # Bring edits made on the site side back into the vault
  zola-publish pull

  # Commit and push the site repository
  zola-publish publish
        """,
    )
    parser.add_argument(
        "--config",
        help="Config file path (takes precedence over ZOLA_PUBLISH_CONFIG and discovered files)",
    )
    parser.add_argument(
        "--vault-root",
        help="Override the vault root (takes precedence over ZOLA_PUBLISH_VAULT_ROOT and config files)",
    )
    parser.add_argument(
        "--site-posts-path",
        help="Override the site posts folder (takes precedence over ZOLA_PUBLISH_SITE_POSTS_PATH)",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        help="Log record format (default: logging.format from config, else text)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"zola-publish version {__version__}",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("init", help="Create a starter config file")
    for name, text in (
        ("push", "Copy vault articles and images to the site"),
        ("pull", "Copy site articles and images back to the vault"),
    ):
        sync_parser = sub.add_parser(name, help=text)
        sync_parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would change without writing",
        )
        sync_parser.add_argument(
            "--json", action="store_true", help="Print the report as JSON"
        )
    sub.add_parser("status", help="Show what a push would write")
    sub.add_parser("articles", help="List articles, newest first")
    tags_parser = sub.add_parser("tags", help="List tags, or articles with a tag")
    tags_parser.add_argument("tag", nargs="?")
    sub.add_parser("new", help="Create today's new article from the template")
    log_parser = sub.add_parser("log", help="Show the activity log")
    log_parser.add_argument(
        "--clear", action="store_true", help="Delete all entries"
    )
    log_parser.add_argument(
        "--verbose", "-v", action="store_true", help="Include entry details"
    )
    sub.add_parser("publish", help="Commit and push the site repository")
    sub.add_parser("preview", help="Start zola serve for the site")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    load_dotenv()
    try:
        config = build_config(load_hierarchical_config(args.config))
    except (ValueError, yaml.YAMLError) as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return 1

    setup_logging(
        debug=args.debug,
        log_file=args.log_file or config.logging.file,
        debug_format=args.log_format or config.logging.format,
        level=config.logging.level,
    )

    overrides = {
        "vault_root": args.vault_root,
        "site_posts_path": args.site_posts_path,
    }
    try:
        settings = load_settings(overrides, config.publish.model_dump())
        return _HANDLERS[args.command](args, settings)
    except (PublishError, ValueError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def run() -> None:
    """Entry point that handles errors gracefully."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
