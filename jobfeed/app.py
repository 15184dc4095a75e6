import argparse
import asyncio
from typing import List, Optional

from . import __version__
from .bookmarks import BookmarkStore
from .client import JobsApiClient
from .config import LOG_LEVELS, Settings, load_settings
from .env import load_env
from .feed import JobFeedController
from .fields import JobCard, job_card, job_details, share_message, share_title
from .logger import get_logger
from .storage import open_store


def print_alert(title: str, message: str) -> None:
    print(f"[{title}] {message}")


def build_controller(settings: Settings) -> JobFeedController:
    store = open_store(settings)
    client = JobsApiClient(settings.api_endpoint, timeout=settings.timeout)
    return JobFeedController(client, BookmarkStore(store), on_alert=print_alert)


def print_card(card: JobCard, saved: bool = False) -> None:
    marker = "  [saved]" if saved else ""
    print(f"#{card.id} {card.title}{marker}")
    print(f"  Company: {card.company}")
    print(f"  Location: {card.location}")
    print(f"  Salary: {card.salary}")
    print(f"  Phone: {card.phone}")
    if card.image_url:
        print(f"  Logo: {card.image_url}")
    print()


async def load_pages(controller: JobFeedController, pages: int) -> None:
    """Initial load followed by load-more until `pages` pages are in."""
    await controller.start()
    while controller.state.page < pages and controller.state.has_more and not controller.state.error:
        before = controller.state.page
        await controller.load_more()
        # a page of invalid records does not advance; stop instead of re-asking
        if controller.state.page == before:
            break


async def locate_job(controller: JobFeedController, job_id: int, pages: int) -> dict:
    await controller.load_bookmarks()
    job = controller.find_job(job_id)
    if job is None:
        await load_pages(controller, pages)
        job = controller.find_job(job_id)
    if job is None:
        if controller.state.error:
            raise SystemExit(f"Error: {controller.state.error}")
        print(f"Job {job_id} not found in bookmarks or the first {pages} page(s).")
        raise SystemExit(2)
    return job


async def cmd_list(args: argparse.Namespace, settings: Settings) -> None:
    controller = build_controller(settings)
    await load_pages(controller, args.pages)

    view = controller.view_state()
    if view == "error":
        raise SystemExit(f"Error: {controller.state.error}")
    if view == "empty":
        print("No jobs found matching your criteria.")
        return

    banner = controller.banner()
    if banner:
        print(banner)
        print()
    for job in controller.state.jobs:
        print_card(job_card(job), saved=controller.is_bookmarked(job.get("id")))
    state = controller.state
    more = "more available" if state.has_more else "end of list"
    print(f"{len(state.jobs)} jobs, page {state.page} ({more})")


async def cmd_show(args: argparse.Namespace, settings: Settings) -> None:
    controller = build_controller(settings)
    job = await locate_job(controller, args.job_id, args.pages)
    details = job_details(job)

    print(details.title)
    print(f"Company: {details.company}")
    print(f"Location: {details.location}")
    print(f"Salary: {details.salary}")
    print(f"Job Role: {details.job_role}")
    print(f"Experience: {details.experience}")
    print(f"Qualification: {details.qualification}")
    if details.description:
        print()
        print("Description")
        print(details.description)
    print()
    print("Actions")
    if details.whatsapp_link:
        print(f"  Apply via WhatsApp: {details.whatsapp_link}")
    else:
        print("  WhatsApp: WhatsApp contact link is not provided for this job.")
    if details.call_url:
        print(f"  {details.call_label}: {details.call_url}")
    print(f"  Share: jobfeed share {details.id}")
    print(f"  Bookmark: {'saved' if controller.is_bookmarked(job.get('id')) else 'not saved'}")


async def cmd_save(args: argparse.Namespace, settings: Settings) -> None:
    controller = build_controller(settings)
    job = await locate_job(controller, args.job_id, args.pages)
    if not await controller.toggle_bookmark(job):
        raise SystemExit("Could not update bookmarks.")
    if controller.is_bookmarked(job.get("id")):
        print(f"Saved #{args.job_id}")
    else:
        print(f"Removed #{args.job_id}")


async def cmd_bookmarks(args: argparse.Namespace, settings: Settings) -> None:
    controller = build_controller(settings)
    bookmarks = await controller.load_bookmarks()
    if not bookmarks:
        print("No bookmarks yet.")
        return
    print(f"{len(bookmarks)} saved jobs:\n")
    for job in bookmarks:
        if not isinstance(job, dict) or job.get("id") is None:
            get_logger().warning("Skipping invalid bookmark entry", entry=job)
            continue
        print_card(job_card(job))


async def cmd_remove(args: argparse.Namespace, settings: Settings) -> None:
    controller = build_controller(settings)
    await controller.load_bookmarks()
    if not controller.is_bookmarked(args.job_id):
        print(f"Job {args.job_id} is not bookmarked.")
        raise SystemExit(2)
    if not args.yes:
        answer = input("Remove bookmark? Are you sure? [y/N] ").strip().lower()
        if answer not in ("y", "yes"):
            print("Cancelled.")
            return
    if not await controller.remove_bookmark(args.job_id):
        raise SystemExit("Could not remove bookmark.")
    print(f"Removed #{args.job_id}")


async def cmd_share(args: argparse.Namespace, settings: Settings) -> None:
    controller = build_controller(settings)
    job = await locate_job(controller, args.job_id, args.pages)
    print(share_title(job))
    print()
    print(share_message(job))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobfeed", description="Browse and bookmark job listings")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, help="Log level (default: JOBFEED_LOG_LEVEL or INFO)")
    parser.add_argument("--metrics", action="store_true", help="Log a metrics summary when the command ends")

    subparsers = parser.add_subparsers(dest="command")

    lst = subparsers.add_parser("list", help="List jobs from the feed")
    lst.add_argument("--pages", type=int, default=1, help="Number of pages to load (default: 1)")
    lst.set_defaults(func=cmd_list)

    show = subparsers.add_parser("show", help="Show the details of one job")
    show.add_argument("job_id", type=int, help="Job id")
    show.add_argument("--pages", type=int, default=3, help="Feed pages to search (default: 3)")
    show.set_defaults(func=cmd_show)

    save = subparsers.add_parser("save", help="Bookmark a job, or unbookmark it if already saved")
    save.add_argument("job_id", type=int, help="Job id")
    save.add_argument("--pages", type=int, default=3, help="Feed pages to search (default: 3)")
    save.set_defaults(func=cmd_save)

    bms = subparsers.add_parser("bookmarks", help="List saved jobs")
    bms.set_defaults(func=cmd_bookmarks)

    rm = subparsers.add_parser("remove", help="Remove a saved job")
    rm.add_argument("job_id", type=int, help="Job id")
    rm.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    rm.set_defaults(func=cmd_remove)

    share = subparsers.add_parser("share", help="Print a shareable message for a job")
    share.add_argument("job_id", type=int, help="Job id")
    share.add_argument("--pages", type=int, default=3, help="Feed pages to search (default: 3)")
    share.set_defaults(func=cmd_share)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    # Load .env if present (JOBFEED_API_ENDPOINT, JOBFEED_STORAGE, etc.)
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    try:
        settings = load_settings()
    except ValueError as e:
        raise SystemExit(f"Invalid configuration: {e}")
    logger = get_logger(level=args.log_level or settings.log_level, log_dir=settings.log_dir)

    if not hasattr(args, "func"):
        parser.print_help()
        return
    if getattr(args, "pages", 1) < 1:
        raise SystemExit("--pages must be at least 1")

    try:
        asyncio.run(args.func(args, settings))
    finally:
        if args.metrics:
            logger.log_metrics_summary()
        else:
            logger.debug("Session finished", metrics=logger.get_metrics())


if __name__ == "__main__":
    main()
