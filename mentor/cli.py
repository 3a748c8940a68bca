#!/usr/bin/env python3
"""
Time Mentor Command Line Interface

Main entry point for the `mentor` command.

Usage:
    mentor analyze --usage-file usage.json --consent   # Profile + reminder intents
    mentor analyze --usage '{"productive": 1800000}' --schedule
    mentor sentiment --text "stuck on this again"      # Score one text sample
    mentor reminders active                            # Pending / awaiting reminders
    mentor reminders due                               # Deliver due reminders
    mentor reminders snooze <id> --minutes 10
    mentor reminders dismiss <id>
    mentor --version                                   # Show version
"""

import argparse
import json
import sys
from pathlib import Path


# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def _print(result: dict) -> int:
    print(json.dumps(result, indent=2, default=str))
    return 0 if result.get("success") else 1


def cmd_version(args):
    """Show version information."""
    try:
        from importlib.metadata import version

        v = version("time-mentor")
    except Exception:
        v = "0.1.0 (development)"

    print(f"Time Mentor version {v}")


def cmd_analyze(args):
    """Recompute the emotion profile from a stored usage record.

    With --schedule the resulting reminder intents are also pushed into the
    reminder queue, which drops repeats inside each type's dedupe window.
    """
    from mentor.automation import reminder_queue
    from mentor.automation.reminder_queue import intent_from_dict
    from mentor.emotion.config_models import load_config
    from mentor.emotion.snapshot import recompute

    try:
        if args.usage_file:
            with open(args.usage_file) as f:
                usage = json.load(f)
        elif args.usage:
            usage = json.loads(args.usage)
        else:
            return _print({"success": False, "error": "--usage or --usage-file required"})
    except (OSError, json.JSONDecodeError) as e:
        return _print({"success": False, "error": f"Could not read usage: {e}"})

    config = load_config(Path(args.config) if args.config else None)
    result = recompute(usage, "cli" if args.consent else None, config)

    if result.get("success") and args.schedule:
        intents = [intent_from_dict(r) for r in result["reminders"]]
        result["queue"] = reminder_queue.schedule_intents(intents)

    return _print(result)


def cmd_sentiment(args):
    """Score a single text sample."""
    from mentor.emotion.sentiment import explain

    return _print(explain(args.text))


def cmd_reminders(args):
    """Inspect and act on queued reminders."""
    from mentor.automation import reminder_queue

    if args.reminders_command == "active":
        reminders = reminder_queue.active_reminders()
        return _print({"success": True, "reminders": reminders, "count": len(reminders)})

    if args.reminders_command == "list":
        try:
            reminders = reminder_queue.list_reminders(status=args.status, limit=args.limit)
        except ValueError as e:
            return _print({"success": False, "error": str(e)})
        return _print({"success": True, "reminders": reminders, "count": len(reminders)})

    if args.reminders_command == "due":
        return _print(reminder_queue.deliver_due())

    if args.reminders_command == "snooze":
        return _print(reminder_queue.snooze_reminder(args.id, args.minutes))

    if args.reminders_command == "dismiss":
        return _print(reminder_queue.dismiss_reminder(args.id))

    if args.reminders_command == "stats":
        return _print(reminder_queue.get_stats())

    print("Usage: mentor reminders {active,list,due,snooze,dismiss,stats}")
    return 1


def main():
    """Main CLI entry point."""
    from mentor.logging_config import setup_logging

    parser = argparse.ArgumentParser(
        prog="mentor",
        description="Time Mentor - Focus and mood insights from browsing telemetry",
    )
    parser.add_argument(
        "--version", "-V", action="store_true", help="Show version and exit"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Analyze subcommand
    analyze_parser = subparsers.add_parser(
        "analyze", help="Build the emotion profile and reminder intents from usage"
    )
    analyze_parser.add_argument("--usage", help="JSON usage record")
    analyze_parser.add_argument("--usage-file", help="Path to a JSON usage record")
    analyze_parser.add_argument(
        "--consent", action="store_true", help="Include opted-in text samples"
    )
    analyze_parser.add_argument(
        "--schedule", action="store_true", help="Queue the resulting reminder intents"
    )
    analyze_parser.add_argument("--config", help="Path to an emotion.yaml override")
    analyze_parser.set_defaults(func=cmd_analyze)

    # Sentiment subcommand
    sentiment_parser = subparsers.add_parser(
        "sentiment", help="Score the sentiment of a text sample"
    )
    sentiment_parser.add_argument("--text", required=True, help="Text sample")
    sentiment_parser.set_defaults(func=cmd_sentiment)

    # Reminders subcommand
    reminders_parser = subparsers.add_parser(
        "reminders", help="Reminder queue management"
    )
    reminders_subparsers = reminders_parser.add_subparsers(
        dest="reminders_command", help="Reminder commands"
    )

    reminders_active = reminders_subparsers.add_parser(
        "active", help="Show pending and awaiting-action reminders"
    )
    reminders_active.set_defaults(func=cmd_reminders)

    reminders_list = reminders_subparsers.add_parser(
        "list", help="List reminders, newest first"
    )
    reminders_list.add_argument("--status", help="Filter by status")
    reminders_list.add_argument("--limit", type=int, default=50, help="Result limit")
    reminders_list.set_defaults(func=cmd_reminders)

    reminders_due = reminders_subparsers.add_parser(
        "due", help="Deliver reminders whose due time has passed"
    )
    reminders_due.set_defaults(func=cmd_reminders)

    reminders_snooze = reminders_subparsers.add_parser(
        "snooze", help="Snooze an active reminder"
    )
    reminders_snooze.add_argument("id", help="Reminder ID")
    reminders_snooze.add_argument(
        "--minutes", type=int, default=None, help="Snooze length (default from config)"
    )
    reminders_snooze.set_defaults(func=cmd_reminders)

    reminders_dismiss = reminders_subparsers.add_parser(
        "dismiss", help="Dismiss a reminder"
    )
    reminders_dismiss.add_argument("id", help="Reminder ID")
    reminders_dismiss.set_defaults(func=cmd_reminders)

    reminders_stats = reminders_subparsers.add_parser(
        "stats", help="Reminder counts by type and status"
    )
    reminders_stats.set_defaults(func=cmd_reminders)

    reminders_parser.set_defaults(func=cmd_reminders)

    args = parser.parse_args()

    # Handle --version at top level
    if args.version:
        cmd_version(args)
        return

    # If no command given, show help
    if not args.command:
        parser.print_help()
        return

    setup_logging()

    # Execute command
    result = args.func(args)

    # Commands may return an exit code
    if isinstance(result, int) and result != 0:
        sys.exit(result)


if __name__ == "__main__":
    main()
