"""plantwatch - Facility sensor dashboard with health scores and insights."""

import argparse
import json
import logging
import signal
import sys
from threading import Event
from typing import Optional

__version__ = "0.1.0"

# Global shutdown event for signal handlers
_shutdown_event: Optional[Event] = None

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


def _handle_shutdown(signum: int, frame: object) -> None:
    """Signal handler for graceful shutdown."""
    sig_name = signal.Signals(signum).name
    logger.info("Received %s, initiating shutdown...", sig_name)
    if _shutdown_event is not None:
        _shutdown_event.set()


def _load(args: argparse.Namespace):
    """Load configuration and dataset, exiting with status 1 on failure."""
    from .config import ConfigError, load_config
    from .data import FACILITIES, load_facilities
    from .models import DataError

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if config.data.facilities_file is None:
        return config, FACILITIES

    try:
        return config, load_facilities(config.data.facilities_file)
    except DataError as e:
        print(f"Error: {e}")
        sys.exit(1)


def _cmd_run(args: argparse.Namespace) -> None:
    """Execute the run command - serve the dashboard until interrupted."""
    global _shutdown_event

    _setup_logging(args.verbose)

    logger.info("plantwatch %s starting...", __version__)

    from .api import ApiError, ApiServer
    from .state import DashboardState

    config, facilities = _load(args)
    logger.info(
        "Serving %d facilities with %d control panels",
        len(facilities),
        sum(len(f.control_panels) for f in facilities),
    )

    if not config.server.enabled:
        logger.error("Server is disabled in configuration, nothing to run")
        sys.exit(1)

    _shutdown_event = Event()
    signal.signal(signal.SIGTERM, _handle_shutdown)
    signal.signal(signal.SIGINT, _handle_shutdown)

    server = ApiServer(config.server, facilities, DashboardState(), config.dashboard)
    try:
        server.start()
    except ApiError as e:
        logger.error("Failed to start dashboard server: %s", e)
        sys.exit(1)

    try:
        _shutdown_event.wait()
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    finally:
        server.stop()
        logger.info("Shutdown complete")


def _cmd_summary(args: argparse.Namespace) -> None:
    """Execute the summary command - print per-facility health."""
    from .aggregation import facility_severity, summarize
    from .models import Severity
    from .views import severity_totals

    _, facilities = _load(args)

    for facility in facilities:
        summary = summarize(facility)
        print(f"{facility.name} ({facility.location})")
        print(
            f"  Health: {summary.health_score}% {summary.rating}"
            f" | severity: {facility_severity(facility).value}"
            f" | panels: {len(facility.control_panels)}"
        )
        print(
            f"  Normal {summary.counts[Severity.NORMAL]} ({summary.percentages[Severity.NORMAL]}%)"
            f"  Warning {summary.counts[Severity.WARNING]} ({summary.percentages[Severity.WARNING]}%)"
            f"  Critical {summary.counts[Severity.CRITICAL]} ({summary.percentages[Severity.CRITICAL]}%)"
        )

    totals = severity_totals(facilities)
    print(
        f"Total metrics: {sum(totals.values())}"
        f" | normal {totals['normal']} | warning {totals['warning']} | critical {totals['critical']}"
    )


def _cmd_insights(args: argparse.Namespace) -> None:
    """Execute the insights command - print the current insight list."""
    from .data import display_code
    from .insights import generate_insights, insight_target, insight_to_dict

    _, facilities = _load(args)
    insights = generate_insights(facilities)

    if args.json:
        print(json.dumps([insight_to_dict(i) for i in insights], indent=2))
        return

    for insight in insights:
        print(f"[{insight.type.upper()}] {insight.title}")
        print(f"  {insight.description}")
        target = insight_target(insight)
        if target is not None:
            print(f"  Panel: {display_code(target[1])} (facility {target[0]})")
        print(f"  -> {insight.recommendation}")


def _cmd_notify(args: argparse.Namespace) -> None:
    """Execute the notify command - post current insights to webhooks."""
    _setup_logging(args.verbose)

    from .notifier import InsightNotifier

    config, facilities = _load(args)

    if not config.alerts.webhooks:
        print("Error: No webhooks configured in alerts section")
        sys.exit(1)

    results = InsightNotifier(config.alerts).notify(facilities)
    if not results:
        print("Nothing to send.")
        return

    failed = [url for url, success in results.items() if not success]
    print(f"Delivered to {len(results) - len(failed)}/{len(results)} webhooks")
    if failed:
        sys.exit(1)


def _cmd_test_alert(args: argparse.Namespace) -> None:
    """Execute the test-alert command - verify webhook configuration."""
    from .notifier import InsightNotifier

    config, _ = _load(args)

    if not config.alerts.webhooks:
        print("Error: No webhooks configured in alerts section")
        sys.exit(1)

    print(f"Testing {len(config.alerts.webhooks)} webhook(s)...\n")
    results = InsightNotifier(config.alerts).test_webhooks()

    success_count = sum(1 for success in results.values() if success)
    for url, success in results.items():
        status = "✓ SUCCESS" if success else "✗ FAILED"
        print(f"{status}: {url}")

    print(f"\nResult: {success_count}/{len(results)} webhooks successful")

    if success_count < len(results):
        sys.exit(1)


def _add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to configuration file (default: built-in defaults)",
    )


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the plantwatch package."""
    parser = argparse.ArgumentParser(
        description="plantwatch - Facility sensor dashboard with health scores and insights"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"plantwatch {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Serve the dashboard (default)")
    _add_config_argument(run_parser)
    run_parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose (debug) logging")
    run_parser.set_defaults(func=_cmd_run)

    summary_parser = subparsers.add_parser("summary", help="Print facility health summaries")
    _add_config_argument(summary_parser)
    summary_parser.set_defaults(func=_cmd_summary)

    insights_parser = subparsers.add_parser("insights", help="Print the current insights")
    _add_config_argument(insights_parser)
    insights_parser.add_argument("--json", action="store_true", help="Print insights as JSON")
    insights_parser.set_defaults(func=_cmd_insights)

    notify_parser = subparsers.add_parser("notify", help="Send current insights to configured webhooks")
    _add_config_argument(notify_parser)
    notify_parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose (debug) logging")
    notify_parser.set_defaults(func=_cmd_notify)

    test_alert_parser = subparsers.add_parser("test-alert", help="Test webhook alert configuration")
    _add_config_argument(test_alert_parser)
    test_alert_parser.set_defaults(func=_cmd_test_alert)

    args = parser.parse_args(argv)

    # Default to 'run' if no command specified
    if args.command is None:
        args.config = None
        args.verbose = False
        args.func = _cmd_run

    args.func(args)
