"""CLI for the SDLC Controller issue scheduler."""

import argparse
import logging
import sys

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from sdlc_controller.core.config import load_analyzer_config, load_app_config
from sdlc_controller.scheduler import ControllerError, GraphValidationError, PriorityAnalyzer


def setup_logging(level: str = "INFO"):
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _analyze(args):
    load_dotenv()
    app_config = load_app_config()
    setup_logging(app_config.log_level)

    analyzer = PriorityAnalyzer(load_analyzer_config(args.config))
    return analyzer.analyze_file(args.file)


def cmd_analyze(args):
    """Analyze command handler."""
    result = _analyze(args)

    if args.json:
        print(result.to_json())
        return

    stats = result.statistics
    print(f"\nAnalyzed {stats.total_issues} issues ({stats.total_dependencies} dependencies)\n")

    print("Execution groups:")
    for group in result.parallel_groups:
        print(f"  [{group.group_index}] {', '.join(group.issue_ids)} (effort {group.total_effort:g})")

    path = result.critical_path
    print(f"\nCritical path: {' -> '.join(path.issue_ids) or '-'} (effort {path.total_effort:g})")
    if path.bottleneck:
        print(f"  Bottleneck: {path.bottleneck}")

    queue = result.prioritized_queue
    print(f"\nReady: {', '.join(queue.ready_for_execution) or '-'}")
    print(f"Blocked: {', '.join(queue.blocked) or '-'}")

    for cycle in result.cycles:
        print(f"Cycle: {' -> '.join(cycle.issue_ids)}")
    for warning in result.warnings:
        print(f"Warning: {warning}")


def cmd_next(args):
    """Next command handler."""
    result = _analyze(args)
    issue_id = result.get_next_executable_issue()

    if issue_id is None:
        print("No issue is ready to start")
        return

    issue = result.issues[issue_id]
    print(f"{issue_id}\t{issue.node.title}\t(score {issue.priority_score:g})")


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="SDLC Controller - Issue dependency scheduler"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Build an execution plan")
    analyze_parser.add_argument("file", help="Path to a JSON issue graph")
    analyze_parser.add_argument(
        "--config", "-c",
        help="Path to analyzer config file",
        default=None,
    )
    analyze_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full result as JSON",
    )
    analyze_parser.set_defaults(func=cmd_analyze)

    # Next command
    next_parser = subparsers.add_parser("next", help="Show the next issue to start")
    next_parser.add_argument("file", help="Path to a JSON issue graph")
    next_parser.add_argument(
        "--config", "-c",
        help="Path to analyzer config file",
        default=None,
    )
    next_parser.set_defaults(func=cmd_next)

    args = parser.parse_args(argv)
    try:
        args.func(args)
    except GraphValidationError as e:
        for error in e.errors:
            print(f"error: {error}", file=sys.stderr)
        sys.exit(1)
    except (ControllerError, FileNotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
    except (yaml.YAMLError, ValidationError) as e:
        print(f"error: invalid analyzer config: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
