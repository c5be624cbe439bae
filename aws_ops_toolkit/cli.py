"""
Command Line Interface for AWS Ops Toolkit

Global options (--mock/--real, --format, --profile, --region, -v) belong to
each leaf subcommand and may appear anywhere after the subcommand name.
"""

import argparse
import logging
import sys

from .config import GlobalOptions
from .errors import USAGE_EXIT_CODE, OpsError
from .main import OpsToolkit

NOTES = """\
Notes:
  - Default mode is --mock (no AWS credentials required).
  - In --real mode, requires AWS CLI configured.
  - s3 clean only deletes with --apply; --dry-run is the default.
"""


def non_negative_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected an integer, got {value!r}"
        ) from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def positive_int(value):
    number = non_negative_int(value)
    if number == 0:
        raise argparse.ArgumentTypeError("must be >= 1")
    return number


def shared_options():
    """Parent parser carrying the global options"""
    parser = argparse.ArgumentParser(add_help=False)
    group = parser.add_argument_group("global options")
    mode = group.add_mutually_exclusive_group()
    mode.add_argument(
        "--mock",
        dest="mode",
        action="store_const",
        const="mock",
        help="Use bundled fixture data (default)",
    )
    mode.add_argument(
        "--real",
        dest="mode",
        action="store_const",
        const="real",
        help="Query AWS through the installed aws CLI",
    )
    group.add_argument(
        "--format",
        choices=["table", "structured", "json"],
        default="table",
        help="Output format (default: table; json is an alias of structured)",
    )
    group.add_argument("--profile", type=str, help="AWS credentials profile")
    group.add_argument("--region", type=str, help="AWS region")
    group.add_argument(
        "-v", "--verbose", action="store_true", help="Print diagnostics to stderr"
    )
    parser.set_defaults(mode="mock")
    return parser


def build_parser():
    """Build the argument parser for every command"""
    parser = argparse.ArgumentParser(
        prog="aws-ops",
        description="AWS Ops Toolkit (dual-mode)",
        epilog=NOTES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    shared = shared_options()
    commands = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    doctor = commands.add_parser("doctor", help="Check the runtime environment")
    doctor.set_defaults(handler=cmd_doctor)

    # ec2
    ec2 = commands.add_parser("ec2", help="EC2 instances")
    ec2_commands = ec2.add_subparsers(
        dest="subcommand", metavar="SUBCOMMAND", required=True
    )
    ec2_list = ec2_commands.add_parser("list", parents=[shared], help="List instances")
    ec2_list.set_defaults(handler=cmd_ec2_list)
    ec2_health = ec2_commands.add_parser(
        "health", parents=[shared], help="Check instance health"
    )
    ec2_health.set_defaults(handler=cmd_ec2_health)

    # s3
    s3 = commands.add_parser("s3", help="S3 objects")
    s3_commands = s3.add_subparsers(
        dest="subcommand", metavar="SUBCOMMAND", required=True
    )
    s3_clean = s3_commands.add_parser(
        "clean", parents=[shared], help="Find (and optionally delete) old objects"
    )
    s3_clean.add_argument("bucket", help="Bucket name")
    s3_clean.add_argument(
        "--older-than",
        type=non_negative_int,
        required=True,
        metavar="DAYS",
        help="Select objects last modified more than DAYS days ago",
    )
    s3_clean.add_argument(
        "--dry-run",
        dest="apply",
        action="store_const",
        const=False,
        help="Only report what would be deleted (default)",
    )
    s3_clean.add_argument(
        "--apply",
        dest="apply",
        action="store_const",
        const=True,
        help="Actually delete the selected objects",
    )
    s3_clean.set_defaults(apply=False, handler=cmd_s3_clean)

    # logs
    logs = commands.add_parser("logs", help="Log files")
    logs_commands = logs.add_subparsers(
        dest="subcommand", metavar="SUBCOMMAND", required=True
    )
    logs_analyze = logs_commands.add_parser(
        "analyze", parents=[shared], help="Rank warnings and errors in a log file"
    )
    logs_analyze.add_argument("path", help="Log file path")
    logs_analyze.add_argument(
        "--since-min",
        type=non_negative_int,
        default=0,
        metavar="MIN",
        help="Only consider the last MIN minutes (default: 0, no filtering)",
    )
    logs_analyze.add_argument(
        "--top",
        type=positive_int,
        metavar="N",
        help="Number of entries to show (default: 10)",
    )
    logs_analyze.set_defaults(handler=cmd_logs_analyze)

    return parser


class LevelTagFormatter(logging.Formatter):
    """Formats records as `[info] message`"""

    def format(self, record):
        return f"[{record.levelname.lower()}] {super().format(record)}"


def configure_logging(verbose):
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(LevelTagFormatter("%(message)s"))
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        handlers=[handler],
        force=True,
    )


def cmd_doctor(args, options):
    return 0 if OpsToolkit(options).doctor() else USAGE_EXIT_CODE


def cmd_ec2_list(args, options):
    print(OpsToolkit(options).ec2_list())
    return 0


def cmd_ec2_health(args, options):
    print(OpsToolkit(options).ec2_health())
    return 0


def cmd_s3_clean(args, options):
    print(OpsToolkit(options).s3_clean(args.bucket, args.older_than, apply=args.apply))
    return 0


def cmd_logs_analyze(args, options):
    toolkit = OpsToolkit(options)
    print(toolkit.logs_analyze(args.path, since_min=args.since_min, top=args.top))
    return 0


def main(argv=None):
    """Main entry point"""
    argv = sys.argv[1:] if argv is None else list(argv)
    parser = build_parser()

    if not argv:
        parser.print_help(sys.stderr)
        return USAGE_EXIT_CODE
    if argv[0] == "help":
        parser.print_help()
        return 0

    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse has already printed usage (exit 2) or help (exit 0)
        return e.code if isinstance(e.code, int) else USAGE_EXIT_CODE

    options = GlobalOptions.from_args(args)
    configure_logging(options.verbose)

    try:
        return args.handler(args, options)
    except OpsError as e:
        if e.report is not None:
            print(e.report)
        print(f"ERROR: {e}", file=sys.stderr)
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
