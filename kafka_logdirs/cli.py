"""kafka-logdirs command-line interface."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, List, Optional

from kafka_logdirs import __version__
from kafka_logdirs.core.config import get_settings
from kafka_logdirs.core.exceptions import LogDirsError
from kafka_logdirs.domain.services.logdir_service import LogDirService
from kafka_logdirs.infra.kafka.admin import KafkaAdminFacade
from kafka_logdirs.infra.kafka.targets import UNSCOPED_BROKER
from kafka_logdirs.presenters import (
    dump_log_dirs_json,
    dump_move_outcomes_json,
    render_log_dirs,
    render_move_outcomes,
)

LOG = logging.getLogger("kafka_logdirs")

AdminFactory = Callable[[str], KafkaAdminFacade]

DESCRIBE_HELP = """\
Describe log directories for topic partitions (Kafka 1.0.0+).

The size of a directory is the absolute size of log segments of a partition,
in bytes. Offset lag is how far behind the log end offset is compared to the
partition's high watermark, or, for a "future" directory, compared to the
current replica's log end offset:

  OffsetLag = isFuture
              ? localLogEndOffset - futureLogEndOffset
              : max(localHighWaterMark - logEndOffset, 0)

A directory is a "future" directory if it was created by replica-log-dirs and
will replace the replica's current log directory.

Input format is topic:1,2,3. A bare topic describes all of its partitions; no
topics at all describes everything.

By default the request goes to the partition leaders (every broker when
describing everything). Use --broker to ask one broker about its replicas.
"""

MOVE_HELP = """\
Move topic partition replicas to other log directories (Kafka 1.0.0+, KIP-113).

The input syntax is topic:1,2,3=/destination/directory.

By default the request goes to the partition leaders. Use --broker to move
the replicas hosted on one broker.
"""


def _add_broker_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-b", "--broker", type=int, default=UNSCOPED_BROKER,
                        help="a specific broker to direct the request to")


class DescribeLogDirsCommand:

    @classmethod
    def add_subparser(cls, subparsers):
        parser = subparsers.add_parser(
            "log-dirs",
            help="Describe log directories for topic partitions",
            description=DESCRIBE_HELP,
            epilog="examples:\n  log-dirs foo:1,2,3 bar:3,4,5\n  log-dirs foo\n  log-dirs",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        parser.add_argument("topics", nargs="*", metavar="TOPIC[:P,...]")
        _add_broker_option(parser)
        parser.set_defaults(command=cls.run)

    @staticmethod
    def run(svc: LogDirService, args: argparse.Namespace) -> None:
        dirs = svc.describe(args.topics, broker=args.broker)
        if args.format == "json":
            dump_log_dirs_json(dirs, sys.stdout)
        else:
            render_log_dirs(dirs, sys.stdout)


class AlterReplicaLogDirsCommand:

    @classmethod
    def add_subparser(cls, subparsers):
        parser = subparsers.add_parser(
            "replica-log-dirs",
            help="Move topic replicas to a destination directory",
            description=MOVE_HELP,
            epilog="example:\n  replica-log-dirs foo:1,2,3=/dir bar:6=/dir2 baz:9=/dir",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        parser.add_argument("assignments", nargs="+", metavar="TOPIC:P[,P...]=DIR")
        _add_broker_option(parser)
        parser.set_defaults(command=cls.run)

    @staticmethod
    def run(svc: LogDirService, args: argparse.Namespace) -> None:
        outcomes = svc.alter_replica_log_dirs(args.assignments, broker=args.broker)
        if args.format == "json":
            dump_move_outcomes_json(outcomes, sys.stdout)
        else:
            render_move_outcomes(outcomes, sys.stdout)


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    ap = argparse.ArgumentParser(
        prog="kafka-logdirs",
        description="Inspect and move Kafka partition log directories",
        allow_abbrev=False,
    )
    ap.add_argument("-X", "--bootstrap-servers",
                    default=settings.bootstrap_servers,
                    help="Comma-separated bootstrap servers")
    ap.add_argument("--format", choices=["text", "json"],
                    default=settings.output_format,
                    help="Table output or the raw response as JSON")
    ap.add_argument("--log-level", default=settings.log_level,
                    help="Logging level (DEBUG, INFO, WARNING, ERROR)")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    commands = ap.add_subparsers(dest="subcommand", metavar="COMMAND")
    commands.required = True
    for cmd in [DescribeLogDirsCommand, AlterReplicaLogDirsCommand]:
        cmd.add_subparser(commands)
    return ap


def setup_logging(level: str) -> None:
    lvl = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(level=lvl, stream=sys.stderr,
                        format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    if lvl > logging.DEBUG:
        # kafka-python logs every connection at INFO
        logging.getLogger("kafka").setLevel(max(lvl, logging.WARNING))


def main(argv: Optional[List[str]] = None, admin_factory: Optional[AdminFactory] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    factory = admin_factory or (lambda servers: KafkaAdminFacade(bootstrap_servers=servers))
    admin = factory(args.bootstrap_servers)
    try:
        args.command(LogDirService(admin), args)
    except LogDirsError as exc:
        LOG.debug("command failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        admin.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
