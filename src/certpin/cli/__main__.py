import sys
import logging
import argparse

from rich.console import Console
from rich.logging import RichHandler

from .info import info
from .verify import verify
from .. import __version__, constants
from ..config import load_config, get_config, DEFAULT_CONFIG

__module__ = "certpin.cli"

REMOTE_URL = "https://github.com/certpin/certpin"

console = Console()
logger = logging.getLogger(__name__)
cli = argparse.ArgumentParser(
    prog="certpin",
    description=f"Release {__version__} {REMOTE_URL}",
    add_help=False,
)


class _HelpAction(argparse._HelpAction):  # pylint: disable=protected-access
    def __call__(self, parser, namespace, values, option_string=None):
        parser.print_help()
        parser.exit()


def _configure_logging(args: argparse.Namespace) -> int:
    log_level = logging.CRITICAL
    if args.log_level_error:
        log_level = logging.ERROR
    if args.log_level_warning:
        log_level = logging.WARNING
    if args.log_level_info:
        log_level = logging.INFO
    if args.log_level_debug:
        log_level = logging.DEBUG

    handlers = []
    log_format = "%(asctime)s - %(name)s - [%(levelname)s] %(message)s"
    if not args.quiet and sys.stdout.isatty():
        log_format = "%(message)s"
        handlers.append(RichHandler(rich_tracebacks=True))
    logging.basicConfig(format=log_format, level=log_level, handlers=handlers or None)
    return log_level


def main():
    cli.add_argument("--version", dest="show_version", action="store_true")
    cli.add_argument(
        "-q",
        "--quiet",
        help="show no stdout, rely on the exit status (0 valid, 1 invalid, 2 malformed input)",
        dest="quiet",
        action="store_true",
    )
    cli.add_argument(
        "-p",
        "--config-path",
        help=f"Provide the path to a configuration file (Default: {DEFAULT_CONFIG})",
        dest="config_file",
        default=DEFAULT_CONFIG,
    )
    group = cli.add_mutually_exclusive_group()
    group.add_argument(
        "-v",
        "--errors-only",
        help="set logging level to ERROR (default CRITICAL)",
        dest="log_level_error",
        action="store_true",
    )
    group.add_argument(
        "-vv",
        "--warning",
        help="set logging level to WARNING (default CRITICAL)",
        dest="log_level_warning",
        action="store_true",
    )
    group.add_argument(
        "-vvv",
        "--info",
        help="set logging level to INFO (default CRITICAL)",
        dest="log_level_info",
        action="store_true",
    )
    group.add_argument(
        "-vvvv",
        "--debug",
        help="set logging level to DEBUG (default CRITICAL)",
        dest="log_level_debug",
        action="store_true",
    )
    sub_parsers = cli.add_subparsers()
    verify_parser = sub_parsers.add_parser(
        "verify",
        prog="certpin verify",
        description=cli.description,
        add_help=False,
        help="Check a server certificate is anchored to a pinned root",
        parents=[cli],
    )
    verify_parser.set_defaults(subcommand="verify")
    verify_parser.add_argument("-h", "--help", action=_HelpAction)
    verify_parser.add_argument(
        "-s",
        "--server-cert",
        help="path to the PEM or DER encoded certificate the server presented",
        dest="server_cert",
        required=True,
    )
    verify_parser.add_argument(
        "-r",
        "--trusted-root",
        help="path to the pinned root, PEM armored or bare base64 text",
        dest="trusted_root",
        required=True,
    )
    verify_parser.add_argument(
        "-d",
        "--domain",
        help="domain the connection is meant for",
        dest="domain",
        required=True,
    )
    verify_parser.add_argument(
        "-P",
        "--policy",
        help="chain_only ignores certificate names, strict_hostname also matches the domain (Default: from configuration)",
        dest="policy",
        choices=constants.POLICIES,
        default=None,
    )
    verify_parser.add_argument(
        "-i",
        "--intermediate",
        help="path to an untrusted intermediate certificate, may be repeated",
        dest="intermediates",
        action="append",
        default=[],
    )
    verify_parser.add_argument(
        "--at",
        help="ISO 8601 time to verify at instead of now, naive values are UTC",
        dest="at",
        default=None,
    )
    verify_parser.add_argument(
        "--json",
        help="print the structured result as JSON",
        dest="as_json",
        action="store_true",
    )
    info_parser = sub_parsers.add_parser(
        "info",
        prog="certpin info",
        description=cli.description,
        add_help=False,
        help="Show the details of PEM or DER encoded certificates",
        parents=[cli],
    )
    info_parser.set_defaults(subcommand="info")
    info_parser.add_argument("-h", "--help", action=_HelpAction)
    info_parser.add_argument("certs", nargs="+")
    args = cli.parse_args()
    if args.show_version:
        console.print(f"certpin=={__version__}\n{REMOTE_URL}")
        sys.exit(0)

    try:
        logger.info(f"subcommand {args.subcommand}")
    except AttributeError:
        cli.print_help()
        sys.exit(0)

    _configure_logging(args)
    out = None if args.quiet else console
    if args.subcommand == "info":
        sys.exit(info(args.certs, console=out))
    if args.subcommand == "verify":
        try:
            config = get_config(custom_values=load_config(args.config_file))
        except AttributeError as err:
            console.print(
                f"[{constants.CLI_COLOR_FAIL}]Invalid configuration[/{constants.CLI_COLOR_FAIL}] {err}"
            )
            sys.exit(2)
        sys.exit(
            verify(
                config,
                server_cert_path=args.server_cert,
                trusted_root_path=args.trusted_root,
                domain=args.domain,
                policy=args.policy,
                intermediate_paths=args.intermediates,
                at=args.at,
                as_json=args.as_json,
                console=out,
            )
        )


if __name__ == "__main__":
    main()
