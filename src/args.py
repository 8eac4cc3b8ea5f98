"""Argument parsing functionality for apkgate."""

import argparse

from constants import Commands


def build_parser():
    """Build the argument parser (exposed for tests)."""
    parser = argparse.ArgumentParser(
        prog="apkgate",
        description=(
            "apkgate - APK package extraction, lock reconciliation and pin updates for apko"
        ),
        add_help=True,
    )

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")

    commands = parser.add_subparsers(dest="COMMAND", required=True)

    extract = commands.add_parser(Commands.EXTRACT.value,
                                  help="Extract package dependencies from an apko.yaml")
    extract.add_argument("FILE", help="Path to apko.yaml")
    extract.add_argument("-o", "--output",
                         dest="OUTPUT",
                         help="Path to JSON output file",
                         action="store",
                         type=str)

    update = commands.add_parser(Commands.UPDATE.value,
                                 help="Rewrite the pinned version of one package")
    update.add_argument("FILE", help="Path to apko.yaml")
    update.add_argument("-p", "--package", dest="PACKAGE", required=True,
                        help="Package name")
    update.add_argument("--current", dest="CURRENT", required=True,
                        help="Version currently expected in the file")
    update.add_argument("--new", dest="NEW", required=True,
                        help="Version to write")
    update.add_argument("-w", "--write", dest="WRITE", action="store_true",
                        help="Write the result back instead of printing it")

    compare = commands.add_parser(Commands.COMPARE.value,
                                  help="Compare two APK versions (prints -1, 0 or 1)")
    compare.add_argument("VERSION_A")
    compare.add_argument("VERSION_B")

    releases = commands.add_parser(Commands.RELEASES.value,
                                   help="List available versions of a package")
    releases.add_argument("PACKAGE", help="Package name")
    releases.add_argument("-r", "--registry", dest="REGISTRY", action="append",
                          type=str, default=[],
                          help="APK repository URL (can be used multiple times)")
    releases.add_argument("--arch", dest="ARCH", type=str,
                          help="Architecture (default: x86_64)")

    lock = commands.add_parser(Commands.LOCK.value,
                               help="Regenerate apko.lock.json with 'apko lock'")
    lock.add_argument("FILE", help="Path to apko.yaml")
    lock.add_argument("-m", "--maintenance", dest="MAINTENANCE", action="store_true",
                      help="Regenerate even when no package was updated")
    lock.add_argument("-p", "--package", dest="UPDATED", action="append",
                      type=str, default=[],
                      help="Name of an updated package (can be used multiple times)")

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
