"""apkgate - APK dependency extraction and pin updates for apko images.

    Returns:
        int: Exit code
"""
import json
import logging
import sys

from args import parse_args
from cli_config import apply_config, load_config
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Commands, ExitCodes
from datasource.apk import ApkDatasource
from manager.apko.artifacts import update_artifacts
from manager.apko.extract import extract_package_file, read_local_file
from manager.apko.update import update_dependency
from versioning import apk as apk_versioning

logger = logging.getLogger(__name__)


def load_file(file_name):
    """Loads a text file or exits with FILE_ERROR.

    Args:
        file_name (str): File path.

    Returns:
        str: File content
    """
    try:
        with open(file_name, encoding='utf-8') as file:
            return file.read()
    except FileNotFoundError as e:
        logging.error("File not found: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except IOError as e:
        logging.error("IO error: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def emit(args, payload, output=None):
    """Print a JSON payload (unless quiet) and optionally write it to a file."""
    text = json.dumps(payload, indent=2)
    if output:
        try:
            with open(output, "w", encoding="utf-8") as file:
                file.write(text + "\n")
            logging.info("JSON file created at %s", output)
        except OSError as e:
            logging.error("JSON file couldn't be written to disk: %s", e)
            sys.exit(ExitCodes.FILE_ERROR.value)
    if not args.QUIET:
        print(text)


def run_extract(args):
    """Handle the extract command."""
    content = load_file(args.FILE)
    result = extract_package_file(content, args.FILE, read_local_file)
    if result is None:
        logging.warning("No packages found in %s.", args.FILE)
        return ExitCodes.SUCCESS.value
    logging.info("Found %d packages in %s.", len(result.deps), args.FILE)
    emit(args, result.to_dict(), getattr(args, "OUTPUT", None))
    return ExitCodes.SUCCESS.value


def run_update(args):
    """Handle the update command."""
    content = load_file(args.FILE)
    new_content = update_dependency(content, args.PACKAGE, args.CURRENT, args.NEW)
    if new_content is None:
        logging.error("Could not update %s to %s in %s.", args.PACKAGE, args.NEW, args.FILE)
        return ExitCodes.UPDATE_FAILED.value
    if new_content == content:
        logging.info("%s is already at %s.", args.PACKAGE, args.NEW)
    if args.WRITE:
        if new_content != content:
            try:
                with open(args.FILE, "w", encoding="utf-8") as file:
                    file.write(new_content)
            except OSError as e:
                logging.error("Failed to write %s: %s", args.FILE, e)
                return ExitCodes.FILE_ERROR.value
            logging.info("Updated %s to %s in %s.", args.PACKAGE, args.NEW, args.FILE)
    elif not args.QUIET:
        sys.stdout.write(new_content)
    return ExitCodes.SUCCESS.value


def run_compare(args):
    """Handle the compare command."""
    for version in (args.VERSION_A, args.VERSION_B):
        if not apk_versioning.is_valid(version):
            logging.warning("%s is not a valid APK version.", version)
    result = apk_versioning.compare(args.VERSION_A, args.VERSION_B)
    if not args.QUIET:
        print(int(result))
    return ExitCodes.SUCCESS.value


def run_releases(args):
    """Handle the releases command."""
    datasource = ApkDatasource()
    result = datasource.get_releases(args.PACKAGE, args.REGISTRY or None, args.ARCH)
    if result is None:
        logging.warning("Package %s not found.", args.PACKAGE)
        return ExitCodes.EXIT_WARNINGS.value
    versions = [release.version for release in result.releases]
    emit(args, {
        "package": args.PACKAGE,
        "registryUrl": result.registry_url,
        "releases": [
            {"version": r.version, "releaseTimestamp": r.release_timestamp}
            for r in result.releases
        ],
        "latest": apk_versioning.get_latest(versions),
    })
    return ExitCodes.SUCCESS.value


def run_lock(args):
    """Handle the lock command."""
    content = load_file(args.FILE)
    results = update_artifacts(args.FILE, args.UPDATED, content, args.MAINTENANCE)
    if not results:
        logging.info("Lock file unchanged.")
        return ExitCodes.SUCCESS.value
    emit(args, [result.to_dict() for result in results])
    if any(result.artifact_error for result in results):
        return ExitCodes.FILE_ERROR.value
    return ExitCodes.SUCCESS.value


HANDLERS = {
    Commands.EXTRACT.value: run_extract,
    Commands.UPDATE.value: run_update,
    Commands.COMPARE.value: run_compare,
    Commands.RELEASES.value: run_releases,
    Commands.LOCK.value: run_lock,
}


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE)
    apply_config(load_config(args.CONFIG))

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.COMMAND)
        )

    exit_code = HANDLERS[args.COMMAND](args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(
                event="function_exit",
                component="cli",
                action=args.COMMAND,
                outcome="success" if exit_code == ExitCodes.SUCCESS.value else "failure"
            )
        )
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
