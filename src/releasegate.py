"""ReleaseGate - patch upgrade audit and release artifact publishing

    Returns:
        int: Exit code
"""
import csv
import json
import logging
import os
import sys

from constants import ExitCodes, ReportFormats
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from release_config import ConfigError, load_release_config, parse_overrides
from versioning.audit import DependencyAudit
from versioning.catalog import load_catalog
from versioning.parser import MalformedVersionError, get_base_version
from versioning.patch_policy import is_acceptable_patch
from publishing.docs_upload import AmbiguousOutputError, JavadocPublisher, UploadError, find_bundle, find_single_output
from publishing.naming import build_descriptor

logger = logging.getLogger(__name__)


def export_csv(report, path):
    """Exports the audit results to a CSV file.

    Args:
        report (AuditReport): Audit report to export.
        path (str): File path to export the CSV.
    """
    headers = [
        "Alias",
        "Module",
        "Current Version",
        "Latest Acceptable",
        "Accepted Versions",
        "Rejected Count",
        "Candidate Count",
        "Error",
    ]
    rows = [headers]

    def _nv(v):
        return "" if v is None else v

    for r in report.results:
        rows.append([
            r.pin.alias,
            r.pin.module,
            r.pin.version,
            _nv(r.latest_acceptable),
            " ".join(r.accepted),
            r.rejected_count,
            r.candidate_count,
            _nv(r.error),
        ])
    try:
        with open(path, 'w', newline='', encoding='utf-8') as file:
            export = csv.writer(file)
            export.writerows(rows)
        logging.info("CSV file has been successfully exported at: %s", path)
    except (OSError, csv.Error) as e:
        logging.error("CSV file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def export_json(report, path):
    """Exports the audit results to a JSON file.

    Args:
        report (AuditReport): Audit report to export.
        path (str): File path to export the JSON.
    """
    data = {
        "updates": len(report.updates),
        "results": [r.to_dict() for r in report.results],
    }
    try:
        with open(path, 'w', encoding='utf-8') as file:
            json.dump(data, file, ensure_ascii=False, indent=4)
        logging.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def _report_format(args):
    if getattr(args, "OUTPUT_FORMAT", None):
        return args.OUTPUT_FORMAT.lower()
    lower = args.OUTPUT.lower()
    if lower.endswith(".csv"):
        return ReportFormats.CSV.value
    return ReportFormats.JSON.value


def _load_config(args):
    overrides = parse_overrides(getattr(args, "OVERRIDES", []))
    return load_release_config(args.PROJECT_DIR, getattr(args, "CONFIG", None), overrides)


def run_check_patch(args):
    """Print whether the candidate is an acceptable patch upgrade."""
    accepted = is_acceptable_patch(args.candidate, args.current)
    print("accept" if accepted else "reject")
    return ExitCodes.SUCCESS.value if accepted else ExitCodes.EXIT_WARNINGS.value


def run_base_version(args):
    """Print the base version of the given version."""
    print(get_base_version(args.version))
    return ExitCodes.SUCCESS.value


def run_describe(args):
    """Print the release descriptor."""
    config = _load_config(args)
    print(json.dumps(build_descriptor(config).to_dict(), indent=2))
    return ExitCodes.SUCCESS.value


def run_audit(args):
    """Audit the version catalog for acceptable patch upgrades."""
    config = _load_config(args)
    catalog_path = config.resolve_path(args.CATALOG or config.catalog_path)
    try:
        pins = load_catalog(catalog_path, config.properties)
    except FileNotFoundError:
        logging.error("Version catalog not found: %s", catalog_path)
        return ExitCodes.FILE_ERROR.value
    except ValueError as e:
        logging.error("Version catalog couldn't be parsed: %s", e)
        return ExitCodes.FILE_ERROR.value

    if not pins:
        logging.warning("No pinned libraries found in the version catalog.")
        return ExitCodes.SUCCESS.value

    report = DependencyAudit(config.repositories).run(pins)

    if getattr(args, "OUTPUT", None):
        if _report_format(args) == ReportFormats.CSV.value:
            export_csv(report, args.OUTPUT)
        else:
            export_json(report, args.OUTPUT)

    if all(r.error for r in report.results):
        logging.error("No registry metadata could be fetched for any library.")
        return ExitCodes.CONNECTION_ERROR.value

    if report.updates:
        logging.info("%d of %d libraries have patch updates available.", len(report.updates), len(report.results))
        if args.ERROR_ON_UPDATES:
            logging.error("Updates available, exiting with non-zero status code.")
            return ExitCodes.EXIT_WARNINGS.value
    else:
        logging.info("All %d libraries are on their latest acceptable patch.", len(report.results))
    return ExitCodes.SUCCESS.value


def run_publish_docs(args):
    """Upload the Javadoc bundle of this release."""
    config = _load_config(args)
    if args.DOCS_FILES:
        bundle = find_single_output([config.resolve_path(p) for p in args.DOCS_FILES])
    else:
        bundle = find_bundle(config.resolve_path(args.DOCS_DIR), args.DOCS_PATTERN)
    target = JavadocPublisher(config).publish(bundle, dry_run=args.DRY_RUN)
    print(target.uri)
    return ExitCodes.SUCCESS.value


_ACTIONS = {
    "check-patch": run_check_patch,
    "base-version": run_base_version,
    "describe": run_describe,
    "audit": run_audit,
    "publish-docs": run_publish_docs,
}


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    # Honor CLI --loglevel by passing it to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ['RELEASEGATE_LOG_LEVEL'] = str(args.LOG_LEVEL).upper()
    try:
        configure_logging(getattr(args, "LOG_FILE", None))
    except OSError as e:
        logging.error("Cannot open log file: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.action)
        )

    try:
        code = _ACTIONS[args.action](args)
    except ConfigError as e:
        logging.error("Configuration error: %s", e)
        code = ExitCodes.CONFIG_ERROR.value
    except MalformedVersionError as e:
        logging.error("%s", e)
        code = ExitCodes.VERSION_ERROR.value
    except (AmbiguousOutputError, UploadError) as e:
        logging.error("Publishing failed: %s", e)
        code = ExitCodes.PUBLISH_ERROR.value
    except OSError as e:
        logging.error("File error: %s", e)
        code = ExitCodes.FILE_ERROR.value

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(event="function_exit", component="cli", action=args.action, outcome=str(code))
        )
    sys.exit(code)


if __name__ == "__main__":
    main()
